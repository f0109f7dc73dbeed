"""Identifier generation."""

import secrets
import uuid


def generate_request_id() -> str:
    """
    Generate a unique request ID for log correlation.

    Returns:
        A request ID in format: req_<32 hex chars>
    """
    return f"req_{secrets.token_hex(16)}"


def generate_response_id() -> str:
    """Generate the identifier of a chat response envelope."""
    return str(uuid.uuid4())
