"""Model identifiers and backend-related models."""

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from pydantic import BaseModel, ConfigDict, Field


class ModelChoice(StrEnum):
    """Model selections a caller may request."""

    AUTO = "auto"
    GPT = "gpt"
    CLAUDE = "claude"
    LLAMA = "llama"


class LogicalModel(StrEnum):
    """Concrete models a request can be routed to."""

    GPT = "gpt"
    CLAUDE = "claude"
    LLAMA = "llama"


# Sentinel reported by the degraded router in place of a logical model
FALLBACK_MODEL: Final = "fallback"

MODEL_MAPPINGS: Final[Mapping[str, str]] = MappingProxyType(
    {
        LogicalModel.GPT: "openai/gpt-4o",
        LogicalModel.CLAUDE: "anthropic/claude-3.5-sonnet",
        LogicalModel.LLAMA: "meta-llama/llama-3.1-70b-instruct",
    }
)

SUPPORTED_MODELS: Final = tuple(LogicalModel)


def lookup_provider_model(model: str, mappings: Mapping[str, str] = MODEL_MAPPINGS) -> str | None:
    """
    Map a logical model to its provider-qualified upstream identifier.

    Args:
        model: Logical model identifier
        mappings: Mapping table to consult

    Returns:
        Provider model string, or None when the table has no entry
    """
    return mappings.get(model)


class ChatOutcome(BaseModel):
    """Normalized result of a routed chat call."""

    model_config = ConfigDict(protected_namespaces=())

    content: str = Field(description="Generated content")
    model_used: str = Field(description="Logical model that produced the content")


class BackendHealth(BaseModel):
    """Health status for the upstream completion backend."""

    available: bool = Field(description="Whether chat requests reach the upstream backend")
    api_key_present: bool = Field(description="Whether the backend credential was found")
    reason: str = Field(description="Human-readable status reason")
    models: dict[str, str] = Field(
        default_factory=dict, description="Logical to provider model mapping"
    )
