"""Data models for the application."""

from awake.models.chat import AutomationAction, AutomationType, ChatRequest, ChatResponse
from awake.models.providers import (
    FALLBACK_MODEL,
    MODEL_MAPPINGS,
    SUPPORTED_MODELS,
    BackendHealth,
    ChatOutcome,
    LogicalModel,
    ModelChoice,
)

__all__ = [
    "AutomationAction",
    "AutomationType",
    "BackendHealth",
    "ChatOutcome",
    "ChatRequest",
    "ChatResponse",
    "FALLBACK_MODEL",
    "LogicalModel",
    "MODEL_MAPPINGS",
    "ModelChoice",
    "SUPPORTED_MODELS",
]
