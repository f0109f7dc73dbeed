"""Services for the application."""

from awake.services.automations import detect_automations
from awake.services.chat import ChatHandler, EmptyMessageError
from awake.services.router import (
    BackendError,
    ChatRouter,
    ClientValidationError,
    DegradedModelRouter,
    InvalidModelError,
    MissingCredentialError,
    ModelConfigurationError,
    ModelRouter,
    create_model_router,
)

__all__ = [
    "BackendError",
    "ChatHandler",
    "ChatRouter",
    "ClientValidationError",
    "DegradedModelRouter",
    "EmptyMessageError",
    "InvalidModelError",
    "MissingCredentialError",
    "ModelConfigurationError",
    "ModelRouter",
    "create_model_router",
    "detect_automations",
]
