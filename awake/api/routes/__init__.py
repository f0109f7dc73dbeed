"""API routes."""

from awake.api.routes.chat import router as chat_router
from awake.api.routes.health import router as health_router

__all__ = ["chat_router", "health_router"]
