"""Health check endpoints."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from awake.core.config import Settings, get_settings
from awake.models.providers import BackendHealth
from awake.services.router import ChatRouter

router = APIRouter(prefix="/api", tags=["System"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: datetime
    service: str
    version: str
    environment: str
    backend_available: bool
    uptime_seconds: float


class BackendHealthResponse(BaseModel):
    """Backend health response model."""

    status: str
    checked_at: datetime
    backend: BackendHealth


class PingResponse(BaseModel):
    """Liveness probe response model."""

    message: str
    timestamp: datetime
    environment: str


def get_model_router(request: Request) -> ChatRouter:
    """Return the model router created during application startup."""
    return request.app.state.model_router


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_settings),
    model_router: ChatRouter = Depends(get_model_router),
) -> HealthResponse:
    """
    Health check endpoint.

    Reports liveness and whether the AI backend is configured.
    """
    started_at = getattr(request.app.state, "started_at", None)
    uptime = time.monotonic() - started_at if started_at is not None else 0.0

    return HealthResponse(
        status="ok",
        timestamp=datetime.now(UTC),
        service=settings.app_name,
        version=settings.version,
        environment=settings.environment,
        backend_available=model_router.available,
        uptime_seconds=round(uptime, 3),
    )


@router.get("/health/backend", response_model=BackendHealthResponse)
async def backend_health_check(
    model_router: ChatRouter = Depends(get_model_router),
) -> BackendHealthResponse:
    """Report readiness details for the upstream completion backend."""
    backend = model_router.health()
    return BackendHealthResponse(
        status="healthy" if backend.available else "degraded",
        checked_at=datetime.now(UTC),
        backend=backend,
    )


@router.get("/test", response_model=PingResponse)
async def ping(settings: Settings = Depends(get_settings)) -> PingResponse:
    """Simple liveness probe."""
    return PingResponse(
        message="Server is running!",
        timestamp=datetime.now(UTC),
        environment=settings.environment,
    )
