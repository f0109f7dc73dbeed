"""Main FastAPI application."""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from awake.api.middleware import RequestIDMiddleware
from awake.api.routes import chat_router, health_router
from awake.core.config import get_settings
from awake.core.logging import get_logger, setup_logging
from awake.services.chat import ChatHandler
from awake.services.router import create_model_router

settings = get_settings()
setup_logging(settings)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Builds the model router once at startup (degraded if the backend
    cannot be configured) and closes it on shutdown.
    """
    logger.info(
        "Starting AWAKE gateway",
        extra={
            "version": settings.version,
            "environment": settings.environment,
            "debug": settings.debug,
        },
    )

    model_router = create_model_router(settings.openrouter)
    app.state.model_router = model_router
    app.state.chat_handler = ChatHandler(model_router)
    app.state.started_at = time.monotonic()

    logger.info(
        "Model router ready",
        extra={"backend_available": model_router.available},
    )

    yield

    await model_router.aclose()
    logger.info("Shutting down AWAKE gateway")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="Multi-model AI gateway with simulated automations",
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        debug=settings.debug,
    )

    # Request ID middleware first so every request is tracked
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(chat_router)

    logger.info("FastAPI application created successfully")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "awake.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
