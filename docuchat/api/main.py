"""
FastAPI application with assembled routers.

Builds the service container at startup, registers error handlers,
middleware and routers, and launches uvicorn when run directly.

Dependencies: fastapi, uvicorn, docuchat.api.routers, docuchat.api.deps
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docuchat.api.deps.container import ServiceContainer
from docuchat.api.errors import register_exception_handlers
from docuchat.configs import get_settings
from docuchat.observability import configure_logging
from docuchat.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import chat_router, documents_router, health_router, sessions_router

logger = logging.getLogger(__name__)


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        container: Pre-built service container; built from settings at
            startup when omitted

    Returns:
        FastAPI: Configured application instance with all routers registered
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        owned = container is None
        if owned:
            settings = get_settings()
            configure_logging(settings.log_level)
            app.state.container = ServiceContainer.build(settings)
        else:
            app.state.container = container
        logger.info(f"{__name__}:lifespan - Service container attached")

        yield

        # Shutdown
        if owned:
            await app.state.container.aclose()
            logger.info(f"{__name__}:lifespan - Service container closed")

    app = FastAPI(
        title="DocuChat API",
        description="Document upload and contextual chat over session-scoped content",
        version="0.1.0",
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Observability middleware (last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    register_exception_handlers(app)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(sessions_router, prefix="/api/v1")
    app.include_router(chat_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "docuchat.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
