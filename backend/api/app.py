"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import get_settings
from .dependencies import ServiceContainer
from .routes import health
from modules.live.routes import router as live_router
from modules.members.routes import router as members_router
from modules.subscribers.routes import router as subscribers_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = app.state.container.settings
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    if not settings.mapbox_access_token:
        logger.warning("MAPBOX_ACCESS_TOKEN not set; every city pin will use the fallback table")
    if not settings.webhook_secret:
        logger.warning("WEBHOOK_SECRET not set; webhook endpoints accept unsigned requests")
    yield
    # Shutdown
    logger.info(
        f"Shutting down {settings.app_name} "
        f"({app.state.container.broadcaster.viewer_count} viewers connected)"
    )


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        container: Pre-built services (tests); a fresh one by default

    Returns:
        Configured FastAPI instance
    """
    container = container or ServiceContainer()
    settings = container.settings

    app = FastAPI(
        title=settings.app_name,
        description="Pet pin world map with live updates",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )
    app.state.container = container

    # Configure CORS
    origins = list(settings.cors_origins)
    if settings.frontend_url and settings.frontend_url not in origins:
        origins.append(settings.frontend_url)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(members_router, prefix="/api/members", tags=["members"])
    app.include_router(subscribers_router, prefix="/api/subscribers", tags=["subscribers"])
    app.include_router(live_router, prefix="/api/live", tags=["live"])

    return app


# Application instance for uvicorn
app = create_app()
