"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness, and
the API index.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import ServiceContainer, get_container

logger = logging.getLogger(__name__)

router = APIRouter()

ENDPOINTS = {
    "members": "/api/members",
    "memberCount": "/api/members/count",
    "recentMembers": "/api/members/recent",
    "webhook": "/api/members/webhook",
    "webhookTest": "/api/members/webhook/test",
    "subscribers": "/api/subscribers",
    "live": "/api/live",
    "liveStream": "/api/live/stream",
    "health": "/api/health",
}


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    timestamp: datetime
    viewers: int


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str
    geocoding: str
    crm: str


class ApiInfoResponse(BaseModel):
    name: str
    version: str
    endpoints: dict[str, str]


@router.get("", response_model=ApiInfoResponse)
async def api_info(container: ServiceContainer = Depends(get_container)) -> ApiInfoResponse:
    """List the public endpoints."""
    settings = container.settings
    return ApiInfoResponse(name=settings.app_name, version=settings.app_version, endpoints=ENDPOINTS)


@router.get("/health", response_model=HealthResponse)
async def health_check(container: ServiceContainer = Depends(get_container)) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(
        status="healthy",
        version=container.settings.app_version,
        timestamp=datetime.now(timezone.utc),
        viewers=container.broadcaster.viewer_count,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(container: ServiceContainer = Depends(get_container)) -> ReadinessResponse:
    """
    Readiness check endpoint.

    Counts pins to prove the store is reachable. Geocoding and CRM are
    reported but never make the service unready: both degrade gracefully.
    """
    settings = container.settings
    try:
        await container.members.count()
        database = "connected"
    except Exception as e:
        logger.warning(f"Readiness check could not reach the database: {e}")
        database = "unavailable"

    return ReadinessResponse(
        status="ready" if database == "connected" else "degraded",
        database=database,
        geocoding="configured" if settings.mapbox_access_token else "fallback-only",
        crm="configured" if settings.crm_webhook_url else "disabled",
    )
