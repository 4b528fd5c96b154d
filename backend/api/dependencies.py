"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

The application factory builds one container and stores it on
``app.state``; handlers reach it through the connection they serve, so
the live broadcaster is an owned instance rather than a module global.
"""

from typing import TYPE_CHECKING, Optional

from fastapi.requests import HTTPConnection

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client
    from api.middleware.rate_limit import RateLimiter
    from modules.crm.interfaces import ICRMForwarder
    from modules.live.broadcaster import LiveBroadcaster
    from modules.locations.interfaces import ILocationResolver
    from modules.members.interfaces import IMemberService, IMemberRepository
    from modules.subscribers.interfaces import ISubscriberService, ISubscriberRepository


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access, except the
    broadcaster, which exists from construction so viewers can connect
    before the first pin arrives.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        broadcaster: "Optional[LiveBroadcaster]" = None,
        db: "Optional[Client]" = None,
    ) -> None:
        from api.middleware.rate_limit import build_rate_limiters
        from modules.live.broadcaster import LiveBroadcaster

        self.settings = settings or get_settings()
        self.broadcaster = broadcaster or LiveBroadcaster(queue_size=self.settings.live_queue_size)
        self.rate_limiters: "dict[str, RateLimiter]" = build_rate_limiters(self.settings)
        self._db = db
        self._resolver: "ILocationResolver | None" = None
        self._crm: "ICRMForwarder | None" = None
        self._member_repository: "IMemberRepository | None" = None
        self._member_service: "IMemberService | None" = None
        self._subscriber_repository: "ISubscriberRepository | None" = None
        self._subscriber_service: "ISubscriberService | None" = None

    @property
    def db(self) -> "Client":
        """Get the Supabase client."""
        if self._db is None:
            from shared.database import get_supabase_client
            self._db = get_supabase_client()
        return self._db

    @property
    def resolver(self) -> "ILocationResolver":
        """Get the location resolver instance."""
        if self._resolver is None:
            from modules.locations.service import create_location_resolver
            self._resolver = create_location_resolver(self.settings)
        return self._resolver

    @property
    def crm(self) -> "ICRMForwarder":
        """Get the CRM forwarder instance."""
        if self._crm is None:
            from modules.crm.forwarder import create_crm_forwarder
            self._crm = create_crm_forwarder(self.settings)
        return self._crm

    @property
    def member_repository(self) -> "IMemberRepository":
        """Get the member repository instance."""
        if self._member_repository is None:
            from modules.members.repository import MemberRepository
            self._member_repository = MemberRepository(self.db)
        return self._member_repository

    @property
    def members(self) -> "IMemberService":
        """Get the member service instance."""
        if self._member_service is None:
            from modules.members.service import MemberService
            self._member_service = MemberService(
                repository=self.member_repository,
                resolver=self.resolver,
                broadcaster=self.broadcaster,
                crm=self.crm,
            )
        return self._member_service

    @property
    def subscriber_repository(self) -> "ISubscriberRepository":
        """Get the subscriber repository instance."""
        if self._subscriber_repository is None:
            from modules.subscribers.repository import SubscriberRepository
            self._subscriber_repository = SubscriberRepository(self.db)
        return self._subscriber_repository

    @property
    def subscribers(self) -> "ISubscriberService":
        """Get the subscriber service instance."""
        if self._subscriber_service is None:
            from modules.subscribers.service import SubscriberService
            self._subscriber_service = SubscriberService(self.subscriber_repository)
        return self._subscriber_service

    def reset(self) -> None:
        """
        Reset all cached services.

        The broadcaster is kept: connected viewers belong to the process,
        not to any one service instance.
        """
        self._resolver = None
        self._crm = None
        self._member_repository = None
        self._member_service = None
        self._subscriber_repository = None
        self._subscriber_service = None
        for limiter in self.rate_limiters.values():
            limiter.reset()


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls.
# HTTPConnection covers both HTTP requests and WebSocket connections.


def get_container(conn: HTTPConnection) -> ServiceContainer:
    """The container owned by the running application."""
    return conn.app.state.container


def get_app_settings(conn: HTTPConnection) -> Settings:
    """Settings the running application was built with."""
    return get_container(conn).settings


def get_member_service(conn: HTTPConnection) -> "IMemberService":
    """FastAPI dependency for member service."""
    return get_container(conn).members


def get_subscriber_service(conn: HTTPConnection) -> "ISubscriberService":
    """FastAPI dependency for subscriber service."""
    return get_container(conn).subscribers


def get_broadcaster(conn: HTTPConnection) -> "LiveBroadcaster":
    """FastAPI dependency for the live broadcaster."""
    return get_container(conn).broadcaster
