"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
an in-memory pin store, a scripted geocoder, seeded randomness and an app
wired to those fakes.
"""

import random
import uuid
from datetime import datetime, timezone, timedelta
from typing import Optional

import pytest

from api.dependencies import ServiceContainer
from modules.live.broadcaster import LiveBroadcaster
from modules.locations.exceptions import GeocodingUnavailableError
from modules.locations.models import GeocodeMatch
from modules.locations.service import LocationResolver
from modules.members.models import Member, MemberDraft, RECENT_LIMIT_MAX
from modules.members.service import MemberService
from shared.config import Settings, get_settings


class StubGeocoder:
    """Geocoder that returns a fixed match, None, or raises."""

    def __init__(self, match: Optional[GeocodeMatch] = None, error: Optional[Exception] = None):
        self.match = match
        self.error = error
        self.queries: list[str] = []

    async def geocode(self, search_text: str) -> Optional[GeocodeMatch]:
        self.queries.append(search_text)
        if self.error is not None:
            raise self.error
        return self.match


class InMemoryMemberRepository:
    """Dict-backed stand-in for MemberRepository."""

    def __init__(self):
        self.rows: dict[str, Member] = {}
        self.fail_with: Optional[Exception] = None
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def create(self, draft: MemberDraft) -> Member:
        if self.fail_with is not None:
            raise self.fail_with
        self._clock += timedelta(seconds=1)
        member = Member(
            id=str(uuid.uuid4()),
            **draft.model_dump(exclude={"location_mode"}),
            created_at=self._clock,
        )
        self.rows[member.id] = member
        return member

    def _visible(self) -> list[Member]:
        members = [m for m in self.rows.values() if m.is_active and m.is_verified]
        return sorted(members, key=lambda m: m.created_at, reverse=True)

    def get_by_id(self, member_id: str) -> Optional[Member]:
        member = self.rows.get(member_id)
        if member is None or not (member.is_active and member.is_verified):
            return None
        return member

    def list_active(self) -> list[Member]:
        return self._visible()

    def count_active(self) -> int:
        return len(self._visible())

    def list_recent(self, limit: int) -> list[Member]:
        return self._visible()[: max(1, min(limit, RECENT_LIMIT_MAX))]


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with rate limiting off and no external services."""
    return Settings(
        _env_file=None,
        rate_limit_enabled=False,
        webhook_secret="",
        mapbox_access_token="",
        crm_webhook_url="",
    )


@pytest.fixture
def geocoder() -> StubGeocoder:
    """Geocoder that is down by default."""
    return StubGeocoder(error=GeocodingUnavailableError("Geocoding request timed out"))


@pytest.fixture
def resolver(geocoder, rng) -> LocationResolver:
    return LocationResolver(geocoder=geocoder, rng=rng)


@pytest.fixture
def member_repository() -> InMemoryMemberRepository:
    return InMemoryMemberRepository()


@pytest.fixture
def broadcaster() -> LiveBroadcaster:
    return LiveBroadcaster(queue_size=10)


@pytest.fixture
def member_service(member_repository, resolver, broadcaster) -> MemberService:
    return MemberService(
        repository=member_repository,
        resolver=resolver,
        broadcaster=broadcaster,
    )


@pytest.fixture
def container(test_settings, broadcaster, member_service, member_repository) -> ServiceContainer:
    """Container whose member side runs on the in-memory fakes."""
    container = ServiceContainer(settings=test_settings, broadcaster=broadcaster, db=object())
    container._member_repository = member_repository
    container._member_service = member_service
    return container


@pytest.fixture
def app(container):
    """Create a fresh app for each test."""
    from api.app import create_app

    return create_app(container)

