"""
Member repository for database access.

Encapsulates all Supabase queries and data mapping for the ``members``
table. Listing and counting only ever see pins that are both active and
verified; the flags default to true, so the gate is dormant until a
moderator flips one.
"""

from typing import Optional, Any

from postgrest.exceptions import APIError

from shared.database import INVALID_TEXT_REPRESENTATION, is_unique_violation
from shared.repository import BaseRepository
from .exceptions import DuplicateMemberError
from .models import (
    Member,
    MemberDraft,
    MemberLocation,
    MemberSource,
    PetStatus,
    PetType,
    RECENT_LIMIT_MAX,
    format_location,
)
from modules.locations.models import GeoPoint

MAP_COLUMNS = (
    "id, pet_name, pet_type, pet_status, city, state, country, "
    "formatted_location, longitude, latitude, created_at"
)


class MemberRepository(BaseRepository[Member]):
    """
    Repository for member (pin) data access.

    All methods return Pydantic models with proper mapping from database rows.
    """

    table_name = "members"

    def create(self, draft: MemberDraft) -> Member:
        """
        Insert a validated pin.

        Args:
            draft: Validated member fields

        Returns:
            Created Member with generated ID and timestamps.

        Raises:
            DuplicateMemberError: If a uniqueness constraint rejects the row
        """
        try:
            result = self._table().insert(self._to_row(draft)).execute()
        except APIError as e:
            if is_unique_violation(e):
                raise DuplicateMemberError(e.details)
            raise
        return self._map_to_member(result.data[0])

    def get_by_id(self, member_id: str) -> Optional[Member]:
        """
        Get an active pin by ID.

        Returns:
            Member, or None if missing, hidden by moderation or the ID is malformed.
        """
        try:
            result = self._active(self._table().select("*").eq("id", member_id)).execute()
        except APIError as e:
            if e.code == INVALID_TEXT_REPRESENTATION:
                return None
            raise

        if not result.data:
            return None
        return self._map_to_member(result.data[0])

    def list_active(self) -> list[Member]:
        """All active pins for the map, newest first."""
        result = self._active(
            self._table().select(MAP_COLUMNS)
        ).order("created_at", desc=True).execute()
        return [self._map_to_member(row) for row in result.data]

    def count_active(self) -> int:
        """Number of active pins."""
        result = self._active(self._table().select("id", count="exact")).execute()
        return result.count or 0

    def list_recent(self, limit: int) -> list[Member]:
        """The ``limit`` newest active pins (capped)."""
        limit = max(1, min(limit, RECENT_LIMIT_MAX))
        result = self._active(
            self._table().select(MAP_COLUMNS)
        ).order("created_at", desc=True).limit(limit).execute()
        return [self._map_to_member(row) for row in result.data]

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _active(query):
        """Apply the moderation gate."""
        return query.eq("is_active", True).eq("is_verified", True)

    @staticmethod
    def _to_row(draft: MemberDraft) -> dict[str, Any]:
        """Map a draft to a database row; the display string is rebuilt here."""
        location = draft.location
        return {
            "pet_name": draft.pet_name,
            "pet_type": draft.pet_type.value,
            "pet_status": draft.pet_status.value,
            "city": location.city,
            "state": location.state,
            "country": location.country,
            "formatted_location": format_location(location.city, location.state, location.country),
            "longitude": draft.coordinates.longitude,
            "latitude": draft.coordinates.latitude,
            "first_name": draft.first_name,
            "email": draft.email,
            "source": draft.source.value,
            "affiliate_id": draft.affiliate_id,
            "is_verified": draft.is_verified,
            "is_active": draft.is_active,
        }

    @staticmethod
    def _map_to_member(data: dict[str, Any]) -> Member:
        """Map database row to Member model."""
        return Member(
            id=str(data["id"]),
            pet_name=data["pet_name"],
            pet_type=PetType(data["pet_type"]),
            pet_status=PetStatus(data.get("pet_status") or PetStatus.WITH_YOU.value),
            location=MemberLocation(
                city=data.get("city") or "",
                state=data.get("state") or "",
                country=data.get("country") or "",
                formatted=data.get("formatted_location") or data.get("city") or "",
            ),
            coordinates=GeoPoint(
                longitude=float(data["longitude"]),
                latitude=float(data["latitude"]),
            ),
            first_name=data.get("first_name"),
            email=data.get("email"),
            source=MemberSource(data.get("source") or MemberSource.WEBSITE.value),
            affiliate_id=data.get("affiliate_id"),
            is_verified=data.get("is_verified", True),
            is_active=data.get("is_active", True),
            created_at=data["created_at"],
            updated_at=data.get("updated_at"),
        )
