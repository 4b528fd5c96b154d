"""
Subscriber repository for database access.

Encapsulates all Supabase queries and data mapping for the
``subscribers`` table.
"""

from typing import Optional, Any

from postgrest.exceptions import APIError

from shared.database import FOREIGN_KEY_VIOLATION, INVALID_TEXT_REPRESENTATION, is_unique_violation
from shared.repository import BaseRepository
from .exceptions import DuplicateSubscriberError, SubscriberNotFoundError, SubscriberValidationError
from .models import (
    Subscriber,
    SubscriberDraft,
    SubscriberPreferences,
    SubscriberSource,
    SubscriberStatus,
)


class SubscriberRepository(BaseRepository[Subscriber]):
    """
    Repository for newsletter subscribers.
    """

    table_name = "subscribers"

    def get_by_email(self, email: str) -> Optional[Subscriber]:
        """Case-insensitive lookup; emails are stored lowercased."""
        result = (
            self._table()
            .select("*")
            .eq("email", email.strip().lower())
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return self._map_to_subscriber(result.data[0])

    def create(self, draft: SubscriberDraft) -> Subscriber:
        """
        Insert a new subscriber.

        Raises:
            DuplicateSubscriberError: If the email is already stored
            SubscriberValidationError: If member_id does not name a stored member
        """
        row = {
            "first_name": draft.first_name,
            "email": draft.email,
            "source": draft.source.value,
            "member_id": str(draft.member_id) if draft.member_id else None,
            "preferences": draft.preferences.model_dump(),
            "status": SubscriberStatus.ACTIVE.value,
        }
        try:
            result = self._table().insert(row).execute()
        except APIError as e:
            if is_unique_violation(e):
                raise DuplicateSubscriberError(draft.email)
            if e.code in (FOREIGN_KEY_VIOLATION, INVALID_TEXT_REPRESENTATION):
                raise SubscriberValidationError(
                    "Member not found",
                    [{"field": "memberId", "message": "Member not found"}],
                )
            raise
        return self._map_to_subscriber(result.data[0])

    def reactivate(self, subscriber_id: str, first_name: str) -> Subscriber:
        """Set an unsubscribed email back to active, refreshing the name."""
        return self._update(subscriber_id, {
            "status": SubscriberStatus.ACTIVE.value,
            "first_name": first_name,
        })

    def set_status(self, subscriber_id: str, status: SubscriberStatus) -> Subscriber:
        return self._update(subscriber_id, {"status": status.value})

    def count_active(self) -> int:
        result = (
            self._table()
            .select("id", count="exact")
            .eq("status", SubscriberStatus.ACTIVE.value)
            .execute()
        )
        return result.count or 0

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _update(self, subscriber_id: str, values: dict[str, Any]) -> Subscriber:
        result = self._table().update(values).eq("id", subscriber_id).execute()
        if not result.data:
            raise SubscriberNotFoundError(subscriber_id)
        return self._map_to_subscriber(result.data[0])

    @staticmethod
    def _map_to_subscriber(data: dict[str, Any]) -> Subscriber:
        """Map database row to Subscriber model."""
        return Subscriber(
            id=str(data["id"]),
            first_name=data["first_name"],
            email=data["email"],
            status=SubscriberStatus(data.get("status") or SubscriberStatus.ACTIVE.value),
            preferences=SubscriberPreferences(**(data.get("preferences") or {})),
            source=SubscriberSource(data.get("source") or SubscriberSource.WEBSITE.value),
            member_id=data.get("member_id"),
            welcome_sent=data.get("welcome_sent", False),
            welcome_sent_at=data.get("welcome_sent_at"),
            created_at=data["created_at"],
            updated_at=data.get("updated_at"),
        )
