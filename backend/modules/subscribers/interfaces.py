"""
Subscribers module interface.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import Subscriber, SubscriberDraft, SubscriberStatus, SubscriptionResult


@runtime_checkable
class ISubscriberRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[Subscriber]:
        ...

    def create(self, draft: SubscriberDraft) -> Subscriber:
        """Raises DuplicateSubscriberError when the email is taken."""
        ...

    def reactivate(self, subscriber_id: str, first_name: str) -> Subscriber:
        ...

    def set_status(self, subscriber_id: str, status: SubscriberStatus) -> Subscriber:
        ...

    def count_active(self) -> int:
        ...


@runtime_checkable
class ISubscriberService(Protocol):
    """
    Interface for newsletter operations.
    """

    async def subscribe(
        self,
        first_name: Optional[str],
        email: Optional[str],
        member_id: Optional[str] = None,
    ) -> SubscriptionResult:
        """
        Subscribe an email. Idempotent.

        Returns:
            SubscriptionResult: CREATED for a new email, REACTIVATED for a
            previously unsubscribed one, EXISTING otherwise (no change)

        Raises:
            SubscriberValidationError: If the name or email is missing or malformed
        """
        ...

    async def unsubscribe(self, email: Optional[str]) -> Subscriber:
        """
        Raises:
            SubscriberValidationError: If no email was given
            SubscriberNotFoundError: If the email is not on the list
        """
        ...

    async def active_count(self) -> int:
        ...
