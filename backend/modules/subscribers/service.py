"""
Subscriber service implementation.
"""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .exceptions import (
    DuplicateSubscriberError,
    SubscriberNotFoundError,
    SubscriberValidationError,
)
from .interfaces import ISubscriberRepository, ISubscriberService
from .models import (
    SubscribeOutcome,
    Subscriber,
    SubscriberDraft,
    SubscriberStatus,
    SubscriptionResult,
)

logger = logging.getLogger(__name__)


class SubscriberService(ISubscriberService):
    """
    Newsletter sign-up service.

    Implements ISubscriberService.
    """

    def __init__(self, repository: ISubscriberRepository):
        self._repository = repository

    async def subscribe(
        self,
        first_name: Optional[str],
        email: Optional[str],
        member_id: Optional[str] = None,
    ) -> SubscriptionResult:
        draft = self._validate(first_name, email, member_id)

        existing = self._repository.get_by_email(draft.email)
        if existing is not None:
            if existing.status == SubscriberStatus.UNSUBSCRIBED:
                subscriber = self._repository.reactivate(existing.id, draft.first_name)
                logger.info(f"Subscriber reactivated: {subscriber.email}")
                return SubscriptionResult(outcome=SubscribeOutcome.REACTIVATED, subscriber=subscriber)
            return SubscriptionResult(outcome=SubscribeOutcome.EXISTING, subscriber=existing)

        try:
            subscriber = self._repository.create(draft)
        except DuplicateSubscriberError:
            # Lost a race with a concurrent sign-up for the same email
            return SubscriptionResult(outcome=SubscribeOutcome.EXISTING)

        logger.info(f"New subscriber: {subscriber.first_name} ({subscriber.email})")
        return SubscriptionResult(outcome=SubscribeOutcome.CREATED, subscriber=subscriber)

    async def unsubscribe(self, email: Optional[str]) -> Subscriber:
        if not email or not email.strip():
            raise SubscriberValidationError(
                "Email is required",
                [{"field": "email", "message": "Email is required"}],
            )

        subscriber = self._repository.get_by_email(email)
        if subscriber is None:
            raise SubscriberNotFoundError(email.strip().lower())

        if subscriber.status == SubscriberStatus.UNSUBSCRIBED:
            return subscriber

        logger.info(f"Subscriber unsubscribed: {subscriber.email}")
        return self._repository.set_status(subscriber.id, SubscriberStatus.UNSUBSCRIBED)

    async def active_count(self) -> int:
        return self._repository.count_active()

    @staticmethod
    def _validate(
        first_name: Optional[str],
        email: Optional[str],
        member_id: Optional[str],
    ) -> SubscriberDraft:
        try:
            return SubscriberDraft(
                first_name=first_name or "",
                email=email or "",
                member_id=member_id or None,
            )
        except PydanticValidationError as e:
            fields = [
                {
                    "field": ".".join(to_camel(str(part)) for part in item["loc"]),
                    "message": item["msg"],
                }
                for item in e.errors()
            ]
            raise SubscriberValidationError("Please check your name and email", fields)
