"""
Subscribers module.

Newsletter sign-ups with idempotent subscribe and reactivation.

Public API:
- ISubscriberService: Interface for newsletter operations
- SubscriberService: Implementation
- SubscriberRepository: Supabase persistence
"""

from .interfaces import ISubscriberRepository, ISubscriberService
from .models import (
    SubscribeOutcome,
    Subscriber,
    SubscriberDraft,
    SubscriberPreferences,
    SubscriberSource,
    SubscriberStatus,
    SubscriptionResult,
)
from .exceptions import (
    SubscriberError,
    SubscriberValidationError,
    SubscriberNotFoundError,
    DuplicateSubscriberError,
)
from .repository import SubscriberRepository
from .service import SubscriberService

__all__ = [
    # Interfaces
    "ISubscriberRepository",
    "ISubscriberService",
    # Models
    "SubscribeOutcome",
    "Subscriber",
    "SubscriberDraft",
    "SubscriberPreferences",
    "SubscriberSource",
    "SubscriberStatus",
    "SubscriptionResult",
    # Exceptions
    "SubscriberError",
    "SubscriberValidationError",
    "SubscriberNotFoundError",
    "DuplicateSubscriberError",
    # Implementation
    "SubscriberRepository",
    "SubscriberService",
]
