"""
Members module.

Pins on the map: submission from the website and from automation
webhooks, plus the read paths the map uses.

Public API:
- IMemberService: Interface for pin operations
- MemberService: Implementation
- MemberRepository: Supabase persistence
- normalize_webhook_payload: Canonical fields from a webhook body
"""

from .interfaces import IMemberRepository, IMemberService
from .models import (
    CreateMemberRequest,
    LocationMode,
    Member,
    MemberDraft,
    MemberLocation,
    MemberSource,
    PetStatus,
    PetType,
    WebhookPayload,
)
from .exceptions import (
    MemberError,
    MemberValidationError,
    MissingLocationError,
    MemberNotFoundError,
    DuplicateMemberError,
)
from .normalizer import normalize_webhook_payload, read_coordinates
from .repository import MemberRepository
from .service import MemberService, PinSubmission

__all__ = [
    # Interfaces
    "IMemberRepository",
    "IMemberService",
    # Models
    "CreateMemberRequest",
    "LocationMode",
    "Member",
    "MemberDraft",
    "MemberLocation",
    "MemberSource",
    "PetStatus",
    "PetType",
    "WebhookPayload",
    # Exceptions
    "MemberError",
    "MemberValidationError",
    "MissingLocationError",
    "MemberNotFoundError",
    "DuplicateMemberError",
    # Implementation
    "normalize_webhook_payload",
    "read_coordinates",
    "MemberRepository",
    "MemberService",
    "PinSubmission",
]
