"""
Members module interface.

The API layer depends on IMemberService for pin submission and the map's
read paths. IMemberRepository is the persistence seam the service needs.
"""

from typing import Protocol, Optional, Any, Mapping, runtime_checkable

from modules.crm.models import ForwardResult
from .models import CreateMemberRequest, Member, MemberDraft


@runtime_checkable
class IMemberRepository(Protocol):
    """
    Persistence operations for pins.
    """

    def create(self, draft: MemberDraft) -> Member:
        """Insert a validated pin. Raises DuplicateMemberError on collision."""
        ...

    def get_by_id(self, member_id: str) -> Optional[Member]:
        ...

    def list_active(self) -> list[Member]:
        """Active pins, newest first."""
        ...

    def count_active(self) -> int:
        ...

    def list_recent(self, limit: int) -> list[Member]:
        ...


@runtime_checkable
class IMemberService(Protocol):
    """
    Interface for pin operations.
    """

    async def create_member(self, request: CreateMemberRequest) -> Any:
        """
        Create a pin from a direct website submission.

        Steps run in order: resolve location, validate, persist, broadcast.

        Args:
            request: Form fields, in city or coordinates mode

        Returns:
            PinSubmission with the stored member and how it was located

        Raises:
            MemberValidationError: If required fields are missing or invalid
            InvalidCoordinatesError: If coordinates mode values are out of range
            DuplicateMemberError: If the store rejects the pin
        """
        ...

    async def create_from_webhook(self, body: Mapping[str, Any]) -> Any:
        """
        Create a pin from a third-party automation webhook.

        The body is normalized first. Usable coordinates win; invalid ones
        fall through to the city/country requirement.

        Raises:
            MemberValidationError: If the pet name or a usable location is missing
            DuplicateMemberError: If the store rejects the pin
        """
        ...

    async def get_member(self, member_id: str) -> Member:
        """
        Raises:
            MemberNotFoundError: If no active pin has this ID
        """
        ...

    async def list_for_map(self) -> list[Member]:
        ...

    async def count(self) -> int:
        ...

    async def recent(self, limit: int = 10) -> list[Member]:
        ...

    async def forward_to_crm(self, member: Member) -> ForwardResult:
        """
        Best-effort push of the pin owner to the CRM. Never raises.
        """
        ...
