"""
Members module exceptions.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from shared.exceptions import (
    PlanetCalmError,
    NotFoundError,
    ValidationError,
    ConflictError,
)


class MemberError(PlanetCalmError):
    """Base exception for member-related errors."""

    pass


class MemberValidationError(ValidationError):
    """
    Raised when a pin submission fails validation.

    details["fields"] lists {"field", "message"} pairs using the
    camelCase names the client sent.
    """

    def __init__(self, message: str, fields: list[dict[str, str]]):
        super().__init__(
            message,
            code="MEMBER_VALIDATION_FAILED",
            details={"fields": fields},
        )

    @property
    def fields(self) -> list[dict[str, str]]:
        return self.details["fields"]

    @classmethod
    def from_pydantic(cls, error: PydanticValidationError) -> "MemberValidationError":
        """Flatten pydantic errors into field/message pairs."""
        fields = []
        for item in error.errors():
            loc = [to_camel(str(part)) for part in item.get("loc", ())]
            message = item.get("msg", "Invalid value")
            if message.startswith("Value error, "):
                message = message[len("Value error, "):]
            fields.append({
                "field": ".".join(loc) or "location",
                "message": message,
            })
        summary = fields[0]["message"] if len(fields) == 1 else "Validation failed"
        return cls(summary, fields)


class MissingLocationError(MemberValidationError):
    """Raised when neither usable coordinates nor city + country were given."""

    def __init__(self, message: str, missing: list[str]):
        super().__init__(
            message,
            [{"field": name, "message": f"{name} is required"} for name in missing],
        )
        self.code = "MISSING_LOCATION"


class MemberNotFoundError(NotFoundError):
    """Raised when a member is not found."""

    def __init__(self, member_id: str):
        super().__init__(
            f"Member not found: {member_id}",
            code="MEMBER_NOT_FOUND",
            details={"member_id": member_id},
        )


class DuplicateMemberError(ConflictError):
    """Raised when the store rejects a pin as a duplicate."""

    def __init__(self, detail: Any = None):
        super().__init__(
            "This entry may already exist.",
            code="DUPLICATE_MEMBER",
            details={"constraint": detail} if detail else {},
        )
