"""
Subscribers module exceptions.
"""

from shared.exceptions import (
    PlanetCalmError,
    NotFoundError,
    ValidationError,
    ConflictError,
)


class SubscriberError(PlanetCalmError):
    """Base exception for subscriber-related errors."""

    pass


class SubscriberValidationError(ValidationError):
    """Raised when a sign-up is missing or has malformed fields."""

    def __init__(self, message: str, fields: list[dict[str, str]]):
        super().__init__(
            message,
            code="SUBSCRIBER_VALIDATION_FAILED",
            details={"fields": fields},
        )

    @property
    def fields(self) -> list[dict[str, str]]:
        return self.details["fields"]


class SubscriberNotFoundError(NotFoundError):
    """Raised when an email is not on the list."""

    def __init__(self, email: str):
        super().__init__(
            "Email not found in our records",
            code="SUBSCRIBER_NOT_FOUND",
            details={"email": email},
        )


class DuplicateSubscriberError(ConflictError):
    """Raised by the repository when the email is already stored."""

    def __init__(self, email: str):
        super().__init__(
            f"Subscriber already exists: {email}",
            code="DUPLICATE_SUBSCRIBER",
            details={"email": email},
        )
