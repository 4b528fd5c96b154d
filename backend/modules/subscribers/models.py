"""
Subscribers module data models.

Newsletter ("Whispers from the Wild") sign-ups. Emails are stored
lowercased and are unique; a subscriber is never deleted, only moved
between statuses.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


FIRST_NAME_MAX_LENGTH = 100


class SubscriberStatus(str, Enum):
    ACTIVE = "active"
    UNSUBSCRIBED = "unsubscribed"
    BOUNCED = "bounced"


class SubscriberSource(str, Enum):
    WEBSITE = "website"
    WEBHOOK = "webhook"
    GOHIGHLEVEL = "gohighlevel"
    MANUAL = "manual"


class SubscribeOutcome(str, Enum):
    """What a subscribe call did."""

    CREATED = "created"
    REACTIVATED = "reactivated"
    EXISTING = "existing"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class SubscriberPreferences(BaseModel):
    """Which mailings the subscriber receives."""

    whispers: bool = True
    updates: bool = True


class SubscriberDraft(_CamelModel):
    """Validated sign-up, ready to persist."""

    first_name: str = Field(..., min_length=1, max_length=FIRST_NAME_MAX_LENGTH)
    email: EmailStr
    source: SubscriberSource = SubscriberSource.WEBSITE
    member_id: Optional[UUID] = None
    preferences: SubscriberPreferences = Field(default_factory=SubscriberPreferences)

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class Subscriber(_CamelModel):
    id: str
    first_name: str
    email: str
    status: SubscriberStatus = SubscriberStatus.ACTIVE
    preferences: SubscriberPreferences = Field(default_factory=SubscriberPreferences)
    source: SubscriberSource = SubscriberSource.WEBSITE
    member_id: Optional[str] = None
    welcome_sent: bool = False
    welcome_sent_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class SubscriptionResult(BaseModel):
    outcome: SubscribeOutcome
    subscriber: Optional[Subscriber] = None


# ---------------------------------------------------------------------------
# Requests / responses
# ---------------------------------------------------------------------------


class SubscribeRequest(_CamelModel):
    """Newsletter form body; checked by the service for field-level errors."""

    model_config = ConfigDict(extra="ignore")

    first_name: Optional[str] = None
    email: Optional[str] = None
    member_id: Optional[str] = None


class UnsubscribeRequest(_CamelModel):
    email: Optional[str] = None


class SubscriberSummary(_CamelModel):
    id: str
    first_name: str


class SubscribeResponse(_CamelModel):
    success: bool = True
    message: str
    is_reactivated: Optional[bool] = None
    is_existing: Optional[bool] = None
    data: Optional[SubscriberSummary] = None


class UnsubscribeResponse(BaseModel):
    success: bool = True
    message: str


class SubscriberCountResponse(BaseModel):
    success: bool = True
    count: int
