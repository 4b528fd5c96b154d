"""
Live module data models.

Events pushed to connected map viewers. Payload keys are camelCase because
the map client consumes them as-is.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LiveEventType(str, Enum):
    """Types of events pushed to viewers."""

    NEW_PIN = "new-pin"
    MEMBER_COUNT = "member-count"


class ViewerMessageType(str, Enum):
    """Messages a viewer may send over the socket."""

    GET_MEMBER_COUNT = "get-member-count"


class PinAnnouncement(BaseModel):
    """Public view of a newly created pin."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    pet_name: str
    pet_type: str
    pet_status: str = "with-you"
    location: dict[str, Any] = Field(default_factory=dict)
    coordinates: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None


class LiveEvent(BaseModel):
    """A single event in the live broadcast."""

    type: LiveEventType
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def new_pin(cls, pin: PinAnnouncement) -> "LiveEvent":
        return cls(type=LiveEventType.NEW_PIN, data=pin.model_dump(mode="json", by_alias=True))

    @classmethod
    def member_count(cls, count: int) -> "LiveEvent":
        return cls(type=LiveEventType.MEMBER_COUNT, data={"count": count})

    def to_message(self) -> dict[str, Any]:
        """Socket message: {"event": <type>, "data": {...}}."""
        return {"event": self.type.value, "data": self.data}


class PublishReport(BaseModel):
    """How a single publish was distributed across viewers."""

    delivered: int = 0
    dropped: int = 0
