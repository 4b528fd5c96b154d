"""
Members module data models.

A member is one pin on the map: a pet, where it lives (or lived), and an
optional owner contact. API-facing models use camelCase keys to match the
map client and the third-party automation tools that post to us.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from modules.locations.models import GeoPoint


PET_NAME_MAX_LENGTH = 100
RECENT_LIMIT_DEFAULT = 10
RECENT_LIMIT_MAX = 50

# Country label stored for pins placed from raw coordinates
GPS_COUNTRY_LABEL = "GPS Location"


class PetType(str, Enum):
    """Supported pet types."""

    DOG = "Dog"
    CAT = "Cat"
    BIRD = "Bird"
    FISH = "Fish"
    RABBIT = "Rabbit"
    HAMSTER = "Hamster"
    HORSE = "Horse"
    REPTILE = "Reptile"
    OTHER = "Other"

    @classmethod
    def _missing_(cls, value: object) -> Optional["PetType"]:
        # Case-insensitive lookup: "dog" -> PetType.DOG
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


class PetStatus(str, Enum):
    """Whether the pet is still with its owner."""

    WITH_YOU = "with-you"
    IN_HEART = "in-heart"

    @classmethod
    def _missing_(cls, value: object) -> Optional["PetStatus"]:
        if isinstance(value, str):
            normalized = value.strip().lower().replace(" ", "-").replace("_", "-")
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class MemberSource(str, Enum):
    """How a pin entered the system."""

    WEBSITE = "website"
    WEBHOOK = "webhook"
    MANUAL = "manual"


class LocationMode(str, Enum):
    """Which location shape a pin was created from."""

    CITY = "city"
    COORDINATES = "coordinates"


def format_location(city: str, state: Optional[str], country: str) -> str:
    """Display string "city[, state], country"."""
    parts = [city]
    if state:
        parts.append(state)
    parts.append(country)
    return ", ".join(part for part in parts if part)


class CamelModel(BaseModel):
    """Base for models exchanged with the map client."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class MemberLocation(CamelModel):
    """Where a pin is, in words."""

    city: str = ""
    state: str = ""
    country: str = ""
    formatted: str = ""


class MemberDraft(CamelModel):
    """
    A pin that has passed validation and is ready to persist.

    Construction enforces every invariant the store relies on; the
    formatted location is recomputed here so it always matches the parts.
    """

    pet_name: str = Field(..., min_length=1, max_length=PET_NAME_MAX_LENGTH)
    pet_type: PetType
    pet_status: PetStatus = PetStatus.WITH_YOU
    location: MemberLocation
    coordinates: GeoPoint
    location_mode: LocationMode = LocationMode.CITY
    first_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    source: MemberSource = MemberSource.WEBSITE
    affiliate_id: Optional[str] = Field(None, max_length=200)
    is_verified: bool = True
    is_active: bool = True

    @field_validator("pet_type", mode="before")
    @classmethod
    def parse_pet_type(cls, value: Any) -> Any:
        if value is None or value == "":
            raise ValueError("Pet type is required")
        if isinstance(value, str):
            try:
                return PetType(value)
            except ValueError:
                raise ValueError(f"{value!r} is not a valid pet type")
        return value

    @field_validator("pet_status", mode="before")
    @classmethod
    def parse_pet_status(cls, value: Any) -> Any:
        if not value:
            return PetStatus.WITH_YOU
        if isinstance(value, str):
            try:
                return PetStatus(value)
            except ValueError:
                raise ValueError(f"{value!r} is not a valid pet status")
        return value

    @field_validator("email", "first_name", "affiliate_id", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value

    @model_validator(mode="after")
    def check_location(self) -> "MemberDraft":
        if self.location_mode == LocationMode.CITY:
            if not self.location.city:
                raise ValueError("City is required")
            if not self.location.country:
                raise ValueError("Country is required")
        self.location.formatted = format_location(
            self.location.city,
            self.location.state,
            self.location.country,
        )
        return self


class Member(CamelModel):
    """A persisted pin."""

    id: str = Field(..., description="Member ID (UUID)")
    pet_name: str
    pet_type: PetType
    pet_status: PetStatus = PetStatus.WITH_YOU
    location: MemberLocation
    coordinates: GeoPoint
    first_name: Optional[str] = None
    email: Optional[str] = Field(None, exclude=True)
    source: MemberSource = MemberSource.WEBSITE
    affiliate_id: Optional[str] = None
    is_verified: bool = True
    is_active: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateMemberRequest(CamelModel):
    """
    Direct submission from the website form.

    Types are loose here: the service turns bad values into
    field-level validation errors instead of a generic 422.
    """

    model_config = ConfigDict(extra="ignore")

    first_name: Optional[str] = None
    email: Optional[str] = None
    pet_name: Optional[str] = None
    pet_type: Optional[str] = None
    pet_status: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    latitude: Optional[Union[float, str]] = None
    longitude: Optional[Union[float, str]] = None
    location_name: Optional[str] = None
    use_coordinates: bool = False
    am_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("am_id", "amId", "affiliateId"),
    )


class WebhookPayload(CamelModel):
    """Canonical member fields recovered from a webhook body."""

    pet_name: str = ""
    pet_type: str = PetType.OTHER.value
    pet_status: str = PetStatus.WITH_YOU.value
    city: str = ""
    state: str = ""
    country: str = ""
    email: str = ""
    first_name: str = ""
    affiliate_id: str = ""
    location_name: str = ""
    source: MemberSource = MemberSource.WEBHOOK


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class LatLng(BaseModel):
    """Coordinates as the form client expects them."""

    lat: float
    lng: float


class CreatedMember(CamelModel):
    """Display fields of a freshly created pin."""

    id: str
    pet_name: str
    pet_type: PetType
    pet_status: PetStatus
    location: MemberLocation
    coordinates: LatLng


class MemberCreatedResponse(CamelModel):
    success: bool = True
    message: str
    data: CreatedMember


class WebhookPin(CamelModel):
    """What automation tools see after placing a pin."""

    id: str
    pet_name: str
    pet_type: PetType
    location: str
    coordinates: LatLng


class WebhookCreatedResponse(CamelModel):
    success: bool = True
    message: str = "Pin placed successfully"
    data: WebhookPin


class MapFeatureGeometry(BaseModel):
    type: str = "Point"
    coordinates: list[float]


class MapFeatureProperties(CamelModel):
    id: str
    pet_name: str
    pet_type: PetType
    pet_status: PetStatus
    location: str
    created_at: datetime


class MapFeature(BaseModel):
    type: str = "Feature"
    geometry: MapFeatureGeometry
    properties: MapFeatureProperties


class MapFeatureCollection(BaseModel):
    """GeoJSON snapshot of every active pin."""

    type: str = "FeatureCollection"
    features: list[MapFeature] = Field(default_factory=list)


class MemberMapResponse(BaseModel):
    success: bool = True
    count: int
    data: MapFeatureCollection


class MemberCountResponse(BaseModel):
    success: bool = True
    count: int


class RecentMember(CamelModel):
    id: str
    pet_name: str
    pet_type: PetType
    location: MemberLocation
    created_at: datetime


class RecentMembersResponse(BaseModel):
    success: bool = True
    count: int
    data: list[RecentMember]


class MemberResponse(BaseModel):
    success: bool = True
    data: Member


class WebhookHeaders(CamelModel):
    content_type: Optional[str] = None
    webhook_secret: str = "not provided"


class WebhookTestResponse(CamelModel):
    success: bool = True
    message: str = "Test webhook received successfully"
    received_data: dict[str, Any]
    normalized_data: WebhookPayload
    headers: WebhookHeaders
