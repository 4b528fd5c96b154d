"""
Member service implementation.

Both creation entry points share one pipeline:
normalize (webhook only) -> resolve location -> validate -> persist ->
broadcast. The CRM forward runs afterwards as a background task.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from modules.crm.interfaces import ICRMForwarder
from modules.crm.models import CRMContact, ForwardResult, ForwardStatus
from modules.live.interfaces import IBroadcaster
from modules.live.models import PinAnnouncement
from modules.locations.exceptions import InvalidCoordinatesError
from modules.locations.interfaces import ILocationResolver
from modules.locations.models import LocationQuery, ResolvedLocation

from .exceptions import MemberNotFoundError, MemberValidationError, MissingLocationError
from .interfaces import IMemberRepository, IMemberService
from .models import (
    CreateMemberRequest,
    GPS_COUNTRY_LABEL,
    LocationMode,
    Member,
    MemberDraft,
    MemberLocation,
    MemberSource,
    RECENT_LIMIT_DEFAULT,
    RECENT_LIMIT_MAX,
)
from .normalizer import normalize_webhook_payload, read_coordinates

logger = logging.getLogger(__name__)


@dataclass
class PinSubmission:
    """A stored pin and how its coordinates were obtained."""

    member: Member
    resolution: ResolvedLocation


def coordinate_label(latitude: float, longitude: float) -> str:
    """Fallback display name for a GPS pin."""
    return f"{latitude:.4f}, {longitude:.4f}"


class MemberService(IMemberService):
    """
    Pin submission and read service.

    Implements IMemberService. Collaborators are injected so the broadcaster
    instance is the one owned by the application.
    """

    def __init__(
        self,
        repository: IMemberRepository,
        resolver: ILocationResolver,
        broadcaster: IBroadcaster,
        crm: Optional[ICRMForwarder] = None,
    ):
        self._repository = repository
        self._resolver = resolver
        self._broadcaster = broadcaster
        self._crm = crm

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    async def create_member(self, request: CreateMemberRequest) -> PinSubmission:
        """Create a pin from the website form."""
        if request.use_coordinates:
            missing = [
                name for name, value in (("latitude", request.latitude), ("longitude", request.longitude))
                if value is None or value == ""
            ]
            if missing:
                raise MissingLocationError(
                    "Latitude and longitude are required when using coordinates mode",
                    missing,
                )

            resolution = self._resolver.resolve_coordinates(request.latitude, request.longitude)
            raw_lat, raw_lng = float(request.latitude), float(request.longitude)  # type: ignore[arg-type]
            location = MemberLocation(
                city=request.location_name or coordinate_label(raw_lat, raw_lng),
                state="",
                country=GPS_COUNTRY_LABEL,
            )
            mode = LocationMode.COORDINATES
            logger.info(
                f"Using direct coordinates: [{resolution.longitude}, {resolution.latitude}]"
            )
        else:
            missing = [
                name for name, value in (("city", request.city), ("country", request.country))
                if not value
            ]
            if missing:
                raise MissingLocationError(
                    "City and country are required when not using coordinates",
                    missing,
                )

            resolution = await self._resolver.resolve(
                LocationQuery(city=request.city, state=request.state or None, country=request.country)
            )
            location = MemberLocation(
                city=request.city or "",
                state=request.state or "",
                country=request.country or "",
            )
            mode = LocationMode.CITY

        draft = self._build_draft(
            pet_name=request.pet_name,
            pet_type=request.pet_type,
            pet_status=request.pet_status,
            location=location,
            resolution=resolution,
            location_mode=mode,
            first_name=request.first_name,
            email=request.email,
            source=MemberSource.WEBSITE,
            affiliate_id=request.am_id,
        )

        if request.am_id:
            logger.info(f"Member created with affiliate ID: {request.am_id}")

        return self._register(draft, resolution)

    async def create_from_webhook(self, body: Mapping[str, Any]) -> PinSubmission:
        """Create a pin from an automation webhook body."""
        payload = normalize_webhook_payload(body)

        if not payload.pet_name:
            raise MemberValidationError(
                "Missing required field: petName",
                [{"field": "petName", "message": "Pet name is required"}],
            )

        resolution: Optional[ResolvedLocation] = None
        location: Optional[MemberLocation] = None
        mode = LocationMode.CITY

        raw_latitude, raw_longitude = read_coordinates(body)
        if raw_latitude is not None and raw_longitude is not None:
            try:
                resolution = self._resolver.resolve_coordinates(raw_latitude, raw_longitude)
            except InvalidCoordinatesError as e:
                logger.warning(f"Ignoring webhook coordinates: {e.message}")
            else:
                lat, lng = float(raw_latitude), float(raw_longitude)
                location = MemberLocation(
                    city=payload.city or payload.location_name or coordinate_label(lat, lng),
                    state=payload.state,
                    country=payload.country or GPS_COUNTRY_LABEL,
                )
                mode = LocationMode.COORDINATES
                logger.info(
                    f"Webhook using direct coordinates: [{resolution.longitude}, {resolution.latitude}]"
                )

        if resolution is None:
            missing = [name for name in ("city", "country") if not getattr(payload, name)]
            if missing:
                logger.warning("Missing required location fields in webhook")
                raise MissingLocationError(
                    "Missing required fields: either (latitude, longitude) or (city, country) required",
                    missing,
                )
            resolution = await self._resolver.resolve(
                LocationQuery(city=payload.city, state=payload.state or None, country=payload.country)
            )
            location = MemberLocation(
                city=payload.city,
                state=payload.state,
                country=payload.country,
            )

        draft = self._build_draft(
            pet_name=payload.pet_name,
            pet_type=payload.pet_type,
            pet_status=payload.pet_status,
            location=location,
            resolution=resolution,
            location_mode=mode,
            first_name=payload.first_name,
            email=payload.email,
            source=payload.source,
            affiliate_id=payload.affiliate_id,
        )
        return self._register(draft, resolution)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_member(self, member_id: str) -> Member:
        member = self._repository.get_by_id(member_id)
        if member is None:
            raise MemberNotFoundError(member_id)
        return member

    async def list_for_map(self) -> list[Member]:
        return self._repository.list_active()

    async def count(self) -> int:
        return self._repository.count_active()

    async def recent(self, limit: int = RECENT_LIMIT_DEFAULT) -> list[Member]:
        return self._repository.list_recent(max(1, min(limit, RECENT_LIMIT_MAX)))

    # -------------------------------------------------------------------------
    # Downstream integration
    # -------------------------------------------------------------------------

    async def forward_to_crm(self, member: Member) -> ForwardResult:
        """Push the pin owner to the CRM; the result is only logged."""
        if self._crm is None:
            return ForwardResult(status=ForwardStatus.SKIPPED)

        contact = CRMContact(
            first_name=member.first_name or "",
            email=member.email or "",
            pet_name=member.pet_name,
            pet_type=member.pet_type.value,
            pet_status=member.pet_status.value,
            city=member.location.city,
            state=member.location.state,
            country=member.location.country,
            am_id=member.affiliate_id or "",
        )
        result = await self._crm.forward(contact)
        if result.status == ForwardStatus.FAILED:
            logger.warning(f"CRM forward failed for member {member.id}: {result.error}")
        return result

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _build_draft(
        self,
        location: MemberLocation,
        resolution: ResolvedLocation,
        **fields: Any,
    ) -> MemberDraft:
        """Validate every field at once; pydantic errors become field errors."""
        try:
            return MemberDraft(
                location=location,
                coordinates=resolution.point,
                **fields,
            )
        except PydanticValidationError as e:
            raise MemberValidationError.from_pydantic(e)

    def _register(self, draft: MemberDraft, resolution: ResolvedLocation) -> PinSubmission:
        """Persist, then announce to connected viewers."""
        member = self._repository.create(draft)

        logger.info(
            f"New member created: {member.pet_name} ({member.pet_type.value}) at "
            f"[{member.coordinates.longitude}, {member.coordinates.latitude}] "
            f"source={resolution.source.value} confidence={resolution.confidence}"
        )

        self._announce(member)
        return PinSubmission(member=member, resolution=resolution)

    def _announce(self, member: Member) -> None:
        """Broadcast the new pin; failures here never fail the submission."""
        count: Optional[int]
        try:
            count = self._repository.count_active()
        except Exception:
            logger.exception("Error getting member count for broadcast")
            count = None

        announcement = PinAnnouncement(
            id=member.id,
            pet_name=member.pet_name,
            pet_type=member.pet_type.value,
            pet_status=member.pet_status.value,
            location=member.location.model_dump(by_alias=True),
            coordinates={
                "type": "Point",
                "coordinates": member.coordinates.as_geojson(),
            },
            created_at=member.created_at,
        )
        try:
            self._broadcaster.announce_pin(announcement, count)
        except Exception:
            logger.exception(f"Error broadcasting member {member.id}")
