"""
Member (pin) API endpoints.

Provides the map snapshot, counts, single-pin lookup, the website
submission endpoint and the webhook endpoints used by automation tools.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Header, HTTPException, Query

from api.dependencies import get_member_service
from api.middleware.rate_limit import FORM, READ, STRICT, WEBHOOK, rate_limit
from api.middleware.webhook_auth import WEBHOOK_SECRET_HEADER, require_webhook_secret
from modules.locations.exceptions import InvalidCoordinatesError
from shared.exceptions import ValidationError

from .exceptions import DuplicateMemberError, MemberNotFoundError, MemberValidationError
from .interfaces import IMemberService
from .models import (
    CreateMemberRequest,
    CreatedMember,
    LatLng,
    MapFeature,
    MapFeatureCollection,
    MapFeatureGeometry,
    MapFeatureProperties,
    Member,
    MemberCountResponse,
    MemberCreatedResponse,
    MemberMapResponse,
    MemberResponse,
    RECENT_LIMIT_DEFAULT,
    RecentMember,
    RecentMembersResponse,
    WebhookCreatedResponse,
    WebhookHeaders,
    WebhookPin,
    WebhookTestResponse,
)
from .normalizer import normalize_webhook_payload

logger = logging.getLogger(__name__)

router = APIRouter()

WEBHOOK_PATHS = ("/webhook", "/hook", "/gohighlevel", "/make", "/zapier")


def _validation_failed(error: ValidationError) -> HTTPException:
    return HTTPException(status_code=400, detail={"success": False, **error.to_dict()})


def _duplicate() -> HTTPException:
    return HTTPException(
        status_code=409,
        detail={"success": False, "message": "This entry may already exist."},
    )


def _to_feature(member: Member) -> MapFeature:
    return MapFeature(
        geometry=MapFeatureGeometry(coordinates=member.coordinates.as_geojson()),
        properties=MapFeatureProperties(
            id=member.id,
            pet_name=member.pet_name,
            pet_type=member.pet_type,
            pet_status=member.pet_status,
            location=member.location.formatted,
            created_at=member.created_at,
        ),
    )


@router.get("", response_model=MemberMapResponse, dependencies=[Depends(rate_limit(READ))])
async def list_members(
    service: IMemberService = Depends(get_member_service),
) -> MemberMapResponse:
    """
    All active pins as a GeoJSON FeatureCollection, newest first.

    This snapshot is what clients reconcile against after reconnecting.
    """
    members = await service.list_for_map()
    return MemberMapResponse(
        count=len(members),
        data=MapFeatureCollection(features=[_to_feature(m) for m in members]),
    )


@router.get("/count", response_model=MemberCountResponse, dependencies=[Depends(rate_limit(READ))])
async def get_member_count(
    service: IMemberService = Depends(get_member_service),
) -> MemberCountResponse:
    return MemberCountResponse(count=await service.count())


@router.get("/recent", response_model=RecentMembersResponse, dependencies=[Depends(rate_limit(READ))])
async def get_recent_members(
    limit: int = Query(default=RECENT_LIMIT_DEFAULT, ge=1, description="Number of pins (capped at 50)"),
    service: IMemberService = Depends(get_member_service),
) -> RecentMembersResponse:
    members = await service.recent(limit)
    return RecentMembersResponse(
        count=len(members),
        data=[
            RecentMember(
                id=m.id,
                pet_name=m.pet_name,
                pet_type=m.pet_type,
                location=m.location,
                created_at=m.created_at,
            )
            for m in members
        ],
    )


@router.post(
    "",
    response_model=MemberCreatedResponse,
    status_code=201,
    dependencies=[Depends(rate_limit(FORM))],
)
async def create_member(
    request: CreateMemberRequest,
    background_tasks: BackgroundTasks,
    service: IMemberService = Depends(get_member_service),
) -> MemberCreatedResponse:
    """
    Place a pin from the website form.

    City mode geocodes (falling back to an approximate point); coordinates
    mode uses the given GPS position. The CRM forward runs after the
    response is sent.
    """
    try:
        submission = await service.create_member(request)
    except (MemberValidationError, InvalidCoordinatesError) as e:
        raise _validation_failed(e)
    except DuplicateMemberError:
        raise _duplicate()

    member = submission.member
    background_tasks.add_task(service.forward_to_crm, member)

    return MemberCreatedResponse(
        message="Your pet has been added to Planet Calm!",
        data=CreatedMember(
            id=member.id,
            pet_name=member.pet_name,
            pet_type=member.pet_type,
            pet_status=member.pet_status,
            location=member.location,
            coordinates=LatLng(lat=member.coordinates.latitude, lng=member.coordinates.longitude),
        ),
    )


@router.post(
    "/webhook/test",
    response_model=WebhookTestResponse,
    dependencies=[Depends(rate_limit(STRICT))],
)
async def test_webhook(
    body: Optional[dict[str, Any]] = Body(default=None),
    content_type: Optional[str] = Header(default=None),
    x_webhook_secret: Optional[str] = Header(default=None, alias=WEBHOOK_SECRET_HEADER),
) -> WebhookTestResponse:
    """
    Echo a webhook body and how it would be normalized.

    Never creates a pin; use it to check an automation's field mapping.
    """
    body = body or {}
    logger.info(f"Test webhook received with keys: {sorted(body.keys())}")
    return WebhookTestResponse(
        received_data=body,
        normalized_data=normalize_webhook_payload(body),
        headers=WebhookHeaders(
            content_type=content_type,
            webhook_secret="provided" if x_webhook_secret else "not provided",
        ),
    )


async def webhook_create_member(
    background_tasks: BackgroundTasks,
    body: dict[str, Any] = Body(...),
    service: IMemberService = Depends(get_member_service),
) -> WebhookCreatedResponse:
    """
    Place a pin from GoHighLevel, Make.com or Zapier.

    Field names are normalized; coordinates are used when valid, otherwise
    city and country are required.
    """
    try:
        submission = await service.create_from_webhook(body)
    except MemberValidationError as e:
        raise _validation_failed(e)
    except DuplicateMemberError:
        raise _duplicate()

    member = submission.member
    background_tasks.add_task(service.forward_to_crm, member)

    return WebhookCreatedResponse(
        data=WebhookPin(
            id=member.id,
            pet_name=member.pet_name,
            pet_type=member.pet_type,
            location=member.location.formatted,
            coordinates=LatLng(lat=member.coordinates.latitude, lng=member.coordinates.longitude),
        ),
    )


for _path in WEBHOOK_PATHS:
    router.add_api_route(
        _path,
        webhook_create_member,
        methods=["POST"],
        response_model=WebhookCreatedResponse,
        status_code=201,
        dependencies=[Depends(rate_limit(WEBHOOK)), Depends(require_webhook_secret)],
    )


@router.get("/{member_id}", response_model=MemberResponse, dependencies=[Depends(rate_limit(READ))])
async def get_member(
    member_id: str,
    service: IMemberService = Depends(get_member_service),
) -> MemberResponse:
    try:
        member = await service.get_member(member_id)
    except MemberNotFoundError:
        raise HTTPException(
            status_code=404,
            detail={"success": False, "message": "Member not found"},
        )
    return MemberResponse(data=member)
