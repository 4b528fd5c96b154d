"""
Newsletter API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from api.dependencies import get_subscriber_service
from api.middleware.rate_limit import FORM, READ, rate_limit

from .exceptions import SubscriberNotFoundError, SubscriberValidationError
from .interfaces import ISubscriberService
from .models import (
    SubscribeOutcome,
    SubscribeRequest,
    SubscribeResponse,
    SubscriberCountResponse,
    SubscriberSummary,
    UnsubscribeRequest,
    UnsubscribeResponse,
)

router = APIRouter()


@router.get(
    "/count",
    response_model=SubscriberCountResponse,
    dependencies=[Depends(rate_limit(READ))],
)
async def get_subscriber_count(
    service: ISubscriberService = Depends(get_subscriber_service),
) -> SubscriberCountResponse:
    """Number of active subscribers."""
    return SubscriberCountResponse(count=await service.active_count())


@router.post(
    "",
    response_model=SubscribeResponse,
    response_model_exclude_none=True,
    status_code=201,
    dependencies=[Depends(rate_limit(FORM))],
)
async def subscribe(
    request: SubscribeRequest,
    service: ISubscriberService = Depends(get_subscriber_service),
):
    """
    Subscribe to Whispers from the Wild.

    New emails get 201. Known emails get 200 with a success-shaped
    body: reactivated if they had unsubscribed, otherwise unchanged.
    """
    try:
        result = await service.subscribe(request.first_name, request.email, request.member_id)
    except SubscriberValidationError as e:
        raise HTTPException(status_code=400, detail={"success": False, **e.to_dict()})

    if result.outcome == SubscribeOutcome.CREATED:
        return SubscribeResponse(
            message="Your first Whisper is on its way...",
            data=SubscriberSummary(id=result.subscriber.id, first_name=result.subscriber.first_name),
        )

    if result.outcome == SubscribeOutcome.REACTIVATED:
        body = SubscribeResponse(
            message="Welcome back! Your subscription has been reactivated.",
            is_reactivated=True,
        )
    else:
        body = SubscribeResponse(
            message="You're already subscribed! Check your inbox for Whispers.",
            is_existing=True,
        )
    return JSONResponse(status_code=200, content=body.model_dump(by_alias=True, exclude_none=True))


@router.post(
    "/unsubscribe",
    response_model=UnsubscribeResponse,
    dependencies=[Depends(rate_limit(FORM))],
)
async def unsubscribe(
    request: UnsubscribeRequest,
    service: ISubscriberService = Depends(get_subscriber_service),
) -> UnsubscribeResponse:
    try:
        await service.unsubscribe(request.email)
    except SubscriberValidationError as e:
        raise HTTPException(status_code=400, detail={"success": False, **e.to_dict()})
    except SubscriberNotFoundError:
        raise HTTPException(
            status_code=404,
            detail={"success": False, "message": "Email not found in our records"},
        )
    return UnsubscribeResponse(message="You have been unsubscribed. We'll miss you.")
