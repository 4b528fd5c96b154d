"""
Live map endpoints.

Viewers join the broadcast group over a WebSocket (bidirectional, can ask
for the member count) or a read-only SSE stream. Either way the first
message is the current member count.

Socket message format:
    {"event": "new-pin" | "member-count", "data": {...}}

Viewer requests:
    {"type": "get-member-count"}  (or the bare string)
"""

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Optional

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect
from sse_starlette.sse import EventSourceResponse

from api.dependencies import get_broadcaster, get_member_service
from modules.members.interfaces import IMemberService

from .broadcaster import LiveBroadcaster, ViewerSession
from .models import LiveEvent, ViewerMessageType

logger = logging.getLogger(__name__)

router = APIRouter()


async def current_count(service: IMemberService) -> Optional[int]:
    """Member count, or None if the store could not be read."""
    try:
        return await service.count()
    except Exception:
        logger.exception("Error getting member count")
        return None


def is_count_request(message: str) -> bool:
    """True if a viewer message asks for the member count."""
    text = message.strip()
    if text == ViewerMessageType.GET_MEMBER_COUNT.value:
        return True
    try:
        payload: Any = json.loads(text)
    except ValueError:
        return False
    return isinstance(payload, dict) and payload.get("type") == ViewerMessageType.GET_MEMBER_COUNT.value


async def _pump(websocket: WebSocket, session: ViewerSession) -> None:
    """Forward queued events to the socket until it closes."""
    try:
        async for event in session.events():
            await websocket.send_json(event.to_message())
    except (WebSocketDisconnect, RuntimeError) as e:
        logger.debug(f"Viewer {session.id} send loop ended: {e!r}")


async def _offer_count(session: ViewerSession, service: IMemberService) -> None:
    count = await current_count(service)
    if count is not None:
        session.offer(LiveEvent.member_count(count))


async def _serve_requests(websocket: WebSocket, session: ViewerSession, service: IMemberService) -> None:
    """Answer count requests until the viewer disconnects. Binary frames are ignored."""
    await _offer_count(session, service)
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            logger.debug(f"Viewer {session.id} closed the socket (code {message.get('code')})")
            return
        text = message.get("text")
        if text is not None and is_count_request(text):
            await _offer_count(session, service)


@router.websocket("")
async def live_socket(
    websocket: WebSocket,
    broadcaster: LiveBroadcaster = Depends(get_broadcaster),
    service: IMemberService = Depends(get_member_service),
) -> None:
    """
    Bidirectional live channel for the map.

    The viewer stays in the group while both the send loop and the request
    loop run. Whichever ends first stops the other; if sending failed, the
    socket is closed from this side.
    """
    await websocket.accept()
    session = broadcaster.connect()
    sender = asyncio.create_task(_pump(websocket, session))
    receiver = asyncio.create_task(_serve_requests(websocket, session, service))

    try:
        done, _ = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        broadcaster.disconnect(session.id)
        sender.cancel()
        receiver.cancel()
        await asyncio.gather(sender, receiver, return_exceptions=True)

    if receiver in done:
        receiver.result()
        return

    try:
        await websocket.close()
    except RuntimeError as e:
        logger.debug(f"Viewer {session.id} socket already closed: {e!r}")


async def stream_events(
    broadcaster: LiveBroadcaster,
    initial_count: Optional[int],
    request: Optional[Request] = None,
) -> AsyncIterator[dict[str, str]]:
    """
    Generate SSE events for one viewer.

    The viewer joins the group when iteration starts and leaves when the
    generator is closed.

    Yields events in the format:
        event: <event_type>
        data: <json_data>
    """
    session = broadcaster.connect()
    try:
        if initial_count is not None:
            session.offer(LiveEvent.member_count(initial_count))
        async for event in session.events():
            if request is not None and await request.is_disconnected():
                break
            yield {
                "event": event.type.value,
                "data": json.dumps(event.data),
            }
    finally:
        broadcaster.disconnect(session.id)


@router.get("/stream")
async def live_stream(
    request: Request,
    broadcaster: LiveBroadcaster = Depends(get_broadcaster),
    service: IMemberService = Depends(get_member_service),
):
    """
    Read-only live channel via SSE.

    Event types:
    - member-count: {"count": n}
    - new-pin: public fields of the new pin
    """
    count = await current_count(service)
    return EventSourceResponse(
        stream_events(broadcaster, count, request),
        media_type="text/event-stream",
    )
