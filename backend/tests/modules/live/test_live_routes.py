"""
Tests for the live WebSocket and SSE channels.
"""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from modules.live.models import LiveEvent
from modules.live.routes import current_count, is_count_request, live_socket, stream_events


LUNA = {"petName": "Luna", "petType": "Cat", "city": "Paris", "country": "France"}


async def _never_receives():
    await asyncio.Event().wait()


class TestCountRequests:
    @pytest.mark.parametrize("message", [
        "get-member-count",
        " get-member-count\n",
        '{"type": "get-member-count"}',
    ])
    def test_recognized(self, message):
        assert is_count_request(message) is True

    @pytest.mark.parametrize("message", [
        "hello",
        '{"type": "ping"}',
        '["get-member-count"]',
        "{not json",
    ])
    def test_ignored(self, message):
        assert is_count_request(message) is False

    @pytest.mark.asyncio
    async def test_count_failure_is_none(self):
        service = AsyncMock()
        service.count.side_effect = RuntimeError("db down")

        assert await current_count(service) is None


class TestWebSocket:
    def test_initial_count_and_on_demand_count(self, app):
        with TestClient(app) as client:
            client.post("/api/members", json=LUNA)

            with client.websocket_connect("/api/live") as ws:
                assert ws.receive_json() == {"event": "member-count", "data": {"count": 1}}

                ws.send_text(json.dumps({"type": "get-member-count"}))
                assert ws.receive_json() == {"event": "member-count", "data": {"count": 1}}

    def test_new_pin_reaches_viewer(self, app, broadcaster):
        with TestClient(app) as client:
            with client.websocket_connect("/api/live") as ws:
                assert ws.receive_json()["event"] == "member-count"
                assert broadcaster.viewer_count == 1

                created = client.post("/api/members", json=LUNA).json()

                pin = ws.receive_json()
                assert pin["event"] == "new-pin"
                assert pin["data"]["id"] == created["data"]["id"]
                assert pin["data"]["petName"] == "Luna"
                assert pin["data"]["coordinates"]["type"] == "Point"
                assert ws.receive_json() == {"event": "member-count", "data": {"count": 1}}

    def test_viewer_leaves_group_on_close(self, app, broadcaster):
        with TestClient(app) as client:
            with client.websocket_connect("/api/live") as ws:
                ws.receive_json()

        assert broadcaster.viewer_count == 0

    def test_binary_frame_is_ignored(self, app):
        with TestClient(app) as client:
            with client.websocket_connect("/api/live") as ws:
                assert ws.receive_json()["event"] == "member-count"

                ws.send_bytes(b"\x00\x01")
                ws.send_text("get-member-count")

                assert ws.receive_json() == {"event": "member-count", "data": {"count": 0}}

    @pytest.mark.asyncio
    async def test_failed_send_closes_socket_and_leaves_group(self, broadcaster):
        websocket = MagicMock()
        websocket.accept = AsyncMock()
        websocket.send_json = AsyncMock(side_effect=RuntimeError("socket gone"))
        websocket.receive = _never_receives
        websocket.close = AsyncMock()
        service = AsyncMock()
        service.count.return_value = 2

        await asyncio.wait_for(live_socket(websocket, broadcaster, service), timeout=1)

        websocket.close.assert_awaited_once()
        assert broadcaster.viewer_count == 0

    @pytest.mark.asyncio
    async def test_viewer_disconnect_stops_send_loop(self, broadcaster):
        websocket = MagicMock()
        websocket.accept = AsyncMock()
        websocket.send_json = AsyncMock()
        websocket.receive = AsyncMock(return_value={"type": "websocket.disconnect", "code": 1000})
        websocket.close = AsyncMock()
        service = AsyncMock()
        service.count.return_value = 2
        tasks_before = asyncio.all_tasks()

        await asyncio.wait_for(live_socket(websocket, broadcaster, service), timeout=1)

        assert asyncio.all_tasks() - tasks_before == set()
        websocket.close.assert_not_awaited()
        assert broadcaster.viewer_count == 0


class TestEventStream:
    @pytest.mark.asyncio
    async def test_initial_count_then_events(self, broadcaster):
        stream = stream_events(broadcaster, initial_count=3)

        first = await stream.__anext__()
        assert first == {"event": "member-count", "data": json.dumps({"count": 3})}
        assert broadcaster.viewer_count == 1

        broadcaster.publish(LiveEvent.member_count(4))
        second = await stream.__anext__()
        assert json.loads(second["data"]) == {"count": 4}

        await stream.aclose()
        assert broadcaster.viewer_count == 0

    @pytest.mark.asyncio
    async def test_no_initial_count(self, broadcaster):
        stream = stream_events(broadcaster, initial_count=None)

        # The viewer joins on the first step
        task = asyncio.ensure_future(stream.__anext__())
        await asyncio.sleep(0)
        assert broadcaster.viewer_count == 1
        broadcaster.publish(LiveEvent.member_count(9))

        assert json.loads((await task)["data"]) == {"count": 9}
        await stream.aclose()
