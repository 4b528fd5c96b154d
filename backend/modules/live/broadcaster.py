"""
In-process broadcast group for live map viewers.

Each connected viewer owns a bounded asyncio queue. Publishing is a
non-blocking put into every queue, so fan-out cost is independent of how
fast any viewer drains its connection.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from .interfaces import IBroadcaster
from .models import LiveEvent, PinAnnouncement, PublishReport

logger = logging.getLogger(__name__)


class ViewerSession:
    """One connected viewer's buffered event stream."""

    def __init__(self, viewer_id: str, queue_size: int = 100):
        self.id = viewer_id
        self.connected_at = datetime.now(timezone.utc)
        self._queue: asyncio.Queue[LiveEvent] = asyncio.Queue(maxsize=queue_size)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def offer(self, event: LiveEvent) -> bool:
        """Queue an event; False if the viewer's buffer is full."""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            return False
        return True

    async def next_event(self) -> LiveEvent:
        """Wait for the next event."""
        return await self._queue.get()

    async def events(self) -> AsyncIterator[LiveEvent]:
        """Yield events forever; the caller stops iterating on disconnect."""
        while True:
            yield await self._queue.get()


class LiveBroadcaster(IBroadcaster):
    """
    Single shared broadcast group.

    Constructed once by the application factory and handed to request
    handlers through dependency injection.
    """

    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._viewers: dict[str, ViewerSession] = {}

    @property
    def viewer_count(self) -> int:
        return len(self._viewers)

    def connect(self) -> ViewerSession:
        """Join a new viewer to the broadcast group."""
        session = ViewerSession(str(uuid.uuid4()), self._queue_size)
        self._viewers[session.id] = session
        logger.info(f"Viewer connected: {session.id} ({self.viewer_count} connected)")
        return session

    def disconnect(self, viewer_id: str) -> None:
        """Remove a viewer; unknown ids are ignored."""
        if self._viewers.pop(viewer_id, None) is not None:
            logger.info(f"Viewer disconnected: {viewer_id} ({self.viewer_count} connected)")

    def publish(self, event: LiveEvent) -> PublishReport:
        """Offer an event to every viewer connected right now."""
        report = PublishReport()
        for session in list(self._viewers.values()):
            if session.offer(event):
                report.delivered += 1
            else:
                report.dropped += 1
                logger.warning(f"Viewer {session.id} is not keeping up, dropped {event.type.value}")

        logger.debug(
            f"Published {event.type.value}: delivered={report.delivered} dropped={report.dropped}"
        )
        return report

    def announce_pin(
        self,
        pin: PinAnnouncement,
        count: Optional[int] = None,
    ) -> PublishReport:
        """Publish new-pin and, when known, the refreshed member count."""
        report = self.publish(LiveEvent.new_pin(pin))
        logger.info(f"Emitted new pin: {pin.pet_name} to {report.delivered} viewers")

        if count is not None:
            self.publish(LiveEvent.member_count(count))
        return report
