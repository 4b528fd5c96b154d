"""
Live module interface.

The broadcaster is the only in-process shared state. Connection handlers
mutate its viewer set; everything else only publishes.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import LiveEvent, PinAnnouncement, PublishReport


@runtime_checkable
class IBroadcaster(Protocol):
    """
    Interface for pushing events to connected viewers.
    """

    @property
    def viewer_count(self) -> int:
        """Number of currently connected viewers."""
        ...

    def publish(self, event: LiveEvent) -> PublishReport:
        """
        Push an event to every connected viewer without waiting.

        A viewer whose buffer is full misses the event; the publisher is
        never delayed or failed by a slow viewer.
        """
        ...

    def announce_pin(
        self,
        pin: PinAnnouncement,
        count: Optional[int] = None,
    ) -> PublishReport:
        """
        Push a new-pin event, followed by a member-count event when a
        count is supplied.
        """
        ...
