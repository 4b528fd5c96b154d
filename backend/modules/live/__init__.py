"""
Live module.

Fans out new pins and member counts to connected map viewers.

Public API:
- IBroadcaster: Interface for publishing
- LiveBroadcaster: In-process broadcast group
- LiveEvent: Event envelope
"""

from .interfaces import IBroadcaster
from .models import (
    LiveEvent,
    LiveEventType,
    PinAnnouncement,
    PublishReport,
    ViewerMessageType,
)
from .broadcaster import LiveBroadcaster, ViewerSession

__all__ = [
    # Interfaces
    "IBroadcaster",
    # Models
    "LiveEvent",
    "LiveEventType",
    "PinAnnouncement",
    "PublishReport",
    "ViewerMessageType",
    # Implementation
    "LiveBroadcaster",
    "ViewerSession",
]
