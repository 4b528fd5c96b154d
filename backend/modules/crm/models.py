"""
CRM module data models.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ForwardStatus(str, Enum):
    """Outcome of a CRM forward."""

    SENT = "sent"
    SKIPPED = "skipped"  # No email, or no CRM configured
    FAILED = "failed"


class CRMContact(BaseModel):
    """
    Flat contact payload accepted by the CRM inbound webhook.

    Field names follow the CRM's custom field keys, not our own.
    """

    first_name: str = ""
    email: str = ""
    pet_name: str = ""
    pet_type: str = ""
    pet_status: str = "with-you"
    city: str = ""
    state: str = ""
    country: str = ""
    am_id: str = Field(default="", description="Affiliate attribution token")


class ForwardResult(BaseModel):
    """Result of forwarding one contact. Never raised, only returned."""

    status: ForwardStatus
    http_status: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != ForwardStatus.FAILED
