"""
CRM module.

Best-effort forwarding of new contacts to the marketing CRM.

Public API:
- ICRMForwarder: Interface for CRM forwarding
- CRMContact: Flat contact payload
- ForwardResult: Outcome of a forward (never raised)
"""

from .interfaces import ICRMForwarder
from .models import CRMContact, ForwardResult, ForwardStatus
from .forwarder import CRMForwarder, create_crm_forwarder

__all__ = [
    "ICRMForwarder",
    "CRMContact",
    "ForwardResult",
    "ForwardStatus",
    "CRMForwarder",
    "create_crm_forwarder",
]
