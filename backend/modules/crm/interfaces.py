"""
CRM module interface.
"""

from typing import Protocol, runtime_checkable

from .models import CRMContact, ForwardResult


@runtime_checkable
class ICRMForwarder(Protocol):
    """
    Interface for pushing new contacts to the marketing CRM.
    """

    async def forward(self, contact: CRMContact) -> ForwardResult:
        """
        Send a contact to the CRM.

        Contacts without an email are skipped. Network and HTTP errors are
        captured in the returned ForwardResult instead of being raised.
        """
        ...
