"""
CRM forwarder backed by a GoHighLevel inbound webhook.

Forwarding is best effort: the pin is already stored and broadcast by the
time this runs, so nothing here may raise into the caller.
"""

import logging
from typing import Optional

import httpx

from shared.config import Settings, get_settings

from .interfaces import ICRMForwarder
from .models import CRMContact, ForwardResult, ForwardStatus

logger = logging.getLogger(__name__)


class CRMForwarder(ICRMForwarder):
    """Posts flat contact payloads to a CRM webhook URL."""

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Args:
            webhook_url: CRM inbound webhook. Empty disables forwarding.
            timeout: Seconds before the request is abandoned
        """
        self._webhook_url = webhook_url
        self._timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self._webhook_url)

    async def forward(self, contact: CRMContact) -> ForwardResult:
        """Send a contact; skip when there is no email."""
        if not contact.email:
            logger.debug("Skipping CRM forward - no email provided")
            return ForwardResult(status=ForwardStatus.SKIPPED)

        if not self.is_configured:
            logger.debug("CRM webhook URL not configured, skipping forward")
            return ForwardResult(status=ForwardStatus.SKIPPED)

        if contact.am_id:
            logger.info(f"Including affiliate ID in CRM forward: {contact.am_id}")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self._webhook_url,
                    json=contact.model_dump(),
                    headers={"Content-Type": "application/json"},
                    timeout=self._timeout,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"CRM forward failed with status {e.response.status_code}")
            return ForwardResult(
                status=ForwardStatus.FAILED,
                http_status=e.response.status_code,
                error=str(e),
            )
        except httpx.HTTPError as e:
            logger.warning(f"CRM forward failed: {e}")
            return ForwardResult(status=ForwardStatus.FAILED, error=str(e))

        logger.info(f"CRM forward successful: {response.status_code}")
        return ForwardResult(status=ForwardStatus.SENT, http_status=response.status_code)


def create_crm_forwarder(settings: Optional[Settings] = None) -> CRMForwarder:
    """Build a forwarder from application settings."""
    settings = settings or get_settings()
    return CRMForwarder(
        webhook_url=settings.crm_webhook_url,
        timeout=settings.crm_timeout_seconds,
    )
