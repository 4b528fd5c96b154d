"""
Webhook shared-secret check.

Automation tools (GoHighLevel, Make.com, Zapier) cannot always set custom
headers, so the secret is accepted from the X-Webhook-Secret header or the
`secret` query parameter. An empty configured secret disables the check.
"""

import hmac
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Query, status

from api.dependencies import get_app_settings
from shared.config import Settings
from shared.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

WEBHOOK_SECRET_HEADER = "X-Webhook-Secret"


class WebhookAuthError(AuthenticationError):
    """Raised when a webhook carries a missing or wrong secret."""

    def __init__(self, message: str = "Invalid webhook secret"):
        super().__init__(message, code="INVALID_WEBHOOK_SECRET")


def verify_webhook_secret(
    expected: str,
    header_secret: Optional[str] = None,
    query_secret: Optional[str] = None,
) -> None:
    """
    Compare the provided secret against the configured one.

    The header wins when both are supplied.

    Raises:
        WebhookAuthError: If a secret is configured and does not match
    """
    if not expected:
        return

    provided = header_secret or query_secret or ""
    if not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning("Invalid webhook secret")
        raise WebhookAuthError()


async def require_webhook_secret(
    x_webhook_secret: Optional[str] = Header(default=None, alias=WEBHOOK_SECRET_HEADER),
    secret: Optional[str] = Query(default=None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """
    Dependency guarding the webhook endpoints.

    Usage:
        @router.post("/webhook", dependencies=[Depends(require_webhook_secret)])
    """
    try:
        verify_webhook_secret(settings.webhook_secret, x_webhook_secret, secret)
    except WebhookAuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"success": False, **e.to_dict()},
        )
