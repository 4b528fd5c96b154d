"""
Per-client sliding-window rate limits.

Four tiers mirror how each endpoint is used:
- read: map and count lookups
- form: website pin submissions
- webhook: automation tool deliveries (trusted IPs bypass)
- strict: diagnostic endpoints
"""

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Iterable, Optional

from fastapi import HTTPException, Request, status

from shared.config import Settings

logger = logging.getLogger(__name__)

READ = "read"
FORM = "form"
WEBHOOK = "webhook"
STRICT = "strict"

TIER_MESSAGES = {
    READ: "Too many requests, please try again later.",
    FORM: "Too many submissions from this IP, please try again later.",
    WEBHOOK: "Too many webhook requests, please slow down.",
    STRICT: "Too many requests to this endpoint, please try again later.",
}


class RateLimiter:
    """
    Sliding-window limiter keyed by client address.

    Each client keeps the timestamps of its requests inside the window.
    Clients with no hits left in the window are swept at most once per window.
    """

    def __init__(
        self,
        name: str,
        max_requests: int,
        window_seconds: float,
        exempt: Iterable[str] = (),
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._exempt = set(exempt)
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def hit(self, client: str) -> Optional[float]:
        """
        Record a request.

        Returns:
            None if allowed, otherwise seconds until the client may retry
        """
        if client in self._exempt:
            return None

        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)

            hits = self._hits.setdefault(client, deque())
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()

            if len(hits) >= self.max_requests:
                return max(0.0, self.window_seconds - (now - hits[0]))

            hits.append(now)
            return None

    def _sweep(self, now: float) -> None:
        stale = [
            client for client, hits in self._hits.items()
            if not hits or now - hits[-1] >= self.window_seconds
        ]
        for client in stale:
            del self._hits[client]
        self._last_sweep = now

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def remaining(self, client: str) -> int:
        with self._lock:
            hits = self._hits.get(client, ())
            now = self._clock()
            live = sum(1 for t in hits if now - t < self.window_seconds)
        return max(0, self.max_requests - live)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def build_rate_limiters(settings: Settings) -> Dict[str, RateLimiter]:
    """Create one limiter per tier from settings."""
    return {
        READ: RateLimiter(READ, settings.rate_limit_read_requests, settings.rate_limit_read_window),
        FORM: RateLimiter(FORM, settings.rate_limit_form_requests, settings.rate_limit_form_window),
        WEBHOOK: RateLimiter(
            WEBHOOK,
            settings.rate_limit_webhook_requests,
            settings.rate_limit_webhook_window,
            exempt=settings.trusted_webhook_ips,
        ),
        STRICT: RateLimiter(STRICT, settings.rate_limit_strict_requests, settings.rate_limit_strict_window),
    }


def client_address(request: Request, trusted_proxies: Iterable[str] = ()) -> str:
    """
    Client IP used as the rate-limit key.

    X-Forwarded-For is only read when the socket peer is a trusted proxy.
    Everyone else is keyed by the socket peer.
    """
    peer = request.client.host if request.client else None
    if peer is not None and peer in set(trusted_proxies):
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return peer or "unknown"


def rate_limit(tier: str):
    """
    Build a dependency enforcing one tier.

    Usage:
        @router.get("", dependencies=[Depends(rate_limit(READ))])
    """

    async def dependency(request: Request) -> None:
        container = request.app.state.container
        if not container.settings.rate_limit_enabled:
            return

        limiter = container.rate_limiters[tier]
        client = client_address(request, container.settings.trusted_proxies)
        retry_after = limiter.hit(client)
        if retry_after is None:
            return

        logger.warning(f"Rate limit '{tier}' exceeded for {client}")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={"success": False, "message": TIER_MESSAGES[tier]},
            headers={"Retry-After": str(int(retry_after) + 1)},
        )

    return dependency
