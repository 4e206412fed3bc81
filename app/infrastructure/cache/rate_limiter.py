"""Fixed-window rate limiter on top of CacheService counters.

Counts requests per (subject, action) in windows that start at the first
request and last window_seconds. Not a sliding window: a burst straddling two
windows can admit up to 2 * max_requests in a short span. Store failures
fail open so an outage never blocks legitimate traffic.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass

from app.core.limiter import get_rule
from app.domain.exceptions import RateLimitExceededException
from app.infrastructure.cache.keys import CacheKeys
from app.infrastructure.cache.redis_cache import CacheService
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of one check.

    reset_at is epoch milliseconds computed as now + window, an upper bound
    on the counter's real expiry rather than its exact value.
    """

    allowed: bool
    remaining: int
    reset_at: int
    current: int
    limit: int

    @property
    def retry_after(self) -> int:
        """Whole seconds until reset_at (never negative)."""
        return max(0, math.ceil((self.reset_at - _now_ms()) / 1000))

    def headers(self) -> dict[str, str]:
        """X-RateLimit-* headers describing this result."""
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }


class RateLimiter:
    """Per-subject, per-action request counter with a fixed time window."""

    def __init__(self, cache: CacheService) -> None:
        self.cache = cache

    @traced("ratelimit.check")
    async def check(
        self,
        subject: str,
        action: str,
        max_requests: int = 5,
        window_seconds: int = 60,
    ) -> RateLimitResult:
        """Count one request for (subject, action) and report whether it is allowed.

        Args:
            subject: Who is acting (usually the user id).
            action: Action name (e.g. 'createTicket').
            max_requests: Allowed requests per window.
            window_seconds: Window length; the counter expires this long after its first hit.

        Returns:
            RateLimitResult; allowed=True with remaining=max_requests when the store is down.
        """
        reset_at = _now_ms() + window_seconds * 1000
        try:
            key = CacheKeys.rate_limit(subject, action)
            count = await self.cache.increment_window(key, window_seconds)
        except Exception:
            logger.exception("Rate limiter error for %s/%s; allowing request", subject, action)
            count = 0
        if count == 0:
            return RateLimitResult(
                allowed=True,
                remaining=max_requests,
                reset_at=reset_at,
                current=0,
                limit=max_requests,
            )
        return RateLimitResult(
            allowed=count <= max_requests,
            remaining=max(0, max_requests - count),
            reset_at=reset_at,
            current=count,
            limit=max_requests,
        )

    async def enforce(
        self,
        subject: str,
        action: str,
        max_requests: int = 5,
        window_seconds: int = 60,
    ) -> RateLimitResult:
        """Check and raise when over the limit.

        Raises:
            RateLimitExceededException: Rendered as HTTP 429 with rate-limit headers.
        """
        result = await self.check(subject, action, max_requests, window_seconds)
        if not result.allowed:
            logger.info(
                "Rate limit exceeded: %s/%s (%s/%s)",
                subject,
                action,
                result.current,
                max_requests,
            )
            raise RateLimitExceededException(
                action=action,
                limit=max_requests,
                reset_at=result.reset_at,
                retry_after=result.retry_after,
            )
        return result

    async def apply(self, subject: str, action: str) -> RateLimitResult:
        """Enforce the configured rule for action (default rule when unlisted)."""
        rule = get_rule(action)
        return await self.enforce(subject, action, rule.max_requests, rule.window_seconds)
