"""Rate limits: per-client-IP SlowAPI limiter and the per-user action table.

The SlowAPI instance is shared so main (app.state.limiter) and route modules
use the same instance without circular imports. The action table feeds the
Redis-backed RateLimiter (per user, per action, fixed window). Actions not
listed fall back to "default".
"""

from dataclasses import dataclass

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

# Coarse per-IP ceiling on write endpoints, in front of the per-user action limits.
WRITE_ENDPOINT_LIMIT = "120/minute"

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)


@dataclass(frozen=True)
class RateLimitRule:
    """Budget for one action: at most max_requests per window_seconds."""

    max_requests: int
    window_seconds: int


DEFAULT_ACTION = "default"

RATE_LIMIT_CONFIG: dict[str, RateLimitRule] = {
    # Tickets
    "createTicket": RateLimitRule(max_requests=5, window_seconds=60),
    "updateTicket": RateLimitRule(max_requests=10, window_seconds=60),
    "postReply": RateLimitRule(max_requests=10, window_seconds=60),
    # Properties
    "createProperty": RateLimitRule(max_requests=3, window_seconds=60),
    # Invoices
    "createInvoice": RateLimitRule(max_requests=5, window_seconds=60),
    # Inspections
    "createInspection": RateLimitRule(max_requests=3, window_seconds=60),
    DEFAULT_ACTION: RateLimitRule(max_requests=20, window_seconds=60),
}


def get_rule(action: str) -> RateLimitRule:
    """Return the rule for action, or the default rule when unlisted."""
    return RATE_LIMIT_CONFIG.get(action, RATE_LIMIT_CONFIG[DEFAULT_ACTION])
