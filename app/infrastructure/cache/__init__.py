"""Cache: Redis connection, cache service, rate limiter and key utilities.

Used by application services for cached list views and by the API layer
for per-user rate limits. Key format is in keys.py.
"""

from app.infrastructure.cache.connection import RedisConnectionManager
from app.infrastructure.cache.keys import CacheKeys
from app.infrastructure.cache.rate_limiter import RateLimiter, RateLimitResult
from app.infrastructure.cache.redis_cache import CacheService, cached
from app.infrastructure.cache.results import (
    CacheHit,
    CacheResult,
    Computed,
    ProducerError,
)

__all__ = [
    "CacheHit",
    "CacheKeys",
    "CacheResult",
    "CacheService",
    "Computed",
    "ProducerError",
    "RateLimitResult",
    "RateLimiter",
    "RedisConnectionManager",
    "cached",
]
