"""Redis-based cache service for performance optimization.

Provides async Redis caching with TTL support, pattern invalidation and the
counter primitives used by the rate limiter. Every operation contains store
failures: an outage reads as a miss, writes report False/0, and nothing is
raised to business logic. Key format lives in app.infrastructure.cache.keys.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

import redis.asyncio as redis

from app.infrastructure.cache.connection import RedisConnectionManager
from app.infrastructure.cache.results import CacheHit, CacheResult, Computed, ProducerError
from app.infrastructure.exceptions import CacheUnavailableError
from app.shared.telemetry.tracing import add_span_event, traced

logger = logging.getLogger(__name__)

T = TypeVar("T")

# INCR and, on the first hit of a window, EXPIRE in one server-side step.
# KEYS[1] = counter key, ARGV[1] = window seconds. Returns the new count.
INCR_WINDOW_SCRIPT = """
local current = redis.call('INCR', KEYS[1])
if current == 1 then
    redis.call('EXPIRE', KEYS[1], ARGV[1])
end
return current
"""


class CacheService:
    """Async Redis cache service with TTL support.

    Caches list views and records for the service layer and backs the rate
    limiter's counters. Acquires the shared client from RedisConnectionManager
    on every operation, so a store that comes back is picked up without restart.
    """

    def __init__(
        self,
        connection: RedisConnectionManager,
        delete_batch_size: int = 500,
    ) -> None:
        """Initialize cache service.

        Args:
            connection: Shared connection manager (one per application).
            delete_batch_size: Keys per UNLINK batch in delete_pattern.
        """
        self.connection = connection
        self.delete_batch_size = delete_batch_size

    async def connect(self) -> bool:
        """Eagerly establish the connection (startup). Returns True if connected."""
        try:
            await self.connection.get_connection()
        except CacheUnavailableError:
            return False
        return True

    async def disconnect(self) -> None:
        """Close Redis connection. Call on app shutdown."""
        await self.connection.disconnect()

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self.connection.is_connected

    async def _execute(
        self,
        operation: str,
        target: str,
        command: Callable[[redis.Redis], Awaitable[T]],
        default: T,
    ) -> T:
        """Run one store command with failure containment.

        Connection-level errors reset the shared client so the next call
        reconnects; every failure is logged and mapped to default.
        """
        try:
            client = await self.connection.get_connection()
        except CacheUnavailableError:
            logger.debug("Cache %s skipped for %s (Redis unavailable)", operation, target)
            return default
        try:
            return await command(client)
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning(
                "Cache %s unavailable for %s (Redis disconnected): %s", operation, target, e
            )
            await self.connection.reset()
            return default
        except redis.RedisError:
            logger.exception("Cache %s error for %s", operation, target)
            return default

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing/unavailable.

        Args:
            key: Cache key (use app.infrastructure.cache.keys builders).

        Returns:
            Cached value or None. Malformed JSON is treated as a miss.
        """
        raw = await self._execute("get", key, lambda c: c.get(key), None)
        if raw is None:
            logger.debug("Cache MISS: %s", key)
            return None
        try:
            value = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Cache value for %s is not valid JSON; treating as miss", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return value

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL. Returns True on success.

        Args:
            key: Cache key.
            value: Value to cache (JSON-serializable).
            ttl: Time-to-live in seconds (default 300).

        Returns:
            True if stored, False otherwise.
        """
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError):
            logger.exception("Cache set error for key %s (value not JSON-serializable)", key)
            return False

        async def _setex(client: redis.Redis) -> bool:
            await client.setex(key, ttl, serialized)
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
            return True

        return await self._execute("set", key, _setex, False)

    async def delete(self, key: str) -> bool:
        """Remove key from cache. Absent keys count as success.

        Args:
            key: Cache key to delete.

        Returns:
            True unless the store failed.
        """

        async def _delete(client: redis.Redis) -> bool:
            await client.delete(key)
            logger.debug("Cache DELETE: %s", key)
            return True

        return await self._execute("delete", key, _delete, False)

    @traced("cache.delete_pattern")
    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK (non-blocking).

        Args:
            pattern: Glob-style match pattern (e.g. tickets:AGENT:agent-1:*).

        Returns:
            Number of keys deleted (0 if none matched or on error).
        """

        async def _delete_matching(client: redis.Redis) -> int:
            deleted = 0
            chunk: list[str] = []
            async for key in client.scan_iter(match=pattern, count=self.delete_batch_size):
                chunk.append(key)
                if len(chunk) >= self.delete_batch_size:
                    deleted += int(await client.unlink(*chunk) or 0)
                    chunk = []
            if chunk:
                deleted += int(await client.unlink(*chunk) or 0)
            if deleted > 0:
                logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
            return deleted

        return await self._execute("delete_pattern", pattern, _delete_matching, 0)

    async def exists(self, key: str) -> bool:
        """Return True if key is present."""

        async def _exists(client: redis.Redis) -> bool:
            return int(await client.exists(key)) == 1

        return await self._execute("exists", key, _exists, False)

    async def set_if_absent(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Atomically store value only if key does not exist (SET NX EX).

        Used for advisory locks and idempotency guards.

        Returns:
            True if this call stored the value, False if the key existed or on error.
        """
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError):
            logger.exception("Cache set_if_absent error for key %s (value not JSON-serializable)", key)
            return False

        async def _set_nx(client: redis.Redis) -> bool:
            return bool(await client.set(key, serialized, nx=True, ex=ttl))

        return await self._execute("set_if_absent", key, _set_nx, False)

    async def increment(self, key: str) -> int:
        """Increment counter key (created at 1 if absent). Returns 0 on store error."""

        async def _incr(client: redis.Redis) -> int:
            return int(await client.incr(key))

        return await self._execute("increment", key, _incr, 0)

    async def expire(self, key: str, ttl: int) -> bool:
        """Set key's remaining lifetime without touching its value."""

        async def _expire(client: redis.Redis) -> bool:
            return bool(await client.expire(key, ttl))

        return await self._execute("expire", key, _expire, False)

    async def increment_window(self, key: str, window_seconds: int) -> int:
        """Increment a fixed-window counter, setting its expiry only on the first hit.

        Increment and conditional expire run as one Lua script, so a crash or
        interleaving between the two steps cannot leave a counter without TTL.

        Returns:
            New count, or 0 on store error (callers fail open).
        """

        async def _incr_window(client: redis.Redis) -> int:
            return int(await client.eval(INCR_WINDOW_SCRIPT, 1, key, window_seconds))

        return await self._execute("increment_window", key, _incr_window, 0)

    async def get_or_set_result(
        self,
        key: str,
        producer: Callable[[], Awaitable[Any]],
        ttl: int = 300,
    ) -> CacheResult:
        """Read-through lookup that reports how the value was obtained.

        On hit returns CacheHit. On miss awaits producer(), stores its result
        with ttl and returns Computed. A producer exception is returned as
        ProducerError instead of raised, and nothing is stored.
        """
        cached_value = await self.get(key)
        if cached_value is not None:
            return CacheHit(cached_value)
        try:
            value = await producer()
        except Exception as e:
            logger.exception("Cache producer error for key %s", key)
            add_span_event(
                "cache.producer_error",
                {"cache.key": key, "error.type": type(e).__name__},
            )
            return ProducerError(e)
        stored = await self.set(key, value, ttl=ttl)
        return Computed(value, stored)

    async def get_or_set(
        self,
        key: str,
        producer: Callable[[], Awaitable[Any]],
        ttl: int = 300,
    ) -> Any | None:
        """Cache-aside lookup: cached value, else producer() stored under key.

        A failing producer yields None (logged and recorded as a span event);
        use get_or_set_result to tell an empty result from a failure.
        """
        result = await self.get_or_set_result(key, producer, ttl=ttl)
        if isinstance(result, ProducerError):
            return None
        return result.value


def _resolve_cache(
    args: tuple[Any, ...], kwargs: dict[str, Any]
) -> tuple[CacheService | None, tuple[Any, ...], dict[str, Any]]:
    """Resolve CacheService and args/kwargs for the wrapped function.

    Resolution order: keyword "cache", then args[0].cache, then args[0] if CacheService.
    """
    if "cache" in kwargs and isinstance(kwargs.get("cache"), CacheService):
        cache = kwargs["cache"]
        call_kwargs = {k: v for k, v in kwargs.items() if k != "cache"}
        return cache, args, call_kwargs
    if args:
        first = args[0]
        if isinstance(first, CacheService):
            return first, args[1:], kwargs
        cache_attr = getattr(first, "cache", None)
        if isinstance(cache_attr, CacheService):
            return cache_attr, args[1:], kwargs
    return None, args, kwargs


def cached(
    key_prefix: str,
    ttl: int = 300,
    key_builder: Callable[..., str] | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to cache async function results in Redis.

    The wrapped function must receive a CacheService in one of these ways:
    - keyword argument "cache",
    - first argument has a .cache attribute that is a CacheService,
    - or first argument is the CacheService instance.
    Without one the function runs uncached.

    Args:
        key_prefix: Prefix for cache key (e.g. 'property').
        ttl: Time-to-live in seconds.
        key_builder: Optional callable(*args, **kwargs) -> key; else built from args/kwargs.

    Returns:
        Decorator that caches return value when CacheService is resolved.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            cache, func_args, call_kwargs = _resolve_cache(args, kwargs)
            if cache is None:
                return await func(*args, **kwargs)
            if key_builder:
                cache_key = key_builder(*func_args, **call_kwargs)
            else:
                parts = [str(a) for a in func_args]
                parts.extend(f"{k}={v}" for k, v in sorted(call_kwargs.items()))
                cache_key = f"{key_prefix}:{':'.join(parts)}"
            cached_value = await cache.get(cache_key)
            if cached_value is not None:
                return cached_value
            if "cache" in kwargs and cache is kwargs["cache"]:
                result = await func(*args, **call_kwargs)
            else:
                result = await func(*args, **kwargs)
            await cache.set(cache_key, result, ttl=ttl)
            return result

        return wrapper

    return decorator
