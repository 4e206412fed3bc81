"""Redis connection manager: one shared, lazily established client per application.

Created once in the lifespan (composition root) and injected into CacheService.
Concurrent callers during a connect attempt await the same in-flight task, so
at most one attempt runs at a time. A failed attempt raises CacheUnavailableError,
which CacheService turns into a miss / no-op.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING
from urllib.parse import urlsplit, urlunsplit

import redis.asyncio as redis
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff

from app.infrastructure.exceptions import CacheUnavailableError

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Backoff between command retries: 100ms base, capped at 1s.
_BACKOFF_BASE_SECONDS = 0.1
_BACKOFF_CAP_SECONDS = 1.0


def redact_url(url: str) -> str:
    """Return url without the password component (safe for logs and error details)."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    user = parts.username or ""
    return urlunsplit((parts.scheme, f"{user}:***@{host}", parts.path, parts.query, parts.fragment))


class RedisConnectionManager:
    """Owns the Redis client lifecycle: connect, share, reset, disconnect.

    The client is built with a short connect timeout, a per-command socket
    timeout and a bounded retry policy. After a connection-level failure
    callers invoke reset() so the next get_connection() reconnects.
    """

    def __init__(
        self,
        url: str,
        connect_timeout: float = 1.0,
        socket_timeout: float | None = 1.0,
        max_retries: int = 2,
        client_factory: Callable[[], redis.Redis] | None = None,
    ) -> None:
        """Initialize without connecting.

        Args:
            url: Redis URL (e.g. redis://localhost:6379/0).
            connect_timeout: Seconds allowed for establishing a socket.
            socket_timeout: Seconds allowed per command round trip.
            max_retries: Retries per command on connection errors before giving up.
            client_factory: Optional zero-arg callable returning a client (tests, DI).
        """
        self.url = url
        self.connect_timeout = connect_timeout
        self.socket_timeout = socket_timeout
        self.max_retries = max_retries
        self._client_factory = client_factory or self._build_client
        self._client: redis.Redis | None = None
        self._connecting: asyncio.Task[redis.Redis] | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client_factory: Callable[[], redis.Redis] | None = None,
    ) -> RedisConnectionManager:
        """Build a manager from application settings."""
        return cls(
            url=settings.redis_url,
            connect_timeout=settings.redis_connect_timeout,
            socket_timeout=settings.redis_socket_timeout,
            max_retries=settings.redis_max_retries,
            client_factory=client_factory,
        )

    @property
    def safe_url(self) -> str:
        return redact_url(self.url)

    @property
    def is_connected(self) -> bool:
        """True once a connect attempt succeeded and no reset/disconnect happened since."""
        return self._client is not None

    def _build_client(self) -> redis.Redis:
        return redis.Redis.from_url(
            self.url,
            decode_responses=True,
            socket_connect_timeout=self.connect_timeout,
            socket_timeout=self.socket_timeout,
            socket_keepalive=True,
            retry=Retry(
                ExponentialBackoff(cap=_BACKOFF_CAP_SECONDS, base=_BACKOFF_BASE_SECONDS),
                self.max_retries,
            ),
            retry_on_error=[redis.ConnectionError, redis.TimeoutError],
        )

    async def get_connection(self) -> redis.Redis:
        """Return the shared client, connecting first if needed.

        Raises:
            CacheUnavailableError: If the connect attempt failed.
        """
        if self._client is not None:
            return self._client
        if self._connecting is None:
            self._connecting = asyncio.create_task(self._connect())
            self._connecting.add_done_callback(self._clear_connecting)
        # Shielded: a cancelled caller must not cancel the attempt other callers share.
        return await asyncio.shield(self._connecting)

    def _clear_connecting(self, task: asyncio.Task) -> None:
        # Runs when the attempt settles, whether or not anyone is still waiting on it.
        if self._connecting is task:
            self._connecting = None

    async def _connect(self) -> redis.Redis:
        client = self._client_factory()
        try:
            await client.ping()
        except (redis.RedisError, OSError) as e:
            logger.warning("Redis connection failed: %s (%s). Cache disabled.", self.safe_url, e)
            await self._close_client(client)
            raise CacheUnavailableError(self.safe_url, str(e)) from e
        self._client = client
        logger.info("Redis cache connected: %s", self.safe_url)
        return client

    async def reset(self) -> None:
        """Drop the current client after a connection-level error; next call reconnects."""
        client, self._client = self._client, None
        if client is not None:
            logger.warning("Redis connection reset: %s", self.safe_url)
            await self._close_client(client)

    async def disconnect(self) -> None:
        """Close the client and cancel any in-flight connect. Safe to call repeatedly."""
        task, self._connecting = self._connecting, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except (asyncio.CancelledError, CacheUnavailableError):
                pass
        client, self._client = self._client, None
        if client is not None:
            await self._close_client(client)
            logger.info("Redis cache disconnected")

    @staticmethod
    async def _close_client(client: redis.Redis) -> None:
        try:
            await client.aclose()
        except redis.RedisError as e:
            logger.debug("Ignoring error while closing Redis client: %s", e)
