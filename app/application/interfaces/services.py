"""Service interfaces (ports) used by application services."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol


class ICacheService(Protocol):
    """Cache protocol for cached list views and invalidation (DIP)."""

    def is_available(self) -> bool:
        """Return True if cache is connected."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL. Returns True on success."""

    async def delete(self, key: str) -> bool:
        """Delete key. Returns True on success."""

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern. Returns count deleted."""

    async def get_or_set(
        self,
        key: str,
        producer: Callable[[], Awaitable[Any]],
        ttl: int = 300,
    ) -> Any:
        """Return cached value, else store and return producer() (None if it fails)."""
