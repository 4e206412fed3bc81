"""Infrastructure exceptions for the key-value store.

Cache errors extend PropDeskException so presentation can map them
consistently, although CacheService contains them before they reach a handler.
"""

from app.domain.exceptions import PropDeskException


class CacheException(PropDeskException):
    """Base exception for cache/store operations."""


class CacheUnavailableError(CacheException):
    """Store connection could not be established (retries exhausted or disabled)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            f"Cache store unavailable: {url}",
            "CACHE_UNAVAILABLE",
            {"url": url, "reason": reason},
        )
