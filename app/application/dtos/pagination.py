"""Page DTOs shared by cached list views.

Cached list payloads are plain JSON (see to_payload/from_payload) and carry
CACHE_SCHEMA_VERSION; a payload written by another schema version reads as a miss.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any

from app.core.constants import CACHE_SCHEMA_VERSION


@dataclass(frozen=True)
class Pagination:
    page: int
    page_size: int
    total: int
    total_pages: int

    @classmethod
    def of(cls, page: int, page_size: int, total: int) -> Pagination:
        """Build pagination info; total_pages is 0 for an empty list."""
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )


@dataclass(frozen=True)
class Page:
    """One page of serialized records plus pagination info."""

    items: list[dict[str, Any]] = field(default_factory=list)
    pagination: Pagination = field(default_factory=lambda: Pagination(1, 10, 0, 0))

    @classmethod
    def empty(cls, page: int, page_size: int) -> Page:
        return cls(items=[], pagination=Pagination.of(page, page_size, 0))

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict stored in the cache."""
        return {
            "schema_version": CACHE_SCHEMA_VERSION,
            "items": self.items,
            "pagination": asdict(self.pagination),
        }

    @classmethod
    def from_payload(cls, payload: Any) -> Page | None:
        """Rebuild a Page from a cached payload; None if the shape or version differs."""
        if not isinstance(payload, dict) or payload.get("schema_version") != CACHE_SCHEMA_VERSION:
            return None
        try:
            return cls(
                items=list(payload["items"]),
                pagination=Pagination(**payload["pagination"]),
            )
        except (KeyError, TypeError):
            return None
