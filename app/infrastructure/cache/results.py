"""Typed outcomes of a read-through lookup (CacheService.get_or_set_result)."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheHit:
    """Value served from the cache; the producer did not run."""

    value: Any


@dataclass(frozen=True)
class Computed:
    """Cache miss; the producer ran. stored is False when the write-back failed."""

    value: Any
    stored: bool


@dataclass(frozen=True)
class ProducerError:
    """Cache miss and the producer raised; nothing was stored."""

    cause: Exception


CacheResult = CacheHit | Computed | ProducerError
