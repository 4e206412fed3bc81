"""Convert frozen record DTOs into JSON-ready dicts for caching and responses."""

from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any


def _convert(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(v) for v in value]
    return value


def to_payload(record: Any) -> dict[str, Any]:
    """Return record (a dataclass instance) as a dict of JSON-compatible values."""
    if not is_dataclass(record) or isinstance(record, type):
        raise TypeError(f"Expected a dataclass instance, got {type(record).__name__}")
    return _convert(asdict(record))
