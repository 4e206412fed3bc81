"""Shared utilities: telemetry and datetime helpers.

Used by application and infrastructure. No business logic.
"""

from app.shared.utils import ensure_utc, utc_now

__all__ = ["utc_now", "ensure_utc"]
