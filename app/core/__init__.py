"""Settings loading, lifespan and rate-limit rules for the API process."""

from app.core.config import get_settings

__all__ = ["get_settings"]
