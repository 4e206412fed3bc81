"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (Redis connection,
cache service, rate limiter, telemetry).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.core.config import get_settings
from app.infrastructure.cache import CacheService, RateLimiter, RedisConnectionManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: telemetry (if enabled), Redis cache and rate limiter (if
    enabled). A Redis server that is down at startup does not stop the app;
    the cache reconnects on first use. Shutdown order: cache disconnect,
    telemetry shutdown.
    """
    settings = get_settings()

    # ---- Startup ----
    app.state.telemetry = None
    if settings.telemetry_enabled:
        from app.shared.telemetry.telemetry import Telemetry

        telemetry = Telemetry.from_settings(settings)
        if telemetry.start(app):
            app.state.telemetry = telemetry

    if settings.redis_enabled:
        connection = RedisConnectionManager.from_settings(
            settings,
            client_factory=getattr(app.state, "redis_client_factory", None),
        )
        cache = CacheService(connection, delete_batch_size=settings.cache_delete_batch_size)
        if not await cache.connect():
            logger.warning(
                "Cache unavailable at startup (%s); serving from the data store",
                connection.safe_url,
            )
        app.state.cache = cache
        app.state.rate_limiter = RateLimiter(cache)
    else:
        logger.info("Redis disabled; caching and per-user rate limits are off")
        app.state.cache = None
        app.state.rate_limiter = None

    yield

    # ---- Shutdown ----
    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
    app.state.cache = None
    app.state.rate_limiter = None

    if app.state.telemetry is not None:
        app.state.telemetry.shutdown()
        app.state.telemetry = None
