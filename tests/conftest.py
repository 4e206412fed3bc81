"""Pytest configuration and fixtures for propdesk.

No running Redis or database is required: the cache runs against the
in-memory FakeRedis (tests/fakes.py) and repositories are AsyncMocks.
HTTP tests build the app with create_app() and run its lifespan.
"""

from collections.abc import AsyncIterator
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from app.application.interfaces.repositories import Repositories
from app.core.config import get_settings
from app.core.limiter import limiter
from app.infrastructure.cache import CacheService, RateLimiter, RedisConnectionManager
from app.infrastructure.cache import rate_limiter as rate_limiter_module
from app.main import create_app
from tests.fakes import FakeClock, FakeRedis, open_client

TEST_REDIS_URL = "redis://localhost:6379/15"


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch):
    """Fresh settings per test; telemetry off and a test Redis URL."""
    monkeypatch.setenv("REDIS_URL", TEST_REDIS_URL)
    monkeypatch.setenv("TELEMETRY_ENABLED", "false")
    monkeypatch.setenv("REDIS_ENABLED", "true")
    monkeypatch.delenv("PAYMENT_WEBHOOK_SECRET", raising=False)
    get_settings.cache_clear()
    limiter.reset()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Manual clock shared by FakeRedis expiry and the rate limiter's reset_at."""
    fake_clock = FakeClock()
    monkeypatch.setattr(rate_limiter_module, "_now_ms", fake_clock.time_ms)
    return fake_clock


@pytest.fixture
def fake_redis(clock: FakeClock) -> FakeRedis:
    return FakeRedis(clock)


@pytest.fixture
def connection(fake_redis: FakeRedis) -> RedisConnectionManager:
    return RedisConnectionManager(TEST_REDIS_URL, client_factory=lambda: fake_redis)


@pytest.fixture
async def cache(connection: RedisConnectionManager) -> AsyncIterator[CacheService]:
    service = CacheService(connection, delete_batch_size=2)
    yield service
    await service.disconnect()


@pytest.fixture
def rate_limiter(cache: CacheService) -> RateLimiter:
    return RateLimiter(cache)


@pytest.fixture
def repositories() -> Repositories:
    """Repository protocols backed by AsyncMock; tests set return values."""
    return Repositories(
        tickets=AsyncMock(),
        replies=AsyncMock(),
        properties=AsyncMock(),
        invoices=AsyncMock(),
        inspections=AsyncMock(),
    )


@pytest.fixture
def app(repositories: Repositories, fake_redis: FakeRedis) -> FastAPI:
    """App wired to mock repositories and FakeRedis."""
    return create_app(repositories=repositories, redis_client_factory=lambda: fake_redis)


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the app (ASGI), lifespan included."""
    async for ac in open_client(app):
        yield ac


@pytest.fixture
async def unwired_client(fake_redis: FakeRedis) -> AsyncIterator[AsyncClient]:
    """Client for an app created without repositories (routes needing them answer 503)."""
    app = create_app(redis_client_factory=lambda: fake_redis)
    async for ac in open_client(app):
        yield ac
