"""The fixed-window Lua script and RateLimiter against fakeredis's Lua runtime."""

from collections.abc import AsyncIterator

import fakeredis
import pytest

from app.infrastructure.cache import CacheService, RateLimiter, RedisConnectionManager

KEY = "ratelimit:createTicket:u1"


@pytest.fixture
async def lua_redis() -> AsyncIterator[fakeredis.FakeAsyncRedis]:
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()


@pytest.fixture
async def lua_cache(lua_redis: fakeredis.FakeAsyncRedis) -> AsyncIterator[CacheService]:
    connection = RedisConnectionManager(
        "redis://localhost:6379/15", client_factory=lambda: lua_redis
    )
    service = CacheService(connection)
    yield service
    await service.disconnect()


async def test_first_hit_sets_the_window_expiry(
    lua_cache: CacheService, lua_redis: fakeredis.FakeAsyncRedis
) -> None:
    assert await lua_cache.increment_window(KEY, 60) == 1

    assert await lua_redis.get(KEY) == "1"
    assert 0 < await lua_redis.ttl(KEY) <= 60


async def test_later_hits_keep_the_first_expiry(
    lua_cache: CacheService, lua_redis: fakeredis.FakeAsyncRedis
) -> None:
    await lua_cache.increment_window(KEY, 60)
    await lua_redis.expire(KEY, 5)

    assert await lua_cache.increment_window(KEY, 60) == 2
    assert await lua_cache.increment_window(KEY, 60) == 3
    assert 0 < await lua_redis.ttl(KEY) <= 5


async def test_rate_limiter_denies_past_the_limit(lua_cache: CacheService) -> None:
    limiter = RateLimiter(lua_cache)

    results = [await limiter.check("u1", "createTicket", max_requests=5) for _ in range(6)]

    assert [r.allowed for r in results] == [True] * 5 + [False]
    assert [r.remaining for r in results] == [4, 3, 2, 1, 0, 0]
    assert results[-1].current == 6
