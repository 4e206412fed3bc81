"""RateLimiter tests: fixed window counting, reset, fail-open, enforcement."""

from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from app.core.limiter import RATE_LIMIT_CONFIG, get_rule
from app.domain.exceptions import RateLimitExceededException
from app.infrastructure.cache import RateLimiter, RateLimitResult
from tests.fakes import FakeClock, FakeRedis


async def test_allows_up_to_max_then_denies(rate_limiter: RateLimiter) -> None:
    results = [await rate_limiter.check("u1", "createTicket", 5, 60) for _ in range(6)]

    assert [r.allowed for r in results] == [True] * 5 + [False]
    assert [r.remaining for r in results] == [4, 3, 2, 1, 0, 0]
    assert [r.current for r in results] == [1, 2, 3, 4, 5, 6]
    assert all(r.limit == 5 for r in results)


async def test_reset_at_is_now_plus_window(rate_limiter: RateLimiter, clock: FakeClock) -> None:
    result = await rate_limiter.check("u1", "createTicket", 5, 60)

    assert result.reset_at == clock.time_ms() + 60_000
    assert result.retry_after == 60


async def test_window_expiry_starts_a_new_window(
    rate_limiter: RateLimiter, clock: FakeClock
) -> None:
    for _ in range(3):
        await rate_limiter.check("u1", "createProperty", 3, 60)
    assert (await rate_limiter.check("u1", "createProperty", 3, 60)).allowed is False

    clock.advance(60)
    result = await rate_limiter.check("u1", "createProperty", 3, 60)

    assert result.allowed is True
    assert result.current == 1
    assert result.remaining == 2


async def test_window_is_fixed_from_first_request(
    rate_limiter: RateLimiter, clock: FakeClock
) -> None:
    """Requests later in the window do not push its end back."""
    await rate_limiter.check("u1", "postReply", 2, 60)
    clock.advance(59)
    await rate_limiter.check("u1", "postReply", 2, 60)
    assert (await rate_limiter.check("u1", "postReply", 2, 60)).allowed is False

    clock.advance(1)
    assert (await rate_limiter.check("u1", "postReply", 2, 60)).allowed is True


async def test_counters_are_per_subject_and_action(rate_limiter: RateLimiter) -> None:
    for _ in range(3):
        await rate_limiter.check("u1", "createInspection", 3, 60)

    assert (await rate_limiter.check("u1", "createInspection", 3, 60)).allowed is False
    assert (await rate_limiter.check("u2", "createInspection", 3, 60)).allowed is True
    assert (await rate_limiter.check("u1", "createInvoice", 3, 60)).allowed is True


async def test_counter_key_format(rate_limiter: RateLimiter, fake_redis: FakeRedis) -> None:
    await rate_limiter.check("user-9", "createTicket", 5, 60)

    assert fake_redis.data["ratelimit:createTicket:user-9"] == "1"
    assert fake_redis.ttl_of("ratelimit:createTicket:user-9") == 60


async def test_fails_open_when_store_is_down(
    rate_limiter: RateLimiter, fake_redis: FakeRedis, clock: FakeClock
) -> None:
    fake_redis.error = redis.ConnectionError("Connection refused")

    results = [await rate_limiter.check("u1", "createTicket", 5, 60) for _ in range(10)]

    assert all(r.allowed for r in results)
    assert all(r.remaining == 5 and r.current == 0 for r in results)
    assert results[0].reset_at == clock.time_ms() + 60_000


async def test_fails_open_when_cache_raises(clock: FakeClock) -> None:
    cache = AsyncMock()
    cache.increment_window = AsyncMock(side_effect=RuntimeError("boom"))

    result = await RateLimiter(cache).check("u1", "createTicket", 5, 60)

    assert result.allowed is True
    assert result.remaining == 5


async def test_enforce_raises_with_limit_state(
    rate_limiter: RateLimiter, clock: FakeClock
) -> None:
    for _ in range(5):
        await rate_limiter.enforce("u1", "createTicket", 5, 60)
    clock.advance(20)

    with pytest.raises(RateLimitExceededException) as exc_info:
        await rate_limiter.enforce("u1", "createTicket", 5, 60)

    exc = exc_info.value
    assert exc.error_code == "RATE_LIMIT_EXCEEDED"
    assert exc.message == "Too many requests. Please try again later."
    assert exc.limit == 5
    assert exc.retry_after == 60
    assert exc.details["remaining"] == 0


async def test_apply_uses_action_table(rate_limiter: RateLimiter) -> None:
    for _ in range(3):
        await rate_limiter.apply("agent-1", "createProperty")

    with pytest.raises(RateLimitExceededException) as exc_info:
        await rate_limiter.apply("agent-1", "createProperty")
    assert exc_info.value.limit == 3


async def test_apply_falls_back_to_default_rule(rate_limiter: RateLimiter) -> None:
    result = await rate_limiter.apply("u1", "somethingUnlisted")

    assert result.limit == RATE_LIMIT_CONFIG["default"].max_requests == 20
    assert result.remaining == 19


def test_action_table_values() -> None:
    assert get_rule("createTicket").max_requests == 5
    assert get_rule("updateTicket").max_requests == 10
    assert get_rule("postReply").max_requests == 10
    assert get_rule("createProperty").max_requests == 3
    assert get_rule("createInvoice").max_requests == 5
    assert get_rule("createInspection").max_requests == 3
    assert all(rule.window_seconds == 60 for rule in RATE_LIMIT_CONFIG.values())


def test_result_headers(clock: FakeClock) -> None:
    result = RateLimitResult(
        allowed=True, remaining=3, reset_at=clock.time_ms() + 1500, current=2, limit=5
    )

    assert result.headers() == {
        "X-RateLimit-Limit": "5",
        "X-RateLimit-Remaining": "3",
        "X-RateLimit-Reset": str(clock.time_ms() + 1500),
    }
    assert result.retry_after == 2
