"""Smoke tests for health and app wiring."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis
from fastapi import FastAPI
from httpx import AsyncClient

from app.application.dtos.property import PropertyResult
from app.application.interfaces.repositories import Repositories
from app.core.config import get_settings
from app.domain.enums import UserRole
from app.main import create_app
from tests.fakes import FakeRedis, as_user, open_client


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_ready_reports_available_cache(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "cache": "available"}


async def test_ready_reports_unavailable_cache_and_recovers(
    app: FastAPI, client: AsyncClient, fake_redis: FakeRedis
) -> None:
    """Redis is optional: readiness stays 200 while the cache is down."""
    await app.state.cache.connection.reset()
    fake_redis.error = redis.ConnectionError("Connection refused")
    assert (await client.get("/api/v1/health/ready")).json()["cache"] == "unavailable"

    fake_redis.error = None

    assert (await client.get("/api/v1/health/ready")).json()["cache"] == "available"


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


async def test_malformed_request_id_is_replaced(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "bad id; drop"})
    assert response.headers["X-Request-ID"] != "bad id; drop"
    assert len(response.headers["X-Request-ID"]) == 36


async def test_redis_disabled_turns_off_cache_and_per_user_limits(
    monkeypatch: pytest.MonkeyPatch, repositories: Repositories
) -> None:
    monkeypatch.setenv("REDIS_ENABLED", "false")
    get_settings.cache_clear()
    repositories.properties.create = AsyncMock(
        return_value=PropertyResult(
            id="p1",
            agent_id="a1",
            tenant_id=None,
            title="Flat 4B",
            address="12 Kampala Road",
            rent=850.0,
            created_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
        )
    )
    body = {"title": "Flat 4B", "address": "12 Kampala Road", "rent": 850.0}

    async for client in open_client(create_app(repositories=repositories)):
        ready = await client.get("/api/v1/health/ready")
        created = await client.post(
            "/api/v1/properties", json=body, headers=as_user("a1", UserRole.AGENT)
        )

    assert ready.json()["cache"] == "disabled"
    assert created.status_code == 201
    assert "X-RateLimit-Limit" not in created.headers
