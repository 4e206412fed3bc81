"""Invoice webhook security and property/inspection route tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from app.application.dtos.invoice import InvoiceResult
from app.application.dtos.property import PropertyResult
from app.application.interfaces.repositories import Repositories
from app.core.config import get_settings
from app.domain.enums import InvoiceStatus, UserRole
from tests.fakes import FakeRedis, as_user

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
PROPERTY = PropertyResult(
    id="p1",
    agent_id="a1",
    tenant_id="t1",
    title="Flat 4B",
    address="12 Kampala Road",
    rent=850.0,
    created_at=NOW,
)
AGENT = as_user("a1", UserRole.AGENT)
WEBHOOK_SECRET = "whsec-test"


def _invoice(status: InvoiceStatus, reference: str | None = None) -> InvoiceResult:
    return InvoiceResult(
        id="i1",
        property_id="p1",
        tenant_id="t1",
        amount=850.0,
        status=status,
        due_date=NOW + timedelta(days=14),
        billing_month=NOW,
        paid_at=NOW if status == InvoiceStatus.PAID else None,
        payment_reference=reference,
    )


@pytest.fixture
def webhook_secret(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("PAYMENT_WEBHOOK_SECRET", WEBHOOK_SECRET)
    get_settings.cache_clear()
    return WEBHOOK_SECRET


@pytest.fixture
def wired(repositories: Repositories) -> Repositories:
    repositories.properties.get_by_id = AsyncMock(return_value=PROPERTY)
    repositories.properties.create = AsyncMock(return_value=PROPERTY)
    repositories.properties.find_by_agent_id = AsyncMock(return_value=[PROPERTY])
    repositories.properties.count_by_agent_id = AsyncMock(return_value=1)
    repositories.invoices.get_by_id = AsyncMock(return_value=_invoice(InvoiceStatus.PENDING))
    repositories.invoices.update = AsyncMock(
        return_value=_invoice(InvoiceStatus.PAID, "chk_123")
    )
    return repositories


async def test_paid_webhook_marks_invoice_paid_and_drops_cache(
    client: AsyncClient, wired: Repositories, webhook_secret: str, fake_redis: FakeRedis
) -> None:
    fake_redis.data["invoices:AGENT:a1:p1:s10"] = "{}"
    fake_redis.data["invoices:TENANT:t1:p1:s10"] = "{}"
    fake_redis.data["invoice:i1"] = "{}"

    response = await client.post(
        "/api/v1/invoices/i1/paid",
        json={"payment_reference": "chk_123"},
        headers={"X-Webhook-Secret": webhook_secret},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "PAID"
    assert response.json()["payment_reference"] == "chk_123"
    assert not any(key.startswith("invoice") for key in fake_redis.data)


async def test_paid_webhook_rejects_wrong_secret(
    client: AsyncClient, wired: Repositories, webhook_secret: str
) -> None:
    response = await client.post(
        "/api/v1/invoices/i1/paid",
        json={"payment_reference": "chk_123"},
        headers={"X-Webhook-Secret": "nope"},
    )

    assert response.status_code == 401
    wired.invoices.update.assert_not_awaited()


async def test_paid_webhook_disabled_without_secret(
    client: AsyncClient, wired: Repositories
) -> None:
    response = await client.post(
        "/api/v1/invoices/i1/paid", json={"payment_reference": "chk_123"}
    )

    assert response.status_code == 503


async def test_create_property_is_limited_to_three_per_minute(
    client: AsyncClient, wired: Repositories
) -> None:
    body = {"title": "Flat 4B", "address": "12 Kampala Road", "rent": 850.0, "tenant_id": "t1"}
    statuses = [
        (await client.post("/api/v1/properties", json=body, headers=AGENT)).status_code
        for _ in range(4)
    ]

    assert statuses == [201, 201, 201, 429]


async def test_property_list_and_detail(client: AsyncClient, wired: Repositories) -> None:
    listing = await client.get("/api/v1/properties", headers=AGENT)
    detail = await client.get("/api/v1/properties/p1", headers=AGENT)

    assert listing.status_code == 200
    assert listing.json()["items"][0]["id"] == "p1"
    assert detail.status_code == 200
    assert detail.json()["address"] == "12 Kampala Road"


async def test_property_id_with_key_separator_is_not_found(
    client: AsyncClient, repositories: Repositories
) -> None:
    repositories.properties.get_by_id = AsyncMock(return_value=None)

    response = await client.get("/api/v1/properties/p1:x", headers=AGENT)

    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_invoice_detail_is_cached_until_paid(
    client: AsyncClient, wired: Repositories, webhook_secret: str, fake_redis: FakeRedis
) -> None:
    tenant = as_user("t1", UserRole.TENANT)

    first = await client.get("/api/v1/invoices/i1", headers=tenant)
    second = await client.get("/api/v1/invoices/i1", headers=tenant)

    assert first.status_code == second.status_code == 200
    assert first.json()["status"] == "PENDING"
    wired.invoices.get_by_id.assert_awaited_once_with("i1")
    assert "invoice:i1" in fake_redis.data

    await client.post(
        "/api/v1/invoices/i1/paid",
        json={"payment_reference": "chk_123"},
        headers={"X-Webhook-Secret": webhook_secret},
    )
    assert "invoice:i1" not in fake_redis.data


async def test_invoice_detail_hidden_from_other_tenant(
    client: AsyncClient, wired: Repositories
) -> None:
    response = await client.get("/api/v1/invoices/i1", headers=as_user("t2", UserRole.TENANT))

    assert response.status_code == 403


async def test_tenant_cannot_create_invoice(client: AsyncClient, wired: Repositories) -> None:
    response = await client.post(
        "/api/v1/invoices",
        json={
            "property_id": "p1",
            "amount": 850.0,
            "due_date": "2026-03-15T00:00:00Z",
            "billing_month": "2026-03-01T00:00:00Z",
        },
        headers=as_user("t1", UserRole.TENANT),
    )

    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"


async def test_create_inspection_requires_future_dates(
    client: AsyncClient, wired: Repositories
) -> None:
    response = await client.post(
        "/api/v1/inspections",
        json={"property_id": "p1", "available_dates": ["2000-01-01T10:00:00Z"]},
        headers=AGENT,
    )

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "available_dates"}
