"""Ticket reply endpoint tests: cached thread, postReply limit and author-only edits."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from app.application.dtos.property import PropertyResult
from app.application.dtos.ticket import TicketReplyResult, TicketResult
from app.application.interfaces.repositories import Repositories
from app.domain.enums import TicketStatus, UserRole
from tests.fakes import FakeRedis, as_user

CREATED = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)
PROPERTY = PropertyResult(
    id="p1",
    agent_id="a1",
    tenant_id="t1",
    title="Flat 4B",
    address="12 Kampala Road",
    rent=850.0,
    created_at=CREATED,
)
TENANT = as_user("t1", UserRole.TENANT)
AGENT = as_user("a1", UserRole.AGENT)


def _ticket(status: TicketStatus = TicketStatus.OPEN) -> TicketResult:
    return TicketResult(
        id="tk1",
        property_id="p1",
        title="Leaking tap",
        description="Kitchen tap drips all night",
        is_urgent=False,
        status=status,
        created_at=CREATED,
    )


def _reply(reply_id: str, user_id: str, content: str) -> TicketReplyResult:
    return TicketReplyResult(
        id=reply_id, ticket_id="tk1", user_id=user_id, content=content, created_at=CREATED
    )


@pytest.fixture
def wired(repositories: Repositories) -> Repositories:
    repositories.properties.get_by_id = AsyncMock(return_value=PROPERTY)
    repositories.tickets.get_by_id = AsyncMock(return_value=_ticket())
    repositories.replies.find_by_ticket_id = AsyncMock(
        return_value=[_reply("r1", "t1", "Still dripping")]
    )
    repositories.replies.create = AsyncMock(
        return_value=_reply("r2", "a1", "Plumber booked for Monday")
    )
    repositories.replies.get_by_id = AsyncMock(return_value=_reply("r1", "t1", "Still dripping"))
    return repositories


async def test_thread_is_cached_until_a_reply_is_posted(
    client: AsyncClient, wired: Repositories, fake_redis: FakeRedis
) -> None:
    first = await client.get("/api/v1/tickets/tk1/replies", headers=TENANT)
    await client.get("/api/v1/tickets/tk1/replies", headers=AGENT)

    assert first.status_code == 200
    assert [r["content"] for r in first.json()["replies"]] == ["Still dripping"]
    wired.replies.find_by_ticket_id.assert_awaited_once_with("tk1")
    assert fake_redis.ttl_of("ticket:tk1:replies") == 60

    posted = await client.post(
        "/api/v1/tickets/tk1/replies",
        json={"content": "  Plumber booked for Monday  "},
        headers=AGENT,
    )

    assert posted.status_code == 201
    assert posted.json()["id"] == "r2"
    assert posted.headers["X-RateLimit-Limit"] == "10"
    assert "ticket:tk1:replies" not in fake_redis.data
    created = wired.replies.create.await_args.args[0]
    assert created.content == "Plumber booked for Monday"
    assert created.user_id == "a1"


async def test_eleventh_reply_within_a_minute_is_rejected(
    client: AsyncClient, wired: Repositories
) -> None:
    statuses = [
        (
            await client.post(
                "/api/v1/tickets/tk1/replies", json={"content": "ping"}, headers=TENANT
            )
        ).status_code
        for _ in range(11)
    ]

    assert statuses == [201] * 10 + [429]


async def test_reply_to_closed_ticket_is_forbidden(
    client: AsyncClient, wired: Repositories
) -> None:
    wired.tickets.get_by_id = AsyncMock(return_value=_ticket(TicketStatus.CLOSED))

    response = await client.post(
        "/api/v1/tickets/tk1/replies", json={"content": "Any news?"}, headers=TENANT
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Cannot reply to a closed ticket"
    wired.replies.create.assert_not_awaited()


async def test_empty_reply_is_rejected(client: AsyncClient, wired: Repositories) -> None:
    response = await client.post(
        "/api/v1/tickets/tk1/replies", json={"content": "   "}, headers=TENANT
    )

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "content"}


async def test_outsider_cannot_read_thread(client: AsyncClient, wired: Repositories) -> None:
    response = await client.get(
        "/api/v1/tickets/tk1/replies", headers=as_user("t2", UserRole.TENANT)
    )

    assert response.status_code == 403
    wired.replies.find_by_ticket_id.assert_not_awaited()


async def test_only_author_deletes_reply(
    client: AsyncClient, wired: Repositories, fake_redis: FakeRedis
) -> None:
    fake_redis.data["ticket:tk1:replies"] = "[]"

    denied = await client.delete("/api/v1/tickets/replies/r1", headers=AGENT)
    deleted = await client.delete("/api/v1/tickets/replies/r1", headers=TENANT)

    assert denied.status_code == 403
    assert denied.json()["message"] == "You can only delete your own replies"
    assert deleted.status_code == 204
    wired.replies.delete.assert_awaited_once_with("r1")
    assert "ticket:tk1:replies" not in fake_redis.data
