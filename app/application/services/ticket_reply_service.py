"""Ticket reply service: the cached conversation thread under each ticket.

Both parties to a ticket's property read and post replies; only the author
edits or deletes a reply. Every reply write drops the ticket's cached thread.
"""

from __future__ import annotations

import logging
from typing import Any

from app.application.dtos.serialization import to_payload
from app.application.dtos.ticket import TicketReplyCreate, TicketReplyResult, TicketResult
from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import (
    IPropertyRepository,
    ITicketReplyRepository,
    ITicketRepository,
)
from app.application.interfaces.services import ICacheService
from app.application.services.access import require_property_access
from app.core.constants import MAX_REPLY_LENGTH, CacheTTL
from app.domain.enums import TicketStatus
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.cache.keys import CacheKeys, is_key_safe
from app.infrastructure.cache.redis_cache import cached

logger = logging.getLogger(__name__)


def _clean_content(content: str) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationException("Reply content cannot be empty", field="content")
    if len(text) > MAX_REPLY_LENGTH:
        raise ValidationException(
            f"Reply content is too long (max {MAX_REPLY_LENGTH} characters)", field="content"
        )
    return text


class TicketReplyService:
    """Reply use cases with a read-through cache on each ticket's thread."""

    def __init__(
        self,
        reply_repo: ITicketReplyRepository,
        ticket_repo: ITicketRepository,
        property_repo: IPropertyRepository,
        cache: ICacheService | None = None,
    ) -> None:
        self.reply_repo = reply_repo
        self.ticket_repo = ticket_repo
        self.property_repo = property_repo
        self.cache = cache

    @cached("replies", ttl=CacheTTL.SHORT, key_builder=CacheKeys.ticket_replies)
    async def _load_replies(self, ticket_id: str) -> list[dict[str, Any]]:
        replies = await self.reply_repo.find_by_ticket_id(ticket_id)
        return [to_payload(r) for r in replies]

    async def list_replies(self, ticket_id: str, user: CurrentUser) -> list[dict[str, Any]]:
        """Return the ticket's replies, oldest first (cached for CacheTTL.SHORT)."""
        await self._require_ticket_access(ticket_id, user)
        return await self._load_replies(ticket_id)

    async def create_reply(
        self, ticket_id: str, user: CurrentUser, content: str
    ) -> TicketReplyResult:
        """Post a reply as the current user; closed tickets take no replies."""
        text = _clean_content(content)
        ticket = await self._require_ticket_access(ticket_id, user)
        if ticket.status == TicketStatus.CLOSED:
            raise AuthorizationException(
                resource="ticket", action="reply", message="Cannot reply to a closed ticket"
            )
        reply = await self.reply_repo.create(
            TicketReplyCreate(ticket_id=ticket_id, user_id=user.id, content=text)
        )
        await self._invalidate(ticket_id)
        return reply

    async def update_reply(
        self, reply_id: str, user: CurrentUser, content: str
    ) -> TicketReplyResult:
        """Replace the text of the user's own reply."""
        text = _clean_content(content)
        reply = await self._require_author(reply_id, user, "edit")
        updated = await self.reply_repo.update_content(reply_id, text)
        await self._invalidate(reply.ticket_id)
        return updated

    async def delete_reply(self, reply_id: str, user: CurrentUser) -> None:
        """Delete the user's own reply."""
        reply = await self._require_author(reply_id, user, "delete")
        await self.reply_repo.delete(reply_id)
        await self._invalidate(reply.ticket_id)

    async def _require_ticket_access(self, ticket_id: str, user: CurrentUser) -> TicketResult:
        if not is_key_safe(ticket_id):
            raise ResourceNotFoundException("ticket", ticket_id)
        ticket = await self.ticket_repo.get_by_id(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("ticket", ticket_id)
        prop = await self.property_repo.get_by_id(ticket.property_id)
        if prop is None:
            raise ResourceNotFoundException("property", ticket.property_id)
        require_property_access(prop, user, "ticket")
        return ticket

    async def _require_author(
        self, reply_id: str, user: CurrentUser, action: str
    ) -> TicketReplyResult:
        reply = await self.reply_repo.get_by_id(reply_id)
        if reply is None:
            raise ResourceNotFoundException("reply", reply_id)
        if reply.user_id != user.id:
            raise AuthorizationException(
                resource="reply",
                action=action,
                message=f"You can only {action} your own replies",
            )
        return reply

    async def _invalidate(self, ticket_id: str) -> None:
        if self.cache is not None:
            await self.cache.delete(CacheKeys.ticket_replies(ticket_id))
        logger.info("Invalidated reply cache for ticket %s", ticket_id)
