"""Ticket service: cached ticket lists and records, invalidation after ticket writes.

Agents see tickets on every property they manage; tenants see tickets on the
property they rent. Every write drops the ticket lists of both parties.
"""

from __future__ import annotations

import logging
from typing import Any

from app.application.dtos.pagination import Page, Pagination
from app.application.dtos.property import PropertyResult
from app.application.dtos.serialization import to_payload
from app.application.dtos.ticket import TicketCreate, TicketResult
from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import IPropertyRepository, ITicketRepository
from app.application.interfaces.services import ICacheService
from app.application.services.access import require_property_access, require_role
from app.application.services.list_cache import invalidate_for_parties, load_page
from app.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, CacheTTL
from app.domain.enums import TicketStatus, UserRole
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.cache.keys import CacheKeys, is_key_safe
from app.infrastructure.cache.redis_cache import cached

logger = logging.getLogger(__name__)


class TicketService:
    """Ticket use cases; lists cached per user, records cached by id."""

    def __init__(
        self,
        ticket_repo: ITicketRepository,
        property_repo: IPropertyRepository,
        cache: ICacheService | None = None,
    ) -> None:
        self.ticket_repo = ticket_repo
        self.property_repo = property_repo
        self.cache = cache

    async def list_for_user(
        self,
        user: CurrentUser,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page:
        """Return one page of the user's tickets (cached for CacheTTL.SHORT)."""
        skip = (page - 1) * page_size

        async def produce() -> Page:
            if user.is_agent:
                tickets = await self.ticket_repo.find_by_agent_id(user.id, skip, page_size)
                total = await self.ticket_repo.count_by_agent_id(user.id)
            else:
                prop = await self.property_repo.get_by_tenant_id(user.id)
                if prop is None:
                    return Page.empty(page, page_size)
                tickets = await self.ticket_repo.find_by_property_id(prop.id, skip, page_size)
                total = await self.ticket_repo.count_by_property_id(prop.id)
            return Page(
                items=[to_payload(t) for t in tickets],
                pagination=Pagination.of(page, page_size, total),
            )

        return await load_page(
            self.cache,
            CacheKeys.tickets_list(user.id, user.role.value),
            page,
            page_size,
            produce,
            ttl=CacheTTL.SHORT,
        )

    @cached("ticket", ttl=CacheTTL.MEDIUM, key_builder=CacheKeys.ticket_detail)
    async def _load_ticket(self, ticket_id: str) -> dict[str, Any] | None:
        ticket = await self.ticket_repo.get_by_id(ticket_id)
        return to_payload(ticket) if ticket is not None else None

    async def get_ticket(self, ticket_id: str, user: CurrentUser) -> dict[str, Any]:
        """Return one ticket if the user is a party to its property."""
        if not is_key_safe(ticket_id):
            raise ResourceNotFoundException("ticket", ticket_id)
        payload = await self._load_ticket(ticket_id)
        if payload is None:
            raise ResourceNotFoundException("ticket", ticket_id)
        prop = await self.property_repo.get_by_id(payload["property_id"])
        if prop is None:
            raise ResourceNotFoundException("property", payload["property_id"])
        require_property_access(prop, user, "ticket")
        return payload

    async def create_ticket(
        self,
        user: CurrentUser,
        title: str,
        description: str,
        is_urgent: bool = False,
    ) -> TicketResult:
        """File a ticket on the tenant's rented property (tenants only)."""
        require_role(user, UserRole.TENANT, "ticket", "create")
        if not title or not description:
            raise ValidationException("Title and description are required")
        prop = await self.property_repo.get_by_tenant_id(user.id)
        if prop is None:
            raise ValidationException("You don't have a rented property", field="property")
        ticket = await self.ticket_repo.create(
            TicketCreate(
                property_id=prop.id,
                title=title,
                description=description,
                is_urgent=is_urgent,
            )
        )
        await self._invalidate(prop)
        return ticket

    async def update_status(
        self, ticket_id: str, user: CurrentUser, status: TicketStatus
    ) -> TicketResult:
        """Change ticket status (managing agent only)."""
        require_role(user, UserRole.AGENT, "ticket", "update")
        _, prop = await self._load_with_property(ticket_id, user)
        updated = await self.ticket_repo.update_status(ticket_id, status)
        await self._invalidate(prop, ticket_id)
        return updated

    async def delete_ticket(self, ticket_id: str, user: CurrentUser) -> None:
        """Delete a ticket (managing agent only)."""
        require_role(user, UserRole.AGENT, "ticket", "delete")
        _, prop = await self._load_with_property(ticket_id, user)
        await self.ticket_repo.delete(ticket_id)
        await self._invalidate(prop, ticket_id, with_replies=True)

    async def _load_with_property(
        self, ticket_id: str, user: CurrentUser
    ) -> tuple[TicketResult, PropertyResult]:
        ticket = await self.ticket_repo.get_by_id(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("ticket", ticket_id)
        prop = await self.property_repo.get_by_id(ticket.property_id)
        if prop is None:
            raise ResourceNotFoundException("property", ticket.property_id)
        require_property_access(prop, user, "ticket")
        return ticket, prop

    async def _invalidate(
        self,
        prop: PropertyResult,
        ticket_id: str | None = None,
        with_replies: bool = False,
    ) -> None:
        if self.cache is not None and ticket_id is not None:
            await self.cache.delete(CacheKeys.ticket_detail(ticket_id))
            if with_replies:
                await self.cache.delete(CacheKeys.ticket_replies(ticket_id))
        await invalidate_for_parties(
            self.cache, CacheKeys.tickets_list, prop.agent_id, prop.tenant_id
        )
        logger.info(
            "Invalidated ticket cache for property %s (agent %s, tenant %s)",
            prop.id,
            prop.agent_id,
            prop.tenant_id,
        )
