"""Property service: cached property lists and record lookups.

A property write changes the agent's and tenant's property lists; a tenant
change also changes which tickets the old and new tenant can see.
"""

from __future__ import annotations

import logging
from typing import Any

from app.application.dtos.pagination import Page, Pagination
from app.application.dtos.property import PropertyCreate, PropertyResult, PropertyUpdate
from app.application.dtos.serialization import to_payload
from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import IPropertyRepository
from app.application.interfaces.services import ICacheService
from app.application.services.access import require_property_access, require_role
from app.application.services.list_cache import (
    invalidate_for_parties,
    invalidate_list,
    load_page,
)
from app.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, CacheTTL
from app.domain.enums import UserRole
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.infrastructure.cache.keys import CacheKeys, is_key_safe
from app.infrastructure.cache.redis_cache import cached

logger = logging.getLogger(__name__)


class PropertyService:
    """Property use cases; lists cached per user, records cached by id."""

    def __init__(
        self,
        property_repo: IPropertyRepository,
        cache: ICacheService | None = None,
    ) -> None:
        self.property_repo = property_repo
        self.cache = cache

    async def list_for_user(
        self,
        user: CurrentUser,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page:
        """Agents: properties they manage. Tenants: the property they rent (0 or 1)."""
        skip = (page - 1) * page_size

        async def produce() -> Page:
            if user.is_agent:
                props = await self.property_repo.find_by_agent_id(user.id, skip, page_size)
                total = await self.property_repo.count_by_agent_id(user.id)
            else:
                rented = await self.property_repo.get_by_tenant_id(user.id)
                props = [rented] if rented is not None and skip == 0 else []
                total = 1 if rented is not None else 0
            return Page(
                items=[to_payload(p) for p in props],
                pagination=Pagination.of(page, page_size, total),
            )

        return await load_page(
            self.cache,
            CacheKeys.properties_list(user.id, user.role.value),
            page,
            page_size,
            produce,
            ttl=CacheTTL.MEDIUM,
        )

    @cached("property", ttl=CacheTTL.LONG, key_builder=CacheKeys.property_detail)
    async def _load_property(self, property_id: str) -> dict[str, Any] | None:
        prop = await self.property_repo.get_by_id(property_id)
        return to_payload(prop) if prop is not None else None

    async def get_property(self, property_id: str, user: CurrentUser) -> dict[str, Any]:
        """Return the property record if the user is its agent or tenant."""
        if not is_key_safe(property_id):
            raise ResourceNotFoundException("property", property_id)
        payload = await self._load_property(property_id)
        if payload is None:
            raise ResourceNotFoundException("property", property_id)
        if user.is_agent:
            allowed = payload["agent_id"] == user.id
        else:
            allowed = payload.get("tenant_id") == user.id
        if not allowed:
            raise ResourceNotFoundException("property", property_id)
        return payload

    async def create_property(
        self,
        user: CurrentUser,
        title: str,
        address: str,
        rent: float,
        tenant_id: str | None = None,
    ) -> PropertyResult:
        """Add a property managed by the calling agent."""
        require_role(user, UserRole.AGENT, "property", "add")
        if not title or not address:
            raise ValidationException("Title, address, and rent are required")
        if rent <= 0:
            raise ValidationException("Rent must be a positive number", field="rent")
        prop = await self.property_repo.create(
            PropertyCreate(
                agent_id=user.id,
                title=title,
                address=address,
                rent=rent,
                tenant_id=tenant_id,
            )
        )
        await invalidate_for_parties(
            self.cache, CacheKeys.properties_list, prop.agent_id, prop.tenant_id
        )
        return prop

    async def update_property(
        self, property_id: str, user: CurrentUser, data: PropertyUpdate
    ) -> PropertyResult:
        """Apply a partial update (managing agent only)."""
        require_role(user, UserRole.AGENT, "property", "update")
        before = await self._require_owned(property_id, user)
        if data.rent is not None and data.rent <= 0:
            raise ValidationException("Rent must be a positive number", field="rent")
        after = await self.property_repo.update(property_id, data)
        await self._invalidate(before, after)
        return after

    async def delete_property(self, property_id: str, user: CurrentUser) -> None:
        """Delete a property (managing agent only)."""
        require_role(user, UserRole.AGENT, "property", "delete")
        before = await self._require_owned(property_id, user)
        await self.property_repo.delete(property_id)
        await self._invalidate(before, None)

    async def _require_owned(self, property_id: str, user: CurrentUser) -> PropertyResult:
        prop = await self.property_repo.get_by_id(property_id)
        if prop is None:
            raise ResourceNotFoundException("property", property_id)
        require_property_access(prop, user, "property")
        return prop

    async def _invalidate(self, before: PropertyResult, after: PropertyResult | None) -> None:
        if self.cache is not None:
            await self.cache.delete(CacheKeys.property_detail(before.id))
        tenants = {before.tenant_id}
        if after is not None:
            tenants.add(after.tenant_id)
        await invalidate_list(self.cache, CacheKeys.properties_list, before.agent_id, UserRole.AGENT)
        for tenant_id in tenants:
            await invalidate_list(self.cache, CacheKeys.properties_list, tenant_id, UserRole.TENANT)
            # Tenant ticket lists are scoped by the rented property.
            await invalidate_list(self.cache, CacheKeys.tickets_list, tenant_id, UserRole.TENANT)
        logger.info("Invalidated property cache for %s", before.id)
