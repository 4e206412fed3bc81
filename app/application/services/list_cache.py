"""Cached list views and their invalidation, shared by the resource services.

Each list view is cached per (namespace, role, user) and page slice, e.g.
tickets:AGENT:a1:p1:s10. A write drops every page of every affected user's
view with one wildcard pattern, e.g. tickets:AGENT:a1:*.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from app.application.dtos.pagination import Page
from app.application.interfaces.services import ICacheService
from app.core.constants import CacheTTL
from app.domain.enums import UserRole
from app.infrastructure.cache.keys import CacheKeys

logger = logging.getLogger(__name__)


async def load_page(
    cache: ICacheService | None,
    base_key: str,
    page: int,
    page_size: int,
    producer: Callable[[], Awaitable[Page]],
    ttl: int = CacheTTL.SHORT,
) -> Page:
    """Return one page of a list view, read through the cache when available.

    A failing producer yields an empty page (the cache layer logs it); a
    payload cached under another schema version is dropped and rebuilt.
    """
    if cache is None:
        return await producer()

    async def produce_payload() -> dict:
        return (await producer()).to_payload()

    key = CacheKeys.page(base_key, page, page_size)
    payload = await cache.get_or_set(key, produce_payload, ttl=ttl)
    result = Page.from_payload(payload)
    if result is None and payload is not None:
        logger.info("Discarding cached page with stale schema: %s", key)
        await cache.delete(key)
        payload = await cache.get_or_set(key, produce_payload, ttl=ttl)
        result = Page.from_payload(payload)
    return result or Page.empty(page, page_size)


async def invalidate_list(
    cache: ICacheService | None,
    key_builder: Callable[[str, str], str],
    user_id: str | None,
    role: UserRole,
) -> int:
    """Drop every cached page of one user's list view. Never raises.

    Args:
        cache: Cache service, or None when caching is disabled.
        key_builder: CacheKeys list builder (e.g. CacheKeys.tickets_list).
        user_id: Owner of the view; None (e.g. vacant property) is a no-op.
        role: Role the view was built for.

    Returns:
        Number of keys deleted.
    """
    if cache is None or not user_id:
        return 0
    try:
        pattern = CacheKeys.pattern(key_builder(user_id, role.value))
        deleted = await cache.delete_pattern(pattern)
    except Exception:
        logger.exception("Failed to invalidate list cache for %s %s", role.value, user_id)
        return 0
    logger.debug("Invalidated %s (%s keys)", pattern, deleted)
    return deleted


async def invalidate_for_parties(
    cache: ICacheService | None,
    key_builder: Callable[[str, str], str],
    agent_id: str | None,
    tenant_id: str | None,
) -> None:
    """Invalidate one list namespace for the agent and the tenant of a property."""
    await invalidate_list(cache, key_builder, agent_id, UserRole.AGENT)
    await invalidate_list(cache, key_builder, tenant_id, UserRole.TENANT)
