"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the current user, the shared cache and rate
limiter (built in the lifespan and kept on app.state), and the application
services. Routes depend only on these dependencies, not on infra directly.

Repositories for the relational store are handed to create_app(repositories=...);
without them every repository-backed route answers 503.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Request, Response

from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import Repositories
from app.application.services import (
    InspectionService,
    InvoiceService,
    PropertyService,
    TicketReplyService,
    TicketService,
)
from app.domain.exceptions import (
    AuthenticationException,
    PersistenceNotConfiguredException,
)
from app.infrastructure.cache import CacheService, RateLimiter, RateLimitResult
from app.shared.telemetry.tracing import add_span_attributes


def get_cache(request: Request) -> CacheService | None:
    """Return the application cache, or None when Redis is disabled."""
    return getattr(request.app.state, "cache", None)


def get_rate_limiter(request: Request) -> RateLimiter | None:
    """Return the per-user rate limiter, or None when Redis is disabled."""
    return getattr(request.app.state, "rate_limiter", None)


def get_repositories(request: Request) -> Repositories:
    """Return the relational store adapters or raise 503 when none are wired."""
    repositories = getattr(request.app.state, "repositories", None)
    if repositories is None:
        raise PersistenceNotConfiguredException()
    return repositories


def get_current_user(request: Request) -> CurrentUser:
    """Return the user the upstream auth layer placed on request.state.user.

    Raises:
        AuthenticationException: No authenticated user on the request (401).
    """
    user = getattr(request.state, "user", None)
    if not isinstance(user, CurrentUser):
        raise AuthenticationException()
    return user


CacheDep = Annotated[CacheService | None, Depends(get_cache)]
RepositoriesDep = Annotated[Repositories, Depends(get_repositories)]
CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


def rate_limit(action: str) -> Callable[..., Awaitable[RateLimitResult | None]]:
    """Build a dependency that applies the configured limit for action to the current user.

    Over the limit it raises RateLimitExceededException (rendered as 429).
    Allowed requests get X-RateLimit-* headers on the response. With Redis
    disabled no limit is applied.
    """

    async def dependency(
        response: Response,
        user: CurrentUserDep,
        limiter: Annotated[RateLimiter | None, Depends(get_rate_limiter)],
    ) -> RateLimitResult | None:
        if limiter is None:
            return None
        result = await limiter.apply(user.id, action)
        for name, value in result.headers().items():
            response.headers[name] = value
        add_span_attributes(**{"ratelimit.action": action, "ratelimit.remaining": result.remaining})
        return result

    return dependency


def get_ticket_service(repos: RepositoriesDep, cache: CacheDep) -> TicketService:
    return TicketService(repos.tickets, repos.properties, cache)


def get_property_service(repos: RepositoriesDep, cache: CacheDep) -> PropertyService:
    return PropertyService(repos.properties, cache)


def get_invoice_service(repos: RepositoriesDep, cache: CacheDep) -> InvoiceService:
    return InvoiceService(repos.invoices, repos.properties, cache)


def get_inspection_service(repos: RepositoriesDep, cache: CacheDep) -> InspectionService:
    return InspectionService(repos.inspections, repos.properties, cache)


def get_ticket_reply_service(repos: RepositoriesDep, cache: CacheDep) -> TicketReplyService:
    return TicketReplyService(repos.replies, repos.tickets, repos.properties, cache)
