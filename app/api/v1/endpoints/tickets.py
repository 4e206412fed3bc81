"""Ticket API: cached list, record and reply views; rate-limited writes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    CurrentUserDep,
    get_ticket_reply_service,
    get_ticket_service,
    rate_limit,
)
from app.application.services import TicketReplyService, TicketService
from app.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from app.core.limiter import limit_writes
from app.schemas.ticket import (
    TicketCreateRequest,
    TicketListResponse,
    TicketReplyListResponse,
    TicketReplyRequest,
    TicketReplyResponse,
    TicketResponse,
    TicketStatusUpdate,
)

router = APIRouter()

TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]
TicketReplyServiceDep = Annotated[TicketReplyService, Depends(get_ticket_reply_service)]


@router.get("", response_model=TicketListResponse)
async def list_tickets(
    user: CurrentUserDep,
    ticket_service: TicketServiceDep,
    page: int = Query(DEFAULT_PAGE, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
):
    """List tickets visible to the current user (agent: managed properties, tenant: rented one)."""
    return await ticket_service.list_for_user(user, page, page_size)


@router.post(
    "",
    response_model=TicketResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("createTicket"))],
)
@limit_writes
async def create_ticket(
    request: Request,
    body: TicketCreateRequest,
    user: CurrentUserDep,
    ticket_service: TicketServiceDep,
):
    """File a maintenance ticket on the tenant's rented property."""
    return await ticket_service.create_ticket(
        user, body.title, body.description, is_urgent=body.is_urgent
    )


@router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(
    ticket_id: str,
    user: CurrentUserDep,
    ticket_service: TicketServiceDep,
):
    """Return one ticket the current user is a party to."""
    return await ticket_service.get_ticket(ticket_id, user)


@router.patch(
    "/{ticket_id}",
    response_model=TicketResponse,
    dependencies=[Depends(rate_limit("updateTicket"))],
)
@limit_writes
async def update_ticket_status(
    request: Request,
    ticket_id: str,
    body: TicketStatusUpdate,
    user: CurrentUserDep,
    ticket_service: TicketServiceDep,
):
    """Change ticket status (managing agent)."""
    return await ticket_service.update_status(ticket_id, user, body.status)


@router.delete(
    "/{ticket_id}",
    status_code=204,
    dependencies=[Depends(rate_limit("updateTicket"))],
)
@limit_writes
async def delete_ticket(
    request: Request,
    ticket_id: str,
    user: CurrentUserDep,
    ticket_service: TicketServiceDep,
):
    """Delete a ticket (managing agent)."""
    await ticket_service.delete_ticket(ticket_id, user)


@router.get("/{ticket_id}/replies", response_model=TicketReplyListResponse)
async def list_replies(
    ticket_id: str,
    user: CurrentUserDep,
    reply_service: TicketReplyServiceDep,
):
    """Return the ticket's replies, oldest first."""
    return {"replies": await reply_service.list_replies(ticket_id, user)}


@router.post(
    "/{ticket_id}/replies",
    response_model=TicketReplyResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("postReply"))],
)
@limit_writes
async def create_reply(
    request: Request,
    ticket_id: str,
    body: TicketReplyRequest,
    user: CurrentUserDep,
    reply_service: TicketReplyServiceDep,
):
    """Reply to a ticket as its tenant or managing agent."""
    return await reply_service.create_reply(ticket_id, user, body.content)


@router.patch(
    "/replies/{reply_id}",
    response_model=TicketReplyResponse,
    dependencies=[Depends(rate_limit("updateReply"))],
)
@limit_writes
async def update_reply(
    request: Request,
    reply_id: str,
    body: TicketReplyRequest,
    user: CurrentUserDep,
    reply_service: TicketReplyServiceDep,
):
    """Edit one of the current user's replies."""
    return await reply_service.update_reply(reply_id, user, body.content)


@router.delete(
    "/replies/{reply_id}",
    status_code=204,
    dependencies=[Depends(rate_limit("updateReply"))],
)
@limit_writes
async def delete_reply(
    request: Request,
    reply_id: str,
    user: CurrentUserDep,
    reply_service: TicketReplyServiceDep,
):
    """Delete one of the current user's replies."""
    await reply_service.delete_reply(reply_id, user)
