"""Ticket API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import TicketStatus
from app.schemas.pagination import PaginationResponse


class TicketCreateRequest(BaseModel):
    """Request body for filing a maintenance ticket (tenants)."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    is_urgent: bool = False


class TicketStatusUpdate(BaseModel):
    """Request body for changing ticket status (agents)."""

    status: TicketStatus


class TicketResponse(BaseModel):
    """Ticket response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    property_id: str
    title: str
    description: str
    is_urgent: bool
    status: TicketStatus
    created_at: datetime
    photos: list[str] = Field(default_factory=list)


class TicketListResponse(BaseModel):
    """One page of tickets."""

    items: list[TicketResponse]
    pagination: PaginationResponse


class TicketReplyRequest(BaseModel):
    """Request body for posting or editing a reply (length is checked by the service)."""

    content: str


class TicketReplyResponse(BaseModel):
    """Reply response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    ticket_id: str
    user_id: str
    content: str
    created_at: datetime
    updated_at: datetime | None = None


class TicketReplyListResponse(BaseModel):
    """Every reply on a ticket, oldest first."""

    replies: list[TicketReplyResponse]
