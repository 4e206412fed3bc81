"""DTOs for ticket use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import TicketStatus


@dataclass(frozen=True)
class TicketResult:
    """Ticket read-model returned by ITicketRepository."""

    id: str
    property_id: str
    title: str
    description: str
    is_urgent: bool
    status: TicketStatus
    created_at: datetime
    photos: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TicketCreate:
    """Input for ITicketRepository.create."""

    property_id: str
    title: str
    description: str
    is_urgent: bool = False


@dataclass(frozen=True)
class TicketReplyResult:
    """Reply read-model returned by ITicketReplyRepository."""

    id: str
    ticket_id: str
    user_id: str
    content: str
    created_at: datetime
    updated_at: datetime | None = None


@dataclass(frozen=True)
class TicketReplyCreate:
    """Input for ITicketReplyRepository.create."""

    ticket_id: str
    user_id: str
    content: str
