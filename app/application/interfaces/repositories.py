"""Repository interfaces (ports) for the application layer.

Protocols define contracts the relational store adapters must fulfill (DIP).
The store is the sole source of truth; the cache only holds derived copies.
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.application.dtos.inspection import InspectionCreate, InspectionResult
    from app.application.dtos.invoice import InvoiceCreate, InvoiceResult, InvoiceUpdate
    from app.application.dtos.property import PropertyCreate, PropertyResult, PropertyUpdate
    from app.application.dtos.ticket import (
        TicketCreate,
        TicketReplyCreate,
        TicketReplyResult,
        TicketResult,
    )
    from app.domain.enums import InspectionStatus, TicketStatus


class ITicketRepository(Protocol):
    """Protocol for ticket repository (DIP)."""

    async def find_by_agent_id(self, agent_id: str, skip: int, take: int) -> list[TicketResult]:
        """Return tickets on all properties managed by agent, newest first."""

    async def count_by_agent_id(self, agent_id: str) -> int:
        """Return number of tickets on the agent's properties."""

    async def find_by_property_id(self, property_id: str, skip: int, take: int) -> list[TicketResult]:
        """Return tickets filed for one property, newest first."""

    async def count_by_property_id(self, property_id: str) -> int:
        """Return number of tickets filed for one property."""

    async def get_by_id(self, ticket_id: str) -> TicketResult | None:
        """Return ticket by id or None."""

    async def create(self, data: TicketCreate) -> TicketResult:
        """Persist a new ticket (status OPEN)."""

    async def update_status(self, ticket_id: str, status: TicketStatus) -> TicketResult:
        """Set ticket status and return the updated ticket."""

    async def delete(self, ticket_id: str) -> None:
        """Delete ticket by id."""


class ITicketReplyRepository(Protocol):
    """Protocol for ticket reply repository (DIP)."""

    async def find_by_ticket_id(self, ticket_id: str) -> list[TicketReplyResult]:
        """Return every reply on a ticket, oldest first."""

    async def get_by_id(self, reply_id: str) -> TicketReplyResult | None:
        """Return reply by id or None."""

    async def create(self, data: TicketReplyCreate) -> TicketReplyResult:
        """Persist a new reply."""

    async def update_content(self, reply_id: str, content: str) -> TicketReplyResult:
        """Replace reply text and return the reply."""

    async def delete(self, reply_id: str) -> None:
        """Delete reply by id."""


class IPropertyRepository(Protocol):
    """Protocol for property repository (DIP)."""

    async def get_by_id(self, property_id: str) -> PropertyResult | None:
        """Return property by id or None."""

    async def get_by_tenant_id(self, tenant_id: str) -> PropertyResult | None:
        """Return the property rented by tenant, or None."""

    async def find_by_agent_id(self, agent_id: str, skip: int, take: int) -> list[PropertyResult]:
        """Return properties managed by agent."""

    async def count_by_agent_id(self, agent_id: str) -> int:
        """Return number of properties managed by agent."""

    async def create(self, data: PropertyCreate) -> PropertyResult:
        """Persist a new property."""

    async def update(self, property_id: str, data: PropertyUpdate) -> PropertyResult:
        """Apply a partial update and return the property."""

    async def delete(self, property_id: str) -> None:
        """Delete property by id."""


class IInvoiceRepository(Protocol):
    """Protocol for invoice repository (DIP)."""

    async def find_by_agent_id(self, agent_id: str, skip: int, take: int) -> list[InvoiceResult]:
        """Return invoices on all properties managed by agent."""

    async def count_by_agent_id(self, agent_id: str) -> int:
        """Return number of invoices on the agent's properties."""

    async def find_by_tenant_id(self, tenant_id: str, skip: int, take: int) -> list[InvoiceResult]:
        """Return invoices billed to tenant."""

    async def count_by_tenant_id(self, tenant_id: str) -> int:
        """Return number of invoices billed to tenant."""

    async def get_by_id(self, invoice_id: str) -> InvoiceResult | None:
        """Return invoice by id or None."""

    async def create(self, data: InvoiceCreate) -> InvoiceResult:
        """Persist a new invoice (status PENDING)."""

    async def update(self, invoice_id: str, data: InvoiceUpdate) -> InvoiceResult:
        """Apply a status change and return the invoice."""

    async def delete(self, invoice_id: str) -> None:
        """Delete invoice by id."""


class IInspectionRepository(Protocol):
    """Protocol for inspection repository (DIP)."""

    async def find_by_agent_id(self, agent_id: str, skip: int, take: int) -> list[InspectionResult]:
        """Return inspections on all properties managed by agent."""

    async def count_by_agent_id(self, agent_id: str) -> int:
        """Return number of inspections on the agent's properties."""

    async def find_by_tenant_id(self, tenant_id: str, skip: int, take: int) -> list[InspectionResult]:
        """Return inspections for tenant."""

    async def count_by_tenant_id(self, tenant_id: str) -> int:
        """Return number of inspections for tenant."""

    async def get_by_id(self, inspection_id: str) -> InspectionResult | None:
        """Return inspection by id or None."""

    async def create(self, data: InspectionCreate) -> InspectionResult:
        """Persist a new inspection (status PENDING_SCHEDULE)."""

    async def update_status(
        self,
        inspection_id: str,
        status: InspectionStatus,
        scheduled_date: datetime | None = None,
        completed_at: datetime | None = None,
    ) -> InspectionResult:
        """Set status (and the date that goes with it) and return the inspection."""


@dataclass(frozen=True)
class Repositories:
    """Adapters for the relational store, handed to create_app(repositories=...)."""

    tickets: ITicketRepository
    replies: ITicketReplyRepository
    properties: IPropertyRepository
    invoices: IInvoiceRepository
    inspections: IInspectionRepository
