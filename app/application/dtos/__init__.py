"""Application DTOs (no ORM dependency)."""

from app.application.dtos.inspection import InspectionCreate, InspectionResult
from app.application.dtos.invoice import InvoiceCreate, InvoiceResult, InvoiceUpdate
from app.application.dtos.pagination import Page, Pagination
from app.application.dtos.property import PropertyCreate, PropertyResult, PropertyUpdate
from app.application.dtos.serialization import to_payload
from app.application.dtos.ticket import (
    TicketCreate,
    TicketReplyCreate,
    TicketReplyResult,
    TicketResult,
)
from app.application.dtos.user import CurrentUser

__all__ = [
    "CurrentUser",
    "InspectionCreate",
    "InspectionResult",
    "InvoiceCreate",
    "InvoiceResult",
    "InvoiceUpdate",
    "Page",
    "Pagination",
    "PropertyCreate",
    "PropertyResult",
    "PropertyUpdate",
    "TicketCreate",
    "TicketReplyCreate",
    "TicketReplyResult",
    "TicketResult",
    "to_payload",
]
