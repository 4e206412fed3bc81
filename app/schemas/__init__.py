"""Pydantic request/response schemas for the API."""

from app.schemas.health import HealthResponse, ReadinessResponse
from app.schemas.inspection import (
    InspectionCreateRequest,
    InspectionListResponse,
    InspectionResponse,
    InspectionScheduleRequest,
)
from app.schemas.invoice import (
    InvoiceCreateRequest,
    InvoiceListResponse,
    InvoicePaidNotification,
    InvoiceResponse,
    InvoiceStatusUpdate,
)
from app.schemas.pagination import PaginationResponse
from app.schemas.property import (
    PropertyCreateRequest,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdateRequest,
)
from app.schemas.ticket import (
    TicketCreateRequest,
    TicketListResponse,
    TicketReplyListResponse,
    TicketReplyRequest,
    TicketReplyResponse,
    TicketResponse,
    TicketStatusUpdate,
)

__all__ = [
    "HealthResponse",
    "ReadinessResponse",
    "InspectionCreateRequest",
    "InspectionListResponse",
    "InspectionResponse",
    "InspectionScheduleRequest",
    "InvoiceCreateRequest",
    "InvoiceListResponse",
    "InvoicePaidNotification",
    "InvoiceResponse",
    "InvoiceStatusUpdate",
    "PaginationResponse",
    "PropertyCreateRequest",
    "PropertyListResponse",
    "PropertyResponse",
    "PropertyUpdateRequest",
    "TicketCreateRequest",
    "TicketListResponse",
    "TicketReplyListResponse",
    "TicketReplyRequest",
    "TicketReplyResponse",
    "TicketResponse",
    "TicketStatusUpdate",
]
