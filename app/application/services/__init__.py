"""Application services: resource use cases with cached list views."""

from app.application.services.inspection_service import InspectionService
from app.application.services.invoice_service import InvoiceService
from app.application.services.property_service import PropertyService
from app.application.services.ticket_reply_service import TicketReplyService
from app.application.services.ticket_service import TicketService

__all__ = [
    "InspectionService",
    "InvoiceService",
    "PropertyService",
    "TicketReplyService",
    "TicketService",
]
