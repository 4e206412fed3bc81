"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    IInspectionRepository,
    IInvoiceRepository,
    IPropertyRepository,
    ITicketReplyRepository,
    ITicketRepository,
    Repositories,
)
from app.application.interfaces.services import ICacheService

__all__ = [
    "ICacheService",
    "IInspectionRepository",
    "IInvoiceRepository",
    "IPropertyRepository",
    "ITicketReplyRepository",
    "ITicketRepository",
    "Repositories",
]
