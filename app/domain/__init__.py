"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import InspectionStatus, InvoiceStatus, TicketStatus, UserRole
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    PersistenceNotConfiguredException,
    PropDeskException,
    RateLimitExceededException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    # Enums
    "InspectionStatus",
    "InvoiceStatus",
    "TicketStatus",
    "UserRole",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "PersistenceNotConfiguredException",
    "PropDeskException",
    "RateLimitExceededException",
    "ResourceNotFoundException",
    "ValidationException",
]
