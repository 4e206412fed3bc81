"""Domain enumerations for the PropDesk application.

Enums represent fixed sets of domain values (roles and record statuses).
Values are the strings stored by the relational store and used in cache keys.
"""

from enum import Enum


class UserRole(str, Enum):
    """Role of the authenticated user; scopes list views and cache keys."""

    AGENT = "AGENT"
    TENANT = "TENANT"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings."""
        return [role.value for role in cls]


class TicketStatus(str, Enum):
    """Maintenance ticket lifecycle."""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CLOSED = "CLOSED"


class InvoiceStatus(str, Enum):
    """Invoice payment state."""

    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class InspectionStatus(str, Enum):
    """Agent proposes dates, tenant picks one, agent completes."""

    PENDING_SCHEDULE = "PENDING_SCHEDULE"
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
