"""DTOs for invoice use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime

from app.domain.enums import InvoiceStatus


@dataclass(frozen=True)
class InvoiceResult:
    """Invoice read-model returned by IInvoiceRepository."""

    id: str
    property_id: str
    tenant_id: str
    amount: float
    status: InvoiceStatus
    due_date: datetime
    billing_month: datetime
    paid_at: datetime | None = None
    payment_reference: str | None = None


@dataclass(frozen=True)
class InvoiceCreate:
    property_id: str
    tenant_id: str
    amount: float
    due_date: datetime
    billing_month: datetime


@dataclass(frozen=True)
class InvoiceUpdate:
    """Status change; paid_at and payment_reference are set when marking paid."""

    status: InvoiceStatus
    paid_at: datetime | None = None
    payment_reference: str | None = None
