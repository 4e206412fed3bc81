"""Invoice API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import InvoiceStatus
from app.schemas.pagination import PaginationResponse


class InvoiceCreateRequest(BaseModel):
    """Request body for billing the tenant of a property (agents)."""

    property_id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    due_date: datetime
    billing_month: datetime


class InvoiceStatusUpdate(BaseModel):
    """Request body for changing invoice status."""

    status: InvoiceStatus


class InvoicePaidNotification(BaseModel):
    """Payment confirmation posted by the checkout provider."""

    payment_reference: str = Field(..., min_length=1, max_length=255)


class InvoiceResponse(BaseModel):
    """Invoice response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    property_id: str
    tenant_id: str
    amount: float
    status: InvoiceStatus
    due_date: datetime
    billing_month: datetime
    paid_at: datetime | None = None
    payment_reference: str | None = None


class InvoiceListResponse(BaseModel):
    """One page of invoices."""

    items: list[InvoiceResponse]
    pagination: PaginationResponse
