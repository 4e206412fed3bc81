"""Invoice API: cached list view, rate-limited writes and the payment webhook."""

import hmac
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request

from app.api.v1.dependencies import CurrentUserDep, get_invoice_service, rate_limit
from app.application.services import InvoiceService
from app.core.config import get_settings
from app.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from app.core.limiter import limit_writes
from app.domain.exceptions import AuthenticationException
from app.schemas.invoice import (
    InvoiceCreateRequest,
    InvoiceListResponse,
    InvoicePaidNotification,
    InvoiceResponse,
    InvoiceStatusUpdate,
)

router = APIRouter()

InvoiceServiceDep = Annotated[InvoiceService, Depends(get_invoice_service)]


def verify_webhook_secret(
    x_webhook_secret: Annotated[str | None, Header()] = None,
) -> None:
    """Require the shared secret configured as PAYMENT_WEBHOOK_SECRET."""
    secret = get_settings().payment_webhook_secret
    if secret is None:
        raise HTTPException(status_code=503, detail="Payment webhook is not configured")
    if not x_webhook_secret or not hmac.compare_digest(
        x_webhook_secret.encode(), secret.get_secret_value().encode()
    ):
        raise AuthenticationException("Invalid webhook secret")


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    user: CurrentUserDep,
    invoice_service: InvoiceServiceDep,
    page: int = Query(DEFAULT_PAGE, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
):
    """List invoices on managed properties (agent) or billed to the current tenant."""
    return await invoice_service.list_for_user(user, page, page_size)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: str,
    user: CurrentUserDep,
    invoice_service: InvoiceServiceDep,
):
    """Return one invoice to the billed tenant or the managing agent."""
    return await invoice_service.get_invoice(invoice_id, user)


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("createInvoice"))],
)
@limit_writes
async def create_invoice(
    request: Request,
    body: InvoiceCreateRequest,
    user: CurrentUserDep,
    invoice_service: InvoiceServiceDep,
):
    """Bill the tenant of a managed property."""
    return await invoice_service.create_invoice(
        user, body.property_id, body.amount, body.due_date, body.billing_month
    )


@router.patch(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    dependencies=[Depends(rate_limit("updateInvoice"))],
)
@limit_writes
async def update_invoice_status(
    request: Request,
    invoice_id: str,
    body: InvoiceStatusUpdate,
    user: CurrentUserDep,
    invoice_service: InvoiceServiceDep,
):
    """Change invoice status."""
    return await invoice_service.update_status(invoice_id, user, body.status)


@router.delete(
    "/{invoice_id}",
    status_code=204,
    dependencies=[Depends(rate_limit("deleteInvoice"))],
)
@limit_writes
async def delete_invoice(
    request: Request,
    invoice_id: str,
    user: CurrentUserDep,
    invoice_service: InvoiceServiceDep,
):
    """Delete an unpaid invoice (managing agent)."""
    await invoice_service.delete_invoice(invoice_id, user)


@router.post(
    "/{invoice_id}/paid",
    response_model=InvoiceResponse,
    dependencies=[Depends(verify_webhook_secret)],
)
async def mark_invoice_paid(
    invoice_id: str,
    body: InvoicePaidNotification,
    invoice_service: InvoiceServiceDep,
):
    """Payment confirmation from the checkout provider. Idempotent."""
    return await invoice_service.mark_paid(invoice_id, body.payment_reference)
