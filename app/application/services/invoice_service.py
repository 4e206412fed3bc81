"""Invoice service: cached invoice lists and records, invalidation after invoice writes.

mark_paid is the payment webhook touch point: the hosted checkout confirms a
payment, the invoice flips to PAID, and both parties' invoice lists are dropped.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from app.application.dtos.invoice import InvoiceCreate, InvoiceResult, InvoiceUpdate
from app.application.dtos.pagination import Page, Pagination
from app.application.dtos.property import PropertyResult
from app.application.dtos.serialization import to_payload
from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import IInvoiceRepository, IPropertyRepository
from app.application.interfaces.services import ICacheService
from app.application.services.access import require_property_access, require_role
from app.application.services.list_cache import invalidate_for_parties, load_page
from app.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, CacheTTL
from app.domain.enums import InvoiceStatus, UserRole
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.cache.keys import CacheKeys, is_key_safe
from app.infrastructure.cache.redis_cache import cached
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class InvoiceService:
    """Invoice use cases; lists cached per user, records cached by id."""

    def __init__(
        self,
        invoice_repo: IInvoiceRepository,
        property_repo: IPropertyRepository,
        cache: ICacheService | None = None,
    ) -> None:
        self.invoice_repo = invoice_repo
        self.property_repo = property_repo
        self.cache = cache

    async def list_for_user(
        self,
        user: CurrentUser,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page:
        """Agents: invoices on managed properties. Tenants: invoices billed to them."""
        skip = (page - 1) * page_size

        async def produce() -> Page:
            if user.is_agent:
                invoices = await self.invoice_repo.find_by_agent_id(user.id, skip, page_size)
                total = await self.invoice_repo.count_by_agent_id(user.id)
            else:
                invoices = await self.invoice_repo.find_by_tenant_id(user.id, skip, page_size)
                total = await self.invoice_repo.count_by_tenant_id(user.id)
            return Page(
                items=[to_payload(i) for i in invoices],
                pagination=Pagination.of(page, page_size, total),
            )

        return await load_page(
            self.cache,
            CacheKeys.invoices_list(user.id, user.role.value),
            page,
            page_size,
            produce,
            ttl=CacheTTL.SHORT,
        )

    @cached("invoice", ttl=CacheTTL.MEDIUM, key_builder=CacheKeys.invoice_detail)
    async def _load_invoice(self, invoice_id: str) -> dict[str, Any] | None:
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        return to_payload(invoice) if invoice is not None else None

    async def get_invoice(self, invoice_id: str, user: CurrentUser) -> dict[str, Any]:
        """Return one invoice to the billed tenant or the managing agent."""
        if not is_key_safe(invoice_id):
            raise ResourceNotFoundException("invoice", invoice_id)
        payload = await self._load_invoice(invoice_id)
        if payload is None:
            raise ResourceNotFoundException("invoice", invoice_id)
        if user.is_agent:
            prop = await self.property_repo.get_by_id(payload["property_id"])
            allowed = prop is not None and prop.agent_id == user.id
        else:
            allowed = payload["tenant_id"] == user.id
        if not allowed:
            raise AuthorizationException(
                resource="invoice", message="You don't have access to this invoice"
            )
        return payload

    async def create_invoice(
        self,
        user: CurrentUser,
        property_id: str,
        amount: float,
        due_date: datetime,
        billing_month: datetime,
    ) -> InvoiceResult:
        """Bill the tenant of a managed property (agents only)."""
        require_role(user, UserRole.AGENT, "invoice", "create")
        if amount <= 0:
            raise ValidationException("Amount must be a positive number", field="amount")
        prop = await self.property_repo.get_by_id(property_id)
        if prop is None:
            raise ResourceNotFoundException("property", property_id)
        require_property_access(prop, user, "property")
        if not prop.tenant_id:
            raise ValidationException("Property has no tenant assigned", field="property_id")
        invoice = await self.invoice_repo.create(
            InvoiceCreate(
                property_id=prop.id,
                tenant_id=prop.tenant_id,
                amount=amount,
                due_date=due_date,
                billing_month=billing_month,
            )
        )
        await self._invalidate(invoice, prop)
        return invoice

    async def update_status(
        self, invoice_id: str, user: CurrentUser, status: InvoiceStatus
    ) -> InvoiceResult:
        """Change invoice status; PAID records the payment time."""
        invoice, prop = await self._load_with_property(invoice_id)
        self._require_access(invoice, prop, user)
        paid_at = utc_now() if status == InvoiceStatus.PAID else None
        updated = await self.invoice_repo.update(
            invoice_id, InvoiceUpdate(status=status, paid_at=paid_at)
        )
        await self._invalidate(updated, prop)
        return updated

    async def mark_paid(self, invoice_id: str, payment_reference: str) -> InvoiceResult:
        """Record a confirmed checkout payment (no user context; called by the webhook)."""
        invoice, prop = await self._load_with_property(invoice_id)
        if invoice.status == InvoiceStatus.PAID:
            return invoice
        updated = await self.invoice_repo.update(
            invoice_id,
            InvoiceUpdate(
                status=InvoiceStatus.PAID,
                paid_at=utc_now(),
                payment_reference=payment_reference,
            ),
        )
        await self._invalidate(updated, prop)
        logger.info("Invoice %s marked paid (%s)", invoice_id, payment_reference)
        return updated

    async def delete_invoice(self, invoice_id: str, user: CurrentUser) -> None:
        """Delete an unpaid invoice (managing agent only)."""
        require_role(user, UserRole.AGENT, "invoice", "delete")
        invoice, prop = await self._load_with_property(invoice_id)
        self._require_access(invoice, prop, user)
        if invoice.status == InvoiceStatus.PAID:
            raise ValidationException("Cannot delete a paid invoice", field="status")
        await self.invoice_repo.delete(invoice_id)
        await self._invalidate(invoice, prop)

    async def _load_with_property(self, invoice_id: str) -> tuple[InvoiceResult, PropertyResult]:
        invoice = await self.invoice_repo.get_by_id(invoice_id)
        if invoice is None:
            raise ResourceNotFoundException("invoice", invoice_id)
        prop = await self.property_repo.get_by_id(invoice.property_id)
        if prop is None:
            raise ResourceNotFoundException("property", invoice.property_id)
        return invoice, prop

    @staticmethod
    def _require_access(invoice: InvoiceResult, prop: PropertyResult, user: CurrentUser) -> None:
        owner = prop.agent_id if user.is_agent else invoice.tenant_id
        if owner != user.id:
            raise AuthorizationException(
                resource="invoice", message="You don't have access to this invoice"
            )

    async def _invalidate(self, invoice: InvoiceResult, prop: PropertyResult) -> None:
        if self.cache is not None:
            await self.cache.delete(CacheKeys.invoice_detail(invoice.id))
        # The billed tenant may have moved out since; drop both views.
        await invalidate_for_parties(
            self.cache, CacheKeys.invoices_list, prop.agent_id, invoice.tenant_id
        )
