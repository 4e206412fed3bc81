"""Inspection service: cached inspection lists and invalidation after scheduling steps."""

from __future__ import annotations

from datetime import datetime

from app.application.dtos.inspection import InspectionCreate, InspectionResult
from app.application.dtos.pagination import Page, Pagination
from app.application.dtos.property import PropertyResult
from app.application.dtos.serialization import to_payload
from app.application.dtos.user import CurrentUser
from app.application.interfaces.repositories import IInspectionRepository, IPropertyRepository
from app.application.interfaces.services import ICacheService
from app.application.services.access import require_property_access, require_role
from app.application.services.list_cache import invalidate_for_parties, load_page
from app.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, CacheTTL
from app.domain.enums import InspectionStatus, UserRole
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.cache.keys import CacheKeys
from app.shared.utils.datetime import ensure_utc, utc_now


class InspectionService:
    """Agent proposes dates, tenant picks one, agent completes; lists are cached."""

    def __init__(
        self,
        inspection_repo: IInspectionRepository,
        property_repo: IPropertyRepository,
        cache: ICacheService | None = None,
    ) -> None:
        self.inspection_repo = inspection_repo
        self.property_repo = property_repo
        self.cache = cache

    async def list_for_user(
        self,
        user: CurrentUser,
        page: int = DEFAULT_PAGE,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Page:
        skip = (page - 1) * page_size

        async def produce() -> Page:
            if user.is_agent:
                rows = await self.inspection_repo.find_by_agent_id(user.id, skip, page_size)
                total = await self.inspection_repo.count_by_agent_id(user.id)
            else:
                rows = await self.inspection_repo.find_by_tenant_id(user.id, skip, page_size)
                total = await self.inspection_repo.count_by_tenant_id(user.id)
            return Page(
                items=[to_payload(r) for r in rows],
                pagination=Pagination.of(page, page_size, total),
            )

        return await load_page(
            self.cache,
            CacheKeys.inspections_list(user.id, user.role.value),
            page,
            page_size,
            produce,
            ttl=CacheTTL.SHORT,
        )

    async def create_inspection(
        self,
        user: CurrentUser,
        property_id: str,
        available_dates: list[datetime],
        notes: str | None = None,
    ) -> InspectionResult:
        """Propose inspection dates for a managed, tenanted property (agents only)."""
        require_role(user, UserRole.AGENT, "inspection", "create")
        if not available_dates:
            raise ValidationException("Property ID and available dates are required")
        now = utc_now()
        dates = [ensure_utc(d) for d in available_dates]
        if any(d <= now for d in dates):
            raise ValidationException(
                "All available dates must be in the future", field="available_dates"
            )
        prop = await self.property_repo.get_by_id(property_id)
        if prop is None:
            raise ResourceNotFoundException("property", property_id)
        require_property_access(prop, user, "property")
        if not prop.tenant_id:
            raise ValidationException("Property has no tenant assigned", field="property_id")
        inspection = await self.inspection_repo.create(
            InspectionCreate(
                property_id=prop.id,
                tenant_id=prop.tenant_id,
                available_dates=dates,
                notes=notes,
            )
        )
        await self._invalidate(inspection, prop)
        return inspection

    async def schedule_inspection(
        self, inspection_id: str, user: CurrentUser, selected_date: datetime
    ) -> InspectionResult:
        """Tenant picks one of the proposed days."""
        require_role(user, UserRole.TENANT, "inspection", "schedule")
        inspection, prop = await self._load_with_property(inspection_id)
        if inspection.tenant_id != user.id:
            raise AuthorizationException(
                resource="inspection", message="You don't have access to this inspection"
            )
        if inspection.status != InspectionStatus.PENDING_SCHEDULE:
            raise ValidationException("Inspection is not pending schedule", field="status")
        selected = ensure_utc(selected_date)
        if not any(ensure_utc(d).date() == selected.date() for d in inspection.available_dates):
            raise ValidationException(
                "Selected date is not in the available dates list", field="selected_date"
            )
        updated = await self.inspection_repo.update_status(
            inspection_id, InspectionStatus.SCHEDULED, scheduled_date=selected
        )
        await self._invalidate(updated, prop)
        return updated

    async def complete_inspection(
        self, inspection_id: str, user: CurrentUser
    ) -> InspectionResult:
        """Mark a scheduled inspection completed (managing agent only)."""
        require_role(user, UserRole.AGENT, "inspection", "complete")
        inspection, prop = await self._load_with_property(inspection_id)
        require_property_access(prop, user, "inspection")
        if inspection.status != InspectionStatus.SCHEDULED:
            raise ValidationException(
                "Inspection must be scheduled before completion", field="status"
            )
        updated = await self.inspection_repo.update_status(
            inspection_id, InspectionStatus.COMPLETED, completed_at=utc_now()
        )
        await self._invalidate(updated, prop)
        return updated

    async def _load_with_property(
        self, inspection_id: str
    ) -> tuple[InspectionResult, PropertyResult]:
        inspection = await self.inspection_repo.get_by_id(inspection_id)
        if inspection is None:
            raise ResourceNotFoundException("inspection", inspection_id)
        prop = await self.property_repo.get_by_id(inspection.property_id)
        if prop is None:
            raise ResourceNotFoundException("property", inspection.property_id)
        return inspection, prop

    async def _invalidate(self, inspection: InspectionResult, prop: PropertyResult) -> None:
        await invalidate_for_parties(
            self.cache, CacheKeys.inspections_list, prop.agent_id, inspection.tenant_id
        )
