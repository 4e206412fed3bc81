"""Inspection API: cached list view and rate-limited writes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import CurrentUserDep, get_inspection_service, rate_limit
from app.application.services import InspectionService
from app.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from app.core.limiter import limit_writes
from app.schemas.inspection import (
    InspectionCreateRequest,
    InspectionListResponse,
    InspectionResponse,
    InspectionScheduleRequest,
)

router = APIRouter()

InspectionServiceDep = Annotated[InspectionService, Depends(get_inspection_service)]


@router.get("", response_model=InspectionListResponse)
async def list_inspections(
    user: CurrentUserDep,
    inspection_service: InspectionServiceDep,
    page: int = Query(DEFAULT_PAGE, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
):
    """List inspections for the current agent or tenant."""
    return await inspection_service.list_for_user(user, page, page_size)


@router.post(
    "",
    response_model=InspectionResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("createInspection"))],
)
@limit_writes
async def create_inspection(
    request: Request,
    body: InspectionCreateRequest,
    user: CurrentUserDep,
    inspection_service: InspectionServiceDep,
):
    """Propose inspection dates for a managed property."""
    return await inspection_service.create_inspection(
        user, body.property_id, body.available_dates, notes=body.notes
    )


@router.post(
    "/{inspection_id}/schedule",
    response_model=InspectionResponse,
    dependencies=[Depends(rate_limit("scheduleInspection"))],
)
@limit_writes
async def schedule_inspection(
    request: Request,
    inspection_id: str,
    body: InspectionScheduleRequest,
    user: CurrentUserDep,
    inspection_service: InspectionServiceDep,
):
    """Tenant picks one of the proposed days."""
    return await inspection_service.schedule_inspection(
        inspection_id, user, body.selected_date
    )


@router.post(
    "/{inspection_id}/complete",
    response_model=InspectionResponse,
    dependencies=[Depends(rate_limit("completeInspection"))],
)
@limit_writes
async def complete_inspection(
    request: Request,
    inspection_id: str,
    user: CurrentUserDep,
    inspection_service: InspectionServiceDep,
):
    """Mark a scheduled inspection completed (managing agent)."""
    return await inspection_service.complete_inspection(inspection_id, user)
