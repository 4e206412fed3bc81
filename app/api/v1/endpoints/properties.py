"""Property API: cached list and detail views, rate-limited writes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import CurrentUserDep, get_property_service, rate_limit
from app.application.dtos.property import PropertyUpdate
from app.application.services import PropertyService
from app.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from app.core.limiter import limit_writes
from app.schemas.property import (
    PropertyCreateRequest,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdateRequest,
)

router = APIRouter()

PropertyServiceDep = Annotated[PropertyService, Depends(get_property_service)]


@router.get("", response_model=PropertyListResponse)
async def list_properties(
    user: CurrentUserDep,
    property_service: PropertyServiceDep,
    page: int = Query(DEFAULT_PAGE, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
):
    """List properties managed (agent) or rented (tenant) by the current user."""
    return await property_service.list_for_user(user, page, page_size)


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("createProperty"))],
)
@limit_writes
async def create_property(
    request: Request,
    body: PropertyCreateRequest,
    user: CurrentUserDep,
    property_service: PropertyServiceDep,
):
    """Add a property managed by the current agent."""
    return await property_service.create_property(
        user, body.title, body.address, body.rent, tenant_id=body.tenant_id
    )


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(
    property_id: str,
    user: CurrentUserDep,
    property_service: PropertyServiceDep,
):
    """Return one property (cached by id)."""
    return await property_service.get_property(property_id, user)


@router.patch(
    "/{property_id}",
    response_model=PropertyResponse,
    dependencies=[Depends(rate_limit("updateProperty"))],
)
@limit_writes
async def update_property(
    request: Request,
    property_id: str,
    body: PropertyUpdateRequest,
    user: CurrentUserDep,
    property_service: PropertyServiceDep,
):
    """Partially update a property (managing agent)."""
    data = PropertyUpdate(**body.model_dump(exclude_unset=True))
    return await property_service.update_property(property_id, user, data)


@router.delete(
    "/{property_id}",
    status_code=204,
    dependencies=[Depends(rate_limit("deleteProperty"))],
)
@limit_writes
async def delete_property(
    request: Request,
    property_id: str,
    user: CurrentUserDep,
    property_service: PropertyServiceDep,
):
    """Delete a property (managing agent)."""
    await property_service.delete_property(property_id, user)
