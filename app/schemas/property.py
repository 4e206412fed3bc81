"""Property API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.pagination import PaginationResponse


class PropertyCreateRequest(BaseModel):
    """Request body for adding a property (agents)."""

    title: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    rent: float = Field(..., gt=0)
    tenant_id: str | None = None


class PropertyUpdateRequest(BaseModel):
    """Request body for updating a property (partial)."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = Field(default=None, min_length=1, max_length=500)
    rent: float | None = Field(default=None, gt=0)
    tenant_id: str | None = None


class PropertyResponse(BaseModel):
    """Property response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    agent_id: str
    tenant_id: str | None = None
    title: str
    address: str
    rent: float
    created_at: datetime


class PropertyListResponse(BaseModel):
    """One page of properties."""

    items: list[PropertyResponse]
    pagination: PaginationResponse
