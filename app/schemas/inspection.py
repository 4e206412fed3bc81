"""Inspection API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import InspectionStatus
from app.schemas.pagination import PaginationResponse


class InspectionCreateRequest(BaseModel):
    """Request body for proposing inspection dates (agents)."""

    property_id: str = Field(..., min_length=1)
    available_dates: list[datetime] = Field(..., min_length=1, max_length=20)
    notes: str | None = Field(default=None, max_length=2000)


class InspectionScheduleRequest(BaseModel):
    """Request body for picking one of the proposed days (tenants)."""

    selected_date: datetime


class InspectionResponse(BaseModel):
    """Inspection response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    property_id: str
    tenant_id: str
    status: InspectionStatus
    available_dates: list[datetime] = Field(default_factory=list)
    scheduled_date: datetime | None = None
    completed_at: datetime | None = None
    notes: str | None = None


class InspectionListResponse(BaseModel):
    """One page of inspections."""

    items: list[InspectionResponse]
    pagination: PaginationResponse
