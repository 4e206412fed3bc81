"""DTOs for inspection use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import InspectionStatus


@dataclass(frozen=True)
class InspectionResult:
    """Inspection read-model returned by IInspectionRepository."""

    id: str
    property_id: str
    tenant_id: str
    status: InspectionStatus
    available_dates: list[datetime] = field(default_factory=list)
    scheduled_date: datetime | None = None
    completed_at: datetime | None = None
    notes: str | None = None


@dataclass(frozen=True)
class InspectionCreate:
    property_id: str
    tenant_id: str
    available_dates: list[datetime]
    notes: str | None = None
