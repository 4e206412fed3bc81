"""DTOs for property use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PropertyResult:
    """Property read-model. tenant_id is None while the property is vacant."""

    id: str
    agent_id: str
    tenant_id: str | None
    title: str
    address: str
    rent: float
    created_at: datetime


@dataclass(frozen=True)
class PropertyCreate:
    agent_id: str
    title: str
    address: str
    rent: float
    tenant_id: str | None = None


@dataclass(frozen=True)
class PropertyUpdate:
    """Partial update; None fields are left unchanged."""

    title: str | None = None
    address: str | None = None
    rent: float | None = None
    tenant_id: str | None = None
