"""DTOs for the authenticated caller (provided by the upstream auth layer)."""

from dataclasses import dataclass

from app.domain.enums import UserRole


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated user attached to the request; role scopes every list view."""

    id: str
    role: UserRole

    @property
    def is_agent(self) -> bool:
        return self.role == UserRole.AGENT

    @property
    def is_tenant(self) -> bool:
        return self.role == UserRole.TENANT
