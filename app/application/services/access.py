"""Role and ownership checks shared by the resource services."""

from app.application.dtos.property import PropertyResult
from app.application.dtos.user import CurrentUser
from app.domain.enums import UserRole
from app.domain.exceptions import AuthorizationException

_PLURALS = {"property": "properties"}


def require_role(user: CurrentUser, role: UserRole, resource: str, action: str) -> None:
    """Raise AuthorizationException unless user has role.

    The message reads e.g. "Only tenants can create tickets".
    """
    if user.role != role:
        noun = _PLURALS.get(resource, f"{resource}s")
        raise AuthorizationException(
            resource=resource,
            action=action,
            message=f"Only {role.value.lower()}s can {action} {noun}",
        )


def can_access_property(prop: PropertyResult, user: CurrentUser) -> bool:
    """Agents access properties they manage; tenants the property they rent."""
    if user.is_agent:
        return prop.agent_id == user.id
    return prop.tenant_id is not None and prop.tenant_id == user.id


def require_property_access(prop: PropertyResult, user: CurrentUser, resource: str) -> None:
    if not can_access_property(prop, user):
        raise AuthorizationException(
            resource=resource,
            message=f"You don't have access to this {resource}",
        )
