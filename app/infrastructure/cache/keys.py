"""Cache key builders. Single place for key format.

Key components (user_id, role, ticket_id, action, etc.) must not contain
CACHE_KEY_SEP to avoid ambiguous or colliding keys. List keys share their
namespace prefix with every page key so one wildcard pattern drops them all.
"""

from app.core.constants import (
    CACHE_KEY_SEP,
    CACHE_PREFIX_INSPECTIONS,
    CACHE_PREFIX_INVOICE,
    CACHE_PREFIX_INVOICES,
    CACHE_PREFIX_PROPERTIES,
    CACHE_PREFIX_PROPERTY,
    CACHE_PREFIX_RATE_LIMIT,
    CACHE_PREFIX_TICKET,
    CACHE_PREFIX_TICKETS,
    CACHE_WILDCARD,
)


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value contains the cache key separator.

    Args:
        value: String component used in a cache key.
        name: Name of the component (for error message).

    Raises:
        ValueError: If value contains CACHE_KEY_SEP.
    """
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def is_key_safe(value: str) -> bool:
    """True if value can be used as a key component.

    Record lookups check path ids with this first; an id that cannot be a
    key cannot name a stored record either, so callers answer not-found.
    """
    return CACHE_KEY_SEP not in value


def _join(*parts: tuple[str, str]) -> str:
    """Validate (value, name) pairs and join the values with CACHE_KEY_SEP."""
    for value, name in parts:
        _validate_key_component(value, name)
    return CACHE_KEY_SEP.join(value for value, _ in parts)


class CacheKeys:
    """Key builders shared by cache writers and invalidators."""

    @staticmethod
    def tickets_list(user_id: str, role: str) -> str:
        """Ticket list namespace for one user in one role."""
        return _join((CACHE_PREFIX_TICKETS, "prefix"), (role, "role"), (user_id, "user_id"))

    @staticmethod
    def ticket_detail(ticket_id: str) -> str:
        return _join((CACHE_PREFIX_TICKET, "prefix"), (ticket_id, "ticket_id"))

    @staticmethod
    def ticket_replies(ticket_id: str) -> str:
        return f"{CacheKeys.ticket_detail(ticket_id)}{CACHE_KEY_SEP}replies"

    @staticmethod
    def properties_list(user_id: str, role: str) -> str:
        return _join((CACHE_PREFIX_PROPERTIES, "prefix"), (role, "role"), (user_id, "user_id"))

    @staticmethod
    def property_detail(property_id: str) -> str:
        return _join((CACHE_PREFIX_PROPERTY, "prefix"), (property_id, "property_id"))

    @staticmethod
    def invoices_list(user_id: str, role: str) -> str:
        return _join((CACHE_PREFIX_INVOICES, "prefix"), (role, "role"), (user_id, "user_id"))

    @staticmethod
    def invoice_detail(invoice_id: str) -> str:
        return _join((CACHE_PREFIX_INVOICE, "prefix"), (invoice_id, "invoice_id"))

    @staticmethod
    def inspections_list(user_id: str, role: str) -> str:
        return _join((CACHE_PREFIX_INSPECTIONS, "prefix"), (role, "role"), (user_id, "user_id"))

    @staticmethod
    def rate_limit(user_id: str, action: str) -> str:
        """Fixed-window counter for (subject, action)."""
        return _join((CACHE_PREFIX_RATE_LIMIT, "prefix"), (action, "action"), (user_id, "user_id"))

    @staticmethod
    def page(base: str, page: int, page_size: int) -> str:
        """Page slice of a list namespace, e.g. tickets:AGENT:a1:p1:s10."""
        return f"{base}{CACHE_KEY_SEP}p{page}{CACHE_KEY_SEP}s{page_size}"

    @staticmethod
    def pattern(base: str) -> str:
        """Wildcard matching every key below base (not base itself)."""
        return f"{base}{CACHE_KEY_SEP}{CACHE_WILDCARD}"
