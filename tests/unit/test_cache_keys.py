"""Cache key and TTL policy tests."""

import pytest

from app.core.constants import CacheTTL
from app.infrastructure.cache import CacheKeys
from app.infrastructure.cache.keys import is_key_safe


def test_list_keys_include_role_and_user() -> None:
    assert CacheKeys.tickets_list("a1", "AGENT") == "tickets:AGENT:a1"
    assert CacheKeys.properties_list("t1", "TENANT") == "properties:TENANT:t1"
    assert CacheKeys.invoices_list("a1", "AGENT") == "invoices:AGENT:a1"
    assert CacheKeys.inspections_list("t1", "TENANT") == "inspections:TENANT:t1"


def test_detail_keys() -> None:
    assert CacheKeys.ticket_detail("tk1") == "ticket:tk1"
    assert CacheKeys.ticket_replies("tk1") == "ticket:tk1:replies"
    assert CacheKeys.property_detail("p1") == "property:p1"
    assert CacheKeys.invoice_detail("i1") == "invoice:i1"


def test_rate_limit_key() -> None:
    assert CacheKeys.rate_limit("u1", "createTicket") == "ratelimit:createTicket:u1"


def test_page_keys_fall_under_the_list_pattern() -> None:
    base = CacheKeys.tickets_list("a1", "AGENT")

    assert CacheKeys.page(base, 2, 10) == "tickets:AGENT:a1:p2:s10"
    assert CacheKeys.pattern(base) == "tickets:AGENT:a1:*"


@pytest.mark.parametrize("user_id", ["a:1", "x:"])
def test_components_with_separator_are_rejected(user_id: str) -> None:
    with pytest.raises(ValueError, match="separator"):
        CacheKeys.tickets_list(user_id, "AGENT")


def test_ttl_tiers() -> None:
    assert CacheTTL.SHORT == 60
    assert CacheTTL.MEDIUM == 300
    assert CacheTTL.LONG == 3600
    assert CacheTTL.DAY == 86400
    assert CacheTTL.RATE_LIMIT == 60


def test_is_key_safe() -> None:
    assert is_key_safe("p1") is True
    assert is_key_safe("p1:x") is False
