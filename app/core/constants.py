"""Core constants: cache key prefixes, TTL tiers and shared literal values.

Single source of truth for cache key structure. Writers and invalidators
must build keys from the same prefixes or invalidation silently misses.
"""

# Cache key prefixes for list views (namespace:role:user_id[:pN:sM])
CACHE_PREFIX_TICKETS = "tickets"
CACHE_PREFIX_PROPERTIES = "properties"
CACHE_PREFIX_INVOICES = "invoices"
CACHE_PREFIX_INSPECTIONS = "inspections"

# Cache key prefixes for single records
CACHE_PREFIX_TICKET = "ticket"
CACHE_PREFIX_PROPERTY = "property"
CACHE_PREFIX_INVOICE = "invoice"

CACHE_PREFIX_RATE_LIMIT = "ratelimit"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"
CACHE_WILDCARD = "*"

# Bumped whenever a cached payload shape changes; older payloads read as misses.
CACHE_SCHEMA_VERSION = 1


class CacheTTL:
    """Expiry tiers in seconds."""

    SHORT = 60  # frequently changing list views
    MEDIUM = 300
    LONG = 3600
    DAY = 86400
    RATE_LIMIT = 60


DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

MAX_REPLY_LENGTH = 1000
