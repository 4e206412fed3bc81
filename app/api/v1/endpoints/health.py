"""Health check endpoints for liveness and readiness probes."""

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_cache
from app.infrastructure.cache import CacheService
from app.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    cache: CacheService | None = Depends(get_cache),
) -> ReadinessResponse:
    """Report readiness and cache state.

    Tries to (re)connect when the cache is enabled but not connected, so the
    probe also brings a recovered Redis back into use.
    """
    if cache is None:
        return ReadinessResponse(cache="disabled")
    available = cache.is_available() or await cache.connect()
    return ReadinessResponse(cache="available" if available else "unavailable")
