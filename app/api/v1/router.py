"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import health, inspections, invoices, properties, tickets

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(tickets.router, prefix="/tickets", tags=["tickets"])
api_router.include_router(properties.router, prefix="/properties", tags=["properties"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(inspections.router, prefix="/inspections", tags=["inspections"])
