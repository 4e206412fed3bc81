"""Shared telemetry: logging setup and tracing helpers.

Telemetry (app.shared.telemetry.telemetry) pulls in the OpenTelemetry
SDK and exporters; the lifespan imports it only when telemetry is enabled.
"""

from app.shared.telemetry.logging import setup_logging
from app.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    get_trace_id,
    traced,
)

__all__ = [
    "setup_logging",
    "traced",
    "add_span_attributes",
    "add_span_event",
    "get_trace_id",
]
