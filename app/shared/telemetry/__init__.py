"""Logging, tracer provider and span helpers."""

from app.shared.telemetry.logging import RequestContextFilter, setup_logging
from app.shared.telemetry.tracing import add_span_attributes, current_trace_id, traced

__all__ = [
    "RequestContextFilter",
    "add_span_attributes",
    "current_trace_id",
    "setup_logging",
    "traced",
]
