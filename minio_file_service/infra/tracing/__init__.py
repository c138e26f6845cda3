"""OpenTelemetry tracing helpers."""

from .opentelemetry import current_trace_ids, get_tracer

__all__ = ["current_trace_ids", "get_tracer"]
