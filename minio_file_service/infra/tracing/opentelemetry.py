"""OpenTelemetry tracer access.

Only the OpenTelemetry API is used here. When no SDK is installed and
configured the tracer is a no-op, so spans cost nothing; deployments that
want traces install and configure an SDK/exporter at process start.
"""

from __future__ import annotations

from opentelemetry import trace


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer instance for creating custom spans.

    Args:
        name: Tracer name, typically __name__ of the module.

    Returns:
        Tracer instance for creating spans.

    Example:
        tracer = get_tracer(__name__)

        async def upload(file):
            with tracer.start_as_current_span("storage.upload") as span:
                span.set_attribute("storage.key", key)
    """
    return trace.get_tracer(name)


def current_trace_ids() -> tuple[str, str] | None:
    """Return ``(trace_id, span_id)`` of the recording span as hex strings, if any."""
    span = trace.get_current_span()
    context = span.get_span_context()
    if not context.is_valid:
        return None
    return format(context.trace_id, "032x"), format(context.span_id, "016x")
