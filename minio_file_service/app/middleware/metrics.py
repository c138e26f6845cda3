"""Metrics middleware for HTTP request instrumentation with trace correlation."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from minio_file_service.infra.metrics.prometheus import (
    http_request_duration_seconds,
    http_requests_total,
)
from minio_file_service.infra.tracing.opentelemetry import current_trace_ids

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import Request, Response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request counts and durations per route template.

    Labels use the matched route path (``/api/v1/files/{key}/download``)
    rather than the raw URL so object keys never become label values. When a
    span is recording, its trace id is attached as an exemplar.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        method = request.method
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Process-Time"] = str(time.perf_counter() - start_time)
            return response
        finally:
            duration = time.perf_counter() - start_time
            route = request.scope.get("route")
            endpoint = getattr(route, "path", None) or "unmatched"

            trace_ids = current_trace_ids()
            exemplar = {"trace_id": trace_ids[0]} if trace_ids else None

            http_request_duration_seconds.labels(
                method=method, endpoint=endpoint
            ).observe(duration, exemplar=exemplar)
            http_requests_total.labels(
                method=method, endpoint=endpoint, status=status_code
            ).inc(exemplar=exemplar)
