"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    HTTP Request Metrics:
        - http_requests_total - Request count by method, route and status
        - http_request_duration_seconds - Request latency histogram

    Storage Metrics:
        - storage_operations_total - Provider operations by operation and status
        - storage_operation_duration_seconds - Provider operation latency
        - storage_file_size_bytes - Uploaded/read object sizes
        - storage_errors_total - Failures by operation and error type
        - storage_presigned_urls_generated - Presigned URLs by type
        - storage_client_initializations - Client startups by status

    Application Info:
        - application_info - Service version, name and environment labels
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from minio_file_service.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose the service registry in Prometheus text format."""
    data = generate_latest(REGISTRY)
    return Response(
        content=data,
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
