"""Health check endpoints for Kubernetes-style probes.

- ``/health/live``: the process is up. Never touches storage.
- ``/health/ready``: the file provider is configured, started, and its
  bucket answers a HEAD request. Returns 503 otherwise so load balancers
  stop routing uploads to an instance that cannot store them.
"""

from __future__ import annotations

import time
from typing import Literal

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from minio_file_service.infra.storage.dependencies import OptionalFileProvider

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    status: Literal["ok"] = "ok"


class StorageStatus(BaseModel):
    """Storage section of the readiness report."""

    configured: bool
    ready: bool
    healthy: bool
    bucket: str | None = None
    latency_ms: float | None = Field(None, description="HEAD bucket round trip")


class ReadinessResponse(BaseModel):
    status: Literal["ready", "not_ready"]
    storage: StorageStatus


@router.get("/live", response_model=LivenessResponse, summary="Liveness probe")
async def liveness_check() -> LivenessResponse:
    return LivenessResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={503: {"model": ReadinessResponse}},
)
async def readiness_check(provider: OptionalFileProvider) -> JSONResponse:
    if provider is None:
        storage = StorageStatus(configured=False, ready=False, healthy=False)
    elif not provider.is_ready:
        storage = StorageStatus(
            configured=True, ready=False, healthy=False, bucket=provider.bucket
        )
    else:
        start = time.perf_counter()
        healthy = await provider.health_check()
        storage = StorageStatus(
            configured=True,
            ready=True,
            healthy=healthy,
            bucket=provider.bucket,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
        )

    ready = storage.healthy
    body = ReadinessResponse(status="ready" if ready else "not_ready", storage=storage)
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )
