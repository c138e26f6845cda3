"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from minio_file_service.core.settings import get_app_settings
from minio_file_service.features.files.router import router as files_router
from minio_file_service.features.health.router import router as health_router
from minio_file_service.features.metrics.router import router as metrics_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from minio_file_service.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Files and health routes live under the API prefix; ``/metrics`` stays at
    the root where scrapers expect it.
    """
    settings = app_settings or get_app_settings()
    prefix = settings.api_prefix.rstrip("/")

    app.include_router(files_router, prefix=prefix)
    app.include_router(health_router, prefix=prefix)
    app.include_router(metrics_router)

    logger.debug("Routers registered", extra={"api_prefix": prefix})
