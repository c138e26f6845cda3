"""Application lifespan: logging, metrics info and file provider lifecycle."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from minio_file_service.core.settings import (
    get_app_settings,
    get_logging_settings,
    get_minio_settings,
)
from minio_file_service.infra.logging import setup_logging
from minio_file_service.infra.metrics.prometheus import application_info
from minio_file_service.infra.storage.dependencies import (
    get_file_provider,
    reset_file_provider,
)
from minio_file_service.infra.storage.exceptions import StorageNotConfiguredError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

    from minio_file_service.core.settings import MinioSettings

logger = logging.getLogger(__name__)


async def startup_storage(settings: MinioSettings) -> None:
    """Start the file provider and bootstrap its bucket.

    Failures leave the application running in degraded mode (file routes
    answer 503) unless ``MINIO_STARTUP_REQUIRE_STORAGE`` is set.
    """
    if not settings.is_configured:
        if settings.startup_require_storage:
            raise StorageNotConfiguredError(
                "MinIO storage is required but MINIO_ENDPOINT/ACCESS_KEY/SECRET_KEY are not set"
            )
        logger.warning("MinIO storage is not configured, file routes are disabled")
        return

    try:
        provider = get_file_provider()
        await provider.startup()
        logger.info(
            "File provider initialized",
            extra={"provider": provider.identifier, "bucket": provider.bucket},
        )
    except Exception as e:
        if settings.startup_require_storage:
            logger.error(
                "Storage required but unavailable, failing startup",
                extra={"error": str(e)},
            )
            raise
        logger.warning(
            "Storage unavailable, continuing in degraded mode",
            extra={"error": str(e)},
        )


async def shutdown_storage(settings: MinioSettings) -> None:
    """Close the file provider's client, if one was created."""
    if not settings.is_configured:
        return

    try:
        provider = get_file_provider()
        await provider.shutdown()
    except Exception as e:
        logger.warning("Error during file provider shutdown", extra={"error": str(e)})
    finally:
        reset_file_provider()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    app_settings = get_app_settings()
    minio_settings = get_minio_settings()

    setup_logging(get_logging_settings())
    application_info.labels(
        version=app_settings.version,
        service=app_settings.service_name,
        environment=app_settings.environment,
    ).set(1)

    logger.info(
        "Starting %s",
        app_settings.title,
        extra={"version": app_settings.version, "environment": app_settings.environment},
    )

    await startup_storage(minio_settings)
    try:
        yield
    finally:
        await shutdown_storage(minio_settings)
        logger.info("Application shutdown complete")
