"""FastAPI dependency injection for the file provider.

The provider is a process-wide singleton built lazily from ``MINIO_*``
settings and started by the application lifespan.

Example:
    ```python
    from minio_file_service.infra.storage.dependencies import FileProvider

    @router.get("/files/{key}/presigned-url")
    async def presign(key: str, provider: FileProvider) -> dict:
        return {"url": await provider.get_presigned_download_url(ProviderGetFile(key))}
    ```
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends

from minio_file_service.core.exceptions import ServiceUnavailableException
from minio_file_service.core.settings import get_minio_settings

from .exceptions import StorageError, StorageNotConfiguredError
from .provider import REQUIRED_OPTIONS, MinioFileProvider

logger = logging.getLogger(__name__)

_provider: MinioFileProvider | None = None


def get_file_provider() -> MinioFileProvider:
    """Get the singleton file provider, building it on first use.

    Raises:
        StorageNotConfiguredError: If endpoint or credentials are missing.
    """
    global _provider
    if _provider is None:
        settings = get_minio_settings()
        if not settings.is_configured:
            raise StorageNotConfiguredError(
                "MinIO storage is not configured",
                metadata={"required_settings": [f"MINIO_{o.upper()}" for o in REQUIRED_OPTIONS]},
            )
        _provider = MinioFileProvider.from_settings(settings)
    return _provider


def reset_file_provider() -> None:
    """Forget the singleton (for tests and shutdown)."""
    global _provider
    _provider = None


async def require_file_provider() -> MinioFileProvider:
    """Dependency that answers 503 unless the provider is configured and started.

    Settings that are present but invalid (for example a malformed endpoint)
    are a server misconfiguration and also answer 503.
    """
    try:
        provider = get_file_provider()
    except StorageNotConfiguredError as e:
        raise ServiceUnavailableException(
            detail="File storage is not configured",
            type="storage-not-configured",
            extra=e.extra,
        ) from e
    except StorageError as e:
        logger.warning("File storage is misconfigured: %s", e.message)
        raise ServiceUnavailableException(
            detail="File storage is misconfigured",
            type="storage-misconfigured",
            extra={"code": e.code},
        ) from e

    if not provider.is_ready:
        raise ServiceUnavailableException(
            detail="File storage is temporarily unavailable",
            type="storage-unavailable",
        )
    return provider


FileProvider = Annotated[MinioFileProvider, Depends(require_file_provider)]
"""File provider dependency; raises HTTP 503 when storage is unavailable."""


async def optional_file_provider() -> MinioFileProvider | None:
    """Dependency returning the provider, or None when storage is unusable.

    Missing and invalid settings both yield None so probes report the
    storage as not configured.
    """
    try:
        return get_file_provider()
    except StorageNotConfiguredError:
        return None
    except StorageError as e:
        logger.warning("File storage is misconfigured: %s", e.message)
        return None


OptionalFileProvider = Annotated[MinioFileProvider | None, Depends(optional_file_provider)]
"""File provider dependency that tolerates missing configuration (health checks)."""
