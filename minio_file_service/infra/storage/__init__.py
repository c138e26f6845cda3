"""MinIO file storage provider.

Usage:
    from minio_file_service.infra.storage import (
        MinioFileProvider,
        ProviderGetFile,
        ProviderUploadFile,
    )
"""

from __future__ import annotations

from .endpoint import ParsedEndpoint, parse_endpoint
from .exceptions import (
    StorageDownloadError,
    StorageError,
    StorageFileNotFoundError,
    StorageNotConfiguredError,
    StoragePermissionError,
    StoragePresignError,
    StorageTimeoutError,
    StorageUploadError,
    StorageValidationError,
)
from .provider import DownloadStream, MinioFileProvider
from .types import (
    ProviderDeleteFile,
    ProviderFileResult,
    ProviderGetFile,
    ProviderGetPresignedUploadUrl,
    ProviderUploadFile,
)

__all__ = [
    "DownloadStream",
    "MinioFileProvider",
    "ParsedEndpoint",
    "ProviderDeleteFile",
    "ProviderFileResult",
    "ProviderGetFile",
    "ProviderGetPresignedUploadUrl",
    "ProviderUploadFile",
    "StorageDownloadError",
    "StorageError",
    "StorageFileNotFoundError",
    "StorageNotConfiguredError",
    "StoragePermissionError",
    "StoragePresignError",
    "StorageTimeoutError",
    "StorageUploadError",
    "StorageValidationError",
    "parse_endpoint",
]
