"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from minio_file_service.core.settings.loader import get_minio_settings

    settings = get_minio_settings()  # First call: loads and validates
    settings = get_minio_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_minio_settings.cache_clear()
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .logs import LoggingSettings
from .minio import MinioSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_minio_settings() -> MinioSettings:
    """Get cached MinIO settings.

    Returns:
        Validated and frozen MinioSettings instance.
    """
    return MinioSettings()


def clear_settings_cache() -> None:
    """Clear every cached settings instance (for testing)."""
    get_app_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_minio_settings.cache_clear()
