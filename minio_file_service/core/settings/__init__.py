"""Modular Pydantic Settings v2 configuration.

Each domain has its own frozen settings model with its own environment prefix:

- ``APP_``   application / HTTP server
- ``LOG_``   logging
- ``MINIO_`` object storage provider

Import settings via cached loaders:
    from minio_file_service.core.settings import get_minio_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .app import AppSettings
from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_logging_settings,
    get_minio_settings,
)
from .logs import LoggingSettings
from .minio import DEFAULT_BUCKET, MinioSettings

__all__ = [
    "DEFAULT_BUCKET",
    "AppSettings",
    "LoggingSettings",
    "MinioSettings",
    "clear_settings_cache",
    "get_app_settings",
    "get_logging_settings",
    "get_minio_settings",
]
