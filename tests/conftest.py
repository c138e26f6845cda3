"""Pytest configuration and shared fixtures.

Organization:
    - Environment: MINIO_/APP_/LOG_ variables for tests that build settings
    - Isolation: settings caches and the provider singleton are reset per test
    - Storage: a mocked aioboto3 S3 client and a provider wired to it
"""

from __future__ import annotations

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Ensure tests run without an object store or a developer .env leaking in
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("LOG_JSON_FORMAT", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
for _name in ("MINIO_ENDPOINT", "MINIO_ACCESS_KEY", "MINIO_SECRET_KEY", "MINIO_PUBLIC_ENDPOINT"):
    os.environ.pop(_name, None)


# ============================================================================
# Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_state():
    """Clear cached settings, the provider singleton and the log context."""
    from minio_file_service.core.settings import clear_settings_cache
    from minio_file_service.infra.logging.context import clear_log_context
    from minio_file_service.infra.storage.dependencies import reset_file_provider

    clear_settings_cache()
    reset_file_provider()
    clear_log_context()
    yield
    clear_settings_cache()
    reset_file_provider()
    clear_log_context()


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def minio_options() -> dict[str, str]:
    """Provider options pointing at a local MinIO."""
    return {
        "endpoint": "http://localhost:9000",
        "access_key": "minioadmin",
        "secret_key": "minioadmin",
        "bucket": "test-media",
        "public_endpoint": "https://cdn.example.com",
    }


@pytest.fixture
def mock_s3_client() -> AsyncMock:
    """An aioboto3 S3 client double.

    Every client method is an AsyncMock; ``generate_presigned_url`` returns a
    fixed URL so tests can assert on it.
    """
    client = AsyncMock()
    client.generate_presigned_url.return_value = (
        "http://localhost:9000/test-media/photo.jpg?X-Amz-Signature=abc"
    )
    return client


@pytest.fixture
def provider(minio_options, mock_s3_client):
    """A MinioFileProvider whose client is the mock, as if started."""
    from minio_file_service.infra.storage import MinioFileProvider

    instance = MinioFileProvider(minio_options)
    instance._client = mock_s3_client
    instance._client_context = MagicMock(__aexit__=AsyncMock(return_value=None))
    return instance
