"""Tests for the application factory and lifespan."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

from httpx import ASGITransport, AsyncClient
import pytest

from minio_file_service.app.lifespan import shutdown_storage, startup_storage
from minio_file_service.app.main import create_app
from minio_file_service.core.settings.minio import MinioSettings
from minio_file_service.infra.storage.exceptions import (
    StorageNotConfiguredError,
    StoragePermissionError,
)


@pytest.fixture
async def client():
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client


def _configured_settings(**overrides) -> MinioSettings:
    return MinioSettings(
        endpoint="http://localhost:9000",
        access_key="minioadmin",
        secret_key="minioadmin",
        **overrides,
    )


class TestApplication:
    """Routing and middleware wiring."""

    @pytest.mark.asyncio
    async def test_routes_are_mounted_under_prefix(self, client):
        response = await client.get("/api/v1/health/live")

        assert response.status_code == 200
        assert response.headers["x-request-id"]

    @pytest.mark.asyncio
    async def test_metrics_endpoint(self, client):
        await client.get("/api/v1/health/live")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text
        assert 'endpoint="/api/v1/health/live"' in response.text

    @pytest.mark.asyncio
    async def test_file_routes_unavailable_without_storage(self, client):
        response = await client.delete("/api/v1/files/a.png")

        assert response.status_code == 503
        assert response.json()["request_id"] == response.headers["x-request-id"]


class TestStorageLifespan:
    """Degraded-mode startup of the file provider."""

    @pytest.mark.asyncio
    async def test_not_configured_is_skipped(self):
        await startup_storage(MinioSettings())

    @pytest.mark.asyncio
    async def test_not_configured_but_required_fails(self):
        with pytest.raises(StorageNotConfiguredError):
            await startup_storage(MinioSettings(startup_require_storage=True))

    @pytest.mark.asyncio
    async def test_bootstrap_failure_is_degraded_mode(self):
        provider = AsyncMock()
        provider.startup.side_effect = StoragePermissionError("Access Denied")

        with patch("minio_file_service.app.lifespan.get_file_provider", return_value=provider):
            await startup_storage(_configured_settings())

        provider.startup.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_bootstrap_failure_when_required_fails(self):
        provider = AsyncMock()
        provider.startup.side_effect = StoragePermissionError("Access Denied")

        with (
            patch("minio_file_service.app.lifespan.get_file_provider", return_value=provider),
            pytest.raises(StoragePermissionError),
        ):
            await startup_storage(_configured_settings(startup_require_storage=True))

    @pytest.mark.asyncio
    async def test_shutdown_closes_provider(self):
        provider = AsyncMock()

        with patch("minio_file_service.app.lifespan.get_file_provider", return_value=provider):
            await shutdown_storage(_configured_settings())

        provider.shutdown.assert_awaited_once()
