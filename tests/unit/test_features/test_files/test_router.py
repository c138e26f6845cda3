"""Unit tests for the files API router."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient
import pytest

from minio_file_service.app.exception_handlers import configure_exception_handlers
from minio_file_service.core.settings.minio import MinioSettings
from minio_file_service.infra.storage import (
    DownloadStream,
    ProviderDeleteFile,
    ProviderFileResult,
    ProviderGetFile,
    ProviderGetPresignedUploadUrl,
    StorageFileNotFoundError,
    StorageValidationError,
)
from minio_file_service.infra.storage.dependencies import require_file_provider


@pytest.fixture
def mock_provider():
    """Create a mock file provider."""
    provider = AsyncMock()
    provider.is_ready = True
    provider.settings = MinioSettings()
    return provider


def _build_app() -> FastAPI:
    from minio_file_service.features.files.router import router

    app = FastAPI()
    configure_exception_handlers(app)
    app.include_router(router, prefix="/api/v1")
    return app


@pytest.fixture
async def files_client(mock_provider) -> AsyncGenerator[AsyncClient]:
    """Create HTTP client with the files router and a mocked provider."""
    app = _build_app()

    async def override_require_file_provider():
        return mock_provider

    app.dependency_overrides[require_file_provider] = override_require_file_provider

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class TestUpload:
    """Tests for POST /files."""

    @pytest.mark.asyncio
    async def test_upload_success(self, files_client: AsyncClient, mock_provider):
        mock_provider.upload.return_value = ProviderFileResult(
            url="https://cdn.example.com/medusa-media/shirt-abc.jpg", key="shirt-abc.jpg"
        )

        response = await files_client.post(
            "/api/v1/files",
            files={"file": ("shirt.jpg", b"jpeg-bytes", "image/jpeg")},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json() == {
            "url": "https://cdn.example.com/medusa-media/shirt-abc.jpg",
            "key": "shirt-abc.jpg",
        }
        (upload_file,) = mock_provider.upload.await_args.args
        assert upload_file.filename == "shirt.jpg"
        assert upload_file.mime_type == "image/jpeg"
        assert upload_file.content == b"jpeg-bytes"

    @pytest.mark.asyncio
    async def test_upload_rejected_by_provider(self, files_client: AsyncClient, mock_provider):
        mock_provider.upload.side_effect = StorageValidationError("No filename provided")

        response = await files_client.post(
            "/api/v1/files",
            files={"file": ("x.bin", b"1", "application/octet-stream")},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "No filename provided"

    @pytest.mark.asyncio
    async def test_upload_requires_file_field(self, files_client: AsyncClient):
        response = await files_client.post("/api/v1/files", data={"other": "x"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestPresignedUrls:
    """Tests for the presigned URL endpoints."""

    @pytest.mark.asyncio
    async def test_presigned_upload(self, files_client: AsyncClient, mock_provider):
        mock_provider.get_presigned_upload_url.return_value = ProviderFileResult(
            url="http://localhost:9000/medusa-media/new.png?X-Amz-Signature=1", key="new.png"
        )

        response = await files_client.post(
            "/api/v1/files/presigned-upload", json={"filename": "new.png"}
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["key"] == "new.png"
        assert response.json()["expires_in"] == 900
        mock_provider.get_presigned_upload_url.assert_awaited_once_with(
            ProviderGetPresignedUploadUrl(filename="new.png")
        )

    @pytest.mark.asyncio
    async def test_presigned_upload_requires_filename(self, files_client: AsyncClient):
        response = await files_client.post("/api/v1/files/presigned-upload", json={"filename": ""})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_presigned_download(self, files_client: AsyncClient, mock_provider):
        mock_provider.get_presigned_download_url.return_value = "http://signed"

        response = await files_client.get("/api/v1/files/photo-1.jpg/presigned-url")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "url": "http://signed",
            "key": "photo-1.jpg",
            "expires_in": 86400,
        }
        mock_provider.get_presigned_download_url.assert_awaited_once_with(
            ProviderGetFile(file_key="photo-1.jpg")
        )

    @pytest.mark.asyncio
    async def test_presigned_download_nested_key(self, files_client: AsyncClient, mock_provider):
        mock_provider.get_presigned_download_url.return_value = "http://signed"

        response = await files_client.get("/api/v1/files/uploads/2024/a.jpg/presigned-url")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["key"] == "uploads/2024/a.jpg"


class TestDownload:
    """Tests for GET /files/{key}/download."""

    @pytest.mark.asyncio
    async def test_download_streams_body(self, files_client: AsyncClient, mock_provider):
        async def iter_chunks(chunk_size):
            yield b"hello "
            yield b"world"

        body = MagicMock()
        body.iter_chunks = iter_chunks
        stream = DownloadStream(
            key="greeting.txt",
            body=body,
            chunk_size=1024,
            content_type="text/plain",
            content_length=11,
        )
        mock_provider.get_download_stream.return_value = stream

        response = await files_client.get("/api/v1/files/greeting.txt/download")

        assert response.status_code == status.HTTP_200_OK
        assert response.content == b"hello world"
        assert response.headers["content-type"].startswith("text/plain")
        assert "greeting.txt" in response.headers["content-disposition"]
        body.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_download_missing_object(self, files_client: AsyncClient, mock_provider):
        mock_provider.get_download_stream.side_effect = StorageFileNotFoundError(
            "Failed to get download stream: NoSuchKey"
        )

        response = await files_client.get("/api/v1/files/missing.txt/download")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_download_releases_stream_after_response(self, mock_provider):
        from minio_file_service.features.files.router import download_file

        body = MagicMock()
        mock_provider.get_download_stream.return_value = DownloadStream(
            key="a.txt", body=body, chunk_size=1024
        )

        response = await download_file("a.txt", mock_provider)
        body.close.assert_not_called()
        await response.background()

        body.close.assert_called_once()


class TestDelete:
    """Tests for the delete endpoints."""

    @pytest.mark.asyncio
    async def test_delete_single(self, files_client: AsyncClient, mock_provider):
        response = await files_client.delete("/api/v1/files/a.png")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        mock_provider.delete.assert_awaited_once_with(ProviderDeleteFile(file_key="a.png"))

    @pytest.mark.asyncio
    async def test_batch_delete(self, files_client: AsyncClient, mock_provider):
        response = await files_client.post(
            "/api/v1/files/batch-delete", json={"file_keys": ["a.png", "b.png"]}
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        mock_provider.delete.assert_awaited_once_with(
            [ProviderDeleteFile(file_key="a.png"), ProviderDeleteFile(file_key="b.png")]
        )

    @pytest.mark.asyncio
    async def test_batch_delete_requires_keys(self, files_client: AsyncClient):
        response = await files_client.post("/api/v1/files/batch-delete", json={"file_keys": []})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestAvailability:
    """Routes answer 503 when storage is not configured."""

    @pytest.mark.asyncio
    async def test_not_configured_returns_503(self):
        app = _build_app()

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/v1/files/a.png/presigned-url")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["type"] == "storage-not-configured"

    @pytest.mark.asyncio
    async def test_malformed_endpoint_returns_503(self, monkeypatch):
        monkeypatch.setenv("MINIO_ENDPOINT", "minio:abc")
        monkeypatch.setenv("MINIO_ACCESS_KEY", "minioadmin")
        monkeypatch.setenv("MINIO_SECRET_KEY", "minioadmin")
        app = _build_app()

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.post(
                "/api/v1/files",
                files={"file": ("shirt.jpg", b"jpeg-bytes", "image/jpeg")},
            )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["type"] == "storage-misconfigured"
