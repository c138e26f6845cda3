"""Tests for the storage CLI commands."""

from unittest.mock import AsyncMock, patch

from click.testing import CliRunner
import pytest

from minio_file_service.cli.main import cli
from minio_file_service.core.settings.minio import MinioSettings
from minio_file_service.infra.storage import (
    ProviderDeleteFile,
    ProviderFileResult,
    ProviderGetFile,
    StorageFileNotFoundError,
)


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("minio_file_service.cli.main.setup_logging"):
        yield


@pytest.fixture
def configured_env(monkeypatch):
    monkeypatch.setenv("MINIO_ENDPOINT", "http://localhost:9000")
    monkeypatch.setenv("MINIO_ACCESS_KEY", "minioadmin")
    monkeypatch.setenv("MINIO_SECRET_KEY", "miniosecret")


@pytest.fixture
def mock_provider(configured_env):
    provider = AsyncMock()
    provider.bucket = "medusa-media"
    provider.settings = MinioSettings()
    with patch(
        "minio_file_service.cli.commands.storage.MinioFileProvider.from_settings",
        return_value=provider,
    ):
        yield provider


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "minio-file" in result.output


def test_info_hides_secrets(runner, configured_env):
    result = runner.invoke(cli, ["storage", "info"])

    assert result.exit_code == 0
    assert "http://localhost:9000" in result.output
    assert "miniosecret" not in result.output
    assert "Credentials: Configured" in result.output


def test_commands_require_configuration(runner):
    result = runner.invoke(cli, ["storage", "presign", "a.png"])

    assert result.exit_code == 1


def test_init_bucket(runner, mock_provider):
    result = runner.invoke(cli, ["storage", "init-bucket"])

    assert result.exit_code == 0
    mock_provider.initialize_bucket.assert_awaited_once()


def test_upload_guesses_content_type(runner, mock_provider, tmp_path):
    source = tmp_path / "shirt.jpg"
    source.write_bytes(b"jpeg")
    mock_provider.upload.return_value = ProviderFileResult(
        url="https://cdn.example.com/medusa-media/shirt-1.jpg", key="shirt-1.jpg"
    )

    result = runner.invoke(cli, ["storage", "upload", str(source)])

    assert result.exit_code == 0
    assert "https://cdn.example.com/medusa-media/shirt-1.jpg" in result.output
    (upload_file,) = mock_provider.upload.await_args.args
    assert upload_file.filename == "shirt.jpg"
    assert upload_file.mime_type == "image/jpeg"
    assert upload_file.content == b"jpeg"


def test_delete_many(runner, mock_provider):
    result = runner.invoke(cli, ["storage", "delete", "a.png", "b.png"])

    assert result.exit_code == 0
    mock_provider.delete.assert_awaited_once_with(
        [ProviderDeleteFile(file_key="a.png"), ProviderDeleteFile(file_key="b.png")]
    )


def test_presign_prints_url(runner, mock_provider):
    mock_provider.get_presigned_download_url.return_value = "http://signed"

    result = runner.invoke(cli, ["storage", "presign", "a.png"])

    assert result.exit_code == 0
    assert "http://signed" in result.output
    assert "86400s" in result.output


def test_download_writes_file(runner, mock_provider, tmp_path):
    mock_provider.get_as_buffer.return_value = b"contents"

    result = runner.invoke(cli, ["storage", "download", "docs/a.txt", str(tmp_path)])

    assert result.exit_code == 0
    assert (tmp_path / "a.txt").read_bytes() == b"contents"
    mock_provider.get_as_buffer.assert_awaited_once_with(ProviderGetFile(file_key="docs/a.txt"))


def test_download_missing_object(runner, mock_provider, tmp_path):
    mock_provider.get_as_buffer.side_effect = StorageFileNotFoundError(
        "Failed to get buffer: NoSuchKey"
    )

    result = runner.invoke(cli, ["storage", "download", "a.txt", str(tmp_path / "a.txt")])

    assert result.exit_code == 1
    assert not (tmp_path / "a.txt").exists()


def test_server_run_uses_settings(runner, monkeypatch):
    monkeypatch.setenv("APP_PORT", "8123")

    with patch("minio_file_service.cli.commands.server.uvicorn.run") as run:
        result = runner.invoke(cli, ["server", "run", "--host", "127.0.0.1"])

    assert result.exit_code == 0
    run.assert_called_once_with(
        "minio_file_service.app.main:app",
        host="127.0.0.1",
        port=8123,
        reload=False,
        log_config=None,
    )
