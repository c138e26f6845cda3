"""File storage commands for the MinIO provider.

This module provides CLI commands for:
- Showing the provider configuration (secrets hidden)
- Bootstrapping the bucket and its public-read policy
- Uploading, deleting and downloading files
- Generating presigned download and upload URLs
"""

import mimetypes
from pathlib import Path
import sys

import click

from minio_file_service.cli.utils import coro, error, format_bytes, info, section, success, warning
from minio_file_service.core.settings import get_minio_settings
from minio_file_service.infra.storage import (
    MinioFileProvider,
    ProviderDeleteFile,
    ProviderGetFile,
    ProviderGetPresignedUploadUrl,
    ProviderUploadFile,
    StorageError,
)


def _build_provider() -> MinioFileProvider:
    settings = get_minio_settings()
    if not settings.is_configured:
        error("MinIO storage is not configured")
        info("Set MINIO_ENDPOINT, MINIO_ACCESS_KEY and MINIO_SECRET_KEY")
        sys.exit(1)
    try:
        return MinioFileProvider.from_settings(settings)
    except StorageError as e:
        error(e.message)
        sys.exit(1)


@click.group(name="storage")
def storage() -> None:
    """File storage commands.

    Upload, download, delete and sign URLs for files in the MinIO bucket.
    """


@storage.command(name="info")
def info_cmd() -> None:
    """Show MinIO provider configuration."""
    settings = get_minio_settings()

    section("MinIO Configuration")
    click.echo(f"\nEndpoint: {settings.endpoint or '(not set)'}")
    click.echo(f"Public Endpoint: {settings.public_endpoint or '(internal endpoint)'}")
    click.echo(f"Bucket: {settings.bucket}")
    click.echo(f"Region: {settings.region}")
    click.echo(f"Verify SSL: {settings.verify_ssl}")
    click.echo(f"\nDownload URL Expiry: {settings.download_url_expiry_seconds}s")
    click.echo(f"Upload URL Expiry: {settings.upload_url_expiry_seconds}s")
    click.echo(f"Stream Chunk Size: {format_bytes(settings.stream_chunk_size)}")

    if settings.access_key and settings.secret_key:
        success("\nCredentials: Configured")
    else:
        warning("\nCredentials: Not configured")

    if not settings.is_configured:
        warning("\nStorage is not fully configured.")
        info("Set MINIO_ENDPOINT, MINIO_ACCESS_KEY and MINIO_SECRET_KEY")
    else:
        success("\nStorage is properly configured")


@storage.command(name="init-bucket")
@coro
async def init_bucket() -> None:
    """Create the bucket if missing and apply the public-read policy."""
    provider = _build_provider()
    info(f"Initializing bucket '{provider.bucket}'...")

    try:
        async with provider:
            await provider.initialize_bucket()
    except StorageError as e:
        error(f"Bucket initialization failed: {e.message}")
        sys.exit(1)

    success(f"Bucket '{provider.bucket}' is ready")


@storage.command(name="upload")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--content-type",
    default=None,
    help="MIME type (default: guessed from the file name)",
)
@coro
async def upload(path: Path, content_type: str | None) -> None:
    """Upload a local file and print its public URL.

    Examples:
        minio-file storage upload ./shirt.jpg
        minio-file storage upload ./data.bin --content-type application/octet-stream
    """
    mime_type = content_type or mimetypes.guess_type(path.name)[0]
    content = path.read_bytes()
    provider = _build_provider()
    info(f"Uploading {path.name} ({format_bytes(len(content))})...")

    try:
        async with provider:
            result = await provider.upload(
                ProviderUploadFile(filename=path.name, mime_type=mime_type, content=content)
            )
    except StorageError as e:
        error(e.message)
        sys.exit(1)

    success(f"Uploaded as {result.key}")
    click.echo(result.url)


@storage.command(name="delete")
@click.argument("keys", nargs=-1, required=True)
@coro
async def delete(keys: tuple[str, ...]) -> None:
    """Delete one or more files by key.

    Keys that cannot be removed are logged and skipped.
    """
    provider = _build_provider()

    try:
        async with provider:
            await provider.delete([ProviderDeleteFile(file_key=key) for key in keys])
    except StorageError as e:
        error(e.message)
        sys.exit(1)

    success(f"Processed {len(keys)} key(s)")


@storage.command(name="presign")
@click.argument("key")
@coro
async def presign(key: str) -> None:
    """Print a presigned download URL for KEY."""
    provider = _build_provider()

    try:
        async with provider:
            url = await provider.get_presigned_download_url(ProviderGetFile(file_key=key))
    except StorageError as e:
        error(e.message)
        sys.exit(1)

    info(f"Expires in {provider.settings.download_url_expiry_seconds}s")
    click.echo(url)


@storage.command(name="presign-upload")
@click.argument("filename")
@coro
async def presign_upload(filename: str) -> None:
    """Print a presigned upload (PUT) URL for FILENAME."""
    provider = _build_provider()

    try:
        async with provider:
            result = await provider.get_presigned_upload_url(
                ProviderGetPresignedUploadUrl(filename=filename)
            )
    except StorageError as e:
        error(e.message)
        sys.exit(1)

    info(f"Key: {result.key} (expires in {provider.settings.upload_url_expiry_seconds}s)")
    click.echo(result.url)


@storage.command(name="download")
@click.argument("key")
@click.argument("dest", type=click.Path(path_type=Path))
@coro
async def download(key: str, dest: Path) -> None:
    """Download KEY to DEST (a file path or an existing directory)."""
    target = dest / key.rsplit("/", 1)[-1] if dest.is_dir() else dest
    provider = _build_provider()

    try:
        async with provider:
            data = await provider.get_as_buffer(ProviderGetFile(file_key=key))
    except StorageError as e:
        error(e.message)
        sys.exit(1)

    target.write_bytes(data)
    success(f"Saved {format_bytes(len(data))} to {target}")
