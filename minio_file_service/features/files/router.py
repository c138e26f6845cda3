"""API router for the files feature."""

from __future__ import annotations

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, File, Response, UploadFile, status
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from minio_file_service.features.files.schemas import (
    BatchDeleteRequest,
    FileUploadResponse,
    PresignedUploadRequest,
    PresignedUrlResponse,
)
from minio_file_service.infra.storage import (
    ProviderDeleteFile,
    ProviderGetFile,
    ProviderGetPresignedUploadUrl,
    ProviderUploadFile,
)
from minio_file_service.infra.storage.dependencies import FileProvider

router = APIRouter(prefix="/files", tags=["files"])


@router.post(
    "",
    response_model=FileUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a file",
    description="Upload a file using multipart form data. The file is stored "
    "under a unique key and is publicly readable.",
)
async def upload_file(
    file: Annotated[UploadFile, File(...)],
    provider: FileProvider,
) -> FileUploadResponse:
    """Upload a file via multipart form data.

    Raises:
        400: No filename provided
        503: Storage not available
    """
    content = await file.read()
    result = await provider.upload(
        ProviderUploadFile(
            filename=file.filename or "",
            mime_type=file.content_type,
            content=content,
        )
    )
    return FileUploadResponse(url=result.url, key=result.key)


@router.post(
    "/presigned-upload",
    response_model=PresignedUrlResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Get a presigned upload URL",
    description="Returns a URL the client can PUT the file body to directly.",
)
async def create_presigned_upload(
    request: PresignedUploadRequest,
    provider: FileProvider,
) -> PresignedUrlResponse:
    result = await provider.get_presigned_upload_url(
        ProviderGetPresignedUploadUrl(filename=request.filename)
    )
    return PresignedUrlResponse(
        url=result.url,
        key=result.key,
        expires_in=provider.settings.upload_url_expiry_seconds,
    )


@router.post(
    "/batch-delete",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete several files",
    description="Deletes the given keys in order. Keys that cannot be removed are "
    "logged and skipped.",
)
async def batch_delete_files(
    request: BatchDeleteRequest,
    provider: FileProvider,
) -> Response:
    await provider.delete([ProviderDeleteFile(file_key=key) for key in request.file_keys])
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{key:path}/presigned-url",
    response_model=PresignedUrlResponse,
    summary="Get a presigned download URL",
)
async def get_presigned_download_url(
    key: str,
    provider: FileProvider,
) -> PresignedUrlResponse:
    url = await provider.get_presigned_download_url(ProviderGetFile(file_key=key))
    return PresignedUrlResponse(
        url=url,
        key=key,
        expires_in=provider.settings.download_url_expiry_seconds,
    )


@router.get(
    "/{key:path}/download",
    summary="Download a file",
    description="Streams the object body in chunks.",
    response_class=StreamingResponse,
)
async def download_file(
    key: str,
    provider: FileProvider,
) -> StreamingResponse:
    stream = await provider.get_download_stream(ProviderGetFile(file_key=key))

    filename = key.rsplit("/", 1)[-1]
    headers = {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}
    if stream.content_length is not None:
        headers["Content-Length"] = str(stream.content_length)

    return StreamingResponse(
        stream,
        media_type=stream.content_type or "application/octet-stream",
        headers=headers,
        background=BackgroundTask(stream.aclose),
    )


@router.delete(
    "/{key:path}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a file",
)
async def delete_file(
    key: str,
    provider: FileProvider,
) -> Response:
    await provider.delete(ProviderDeleteFile(file_key=key))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
