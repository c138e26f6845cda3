"""Request and response schemas for the files API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class FileUploadResponse(BaseModel):
    """Location of an uploaded file."""

    url: str = Field(..., description="Public URL of the stored object")
    key: str = Field(..., description="Object key within the bucket")


class PresignedUploadRequest(BaseModel):
    """Request for presigned upload URL."""

    filename: str = Field(
        ...,
        min_length=1,
        max_length=1024,
        description="Object key to upload to (used verbatim)",
    )


class PresignedUrlResponse(BaseModel):
    """A presigned URL and how long it stays valid."""

    url: str = Field(..., description="Presigned URL")
    key: str = Field(..., description="Object key the URL grants access to")
    expires_in: int = Field(..., description="Seconds until the URL expires")


class BatchDeleteRequest(BaseModel):
    """Request for batch file deletion."""

    file_keys: list[str] = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Object keys to delete, processed in order (max 1000)",
    )
