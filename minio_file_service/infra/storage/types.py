"""Data transfer objects exchanged with the file provider."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderUploadFile:
    """A file to upload.

    Attributes:
        filename: Original filename; its stem and extension shape the object key.
        mime_type: MIME type stored as the object's Content-Type.
        content: Raw bytes, or a binary string where each character is one byte.
    """

    filename: str
    mime_type: str | None
    content: bytes | str


@dataclass(frozen=True)
class ProviderDeleteFile:
    """Reference to an object to delete."""

    file_key: str


@dataclass(frozen=True)
class ProviderGetFile:
    """Reference to an object to read or sign a download URL for."""

    file_key: str


@dataclass(frozen=True)
class ProviderGetPresignedUploadUrl:
    """Request for a presigned upload URL; the filename becomes the object key."""

    filename: str


@dataclass(frozen=True)
class ProviderFileResult:
    """Location of a stored (or to-be-stored) object.

    Attributes:
        url: Public URL or presigned URL for the object.
        key: Object key within the bucket.
    """

    url: str
    key: str
