"""Storage-specific exceptions for MinIO operations.

This module defines the exceptions raised by the file provider, providing
structured error handling with HTTP status codes and metadata following
RFC 7807 Problem Details for HTTP APIs.

Two families matter to callers:

- ``StorageValidationError`` for requests the provider rejects before
  talking to the object store (missing filename, missing file key, bad options).
- Operation errors (``StorageUploadError``, ``StorageDownloadError``,
  ``StoragePresignError``) wrapping whatever the client raised, with the
  message ``"Failed to <operation>: <reason>"``.

Example:
    ```python
    from minio_file_service.infra.storage.exceptions import (
        StorageUploadError,
        map_boto_error,
    )

    try:
        await s3.put_object(Bucket=bucket, Key=key, Body=content)
    except ClientError as e:
        raise map_boto_error(
            e,
            operation="upload",
            key=key,
            message=f"Failed to upload file: {e}",
            default=StorageUploadError,
        ) from e
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from minio_file_service.core.exceptions import AppException

if TYPE_CHECKING:
    from botocore.exceptions import ClientError


class StorageError(AppException):
    """Base exception for all storage-related errors.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        code: Error code identifier for programmatic error handling.
        type: Error type identifier (used in RFC 7807 problem details).
        extra: Additional context-specific information about the error (metadata).

    Example:
        ```python
        raise StorageError(
            message="Failed to connect to storage backend",
            code="STORAGE_CONNECTION_ERROR",
            status_code=503,
            metadata={"endpoint": "minio:9000"}
        )
        ```
    """

    def __init__(
        self,
        message: str,
        code: str = "STORAGE_ERROR",
        status_code: int = 500,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error.

        Args:
            message: Human-readable error message.
            code: Error code for programmatic handling.
            status_code: HTTP status code (default: 500).
            metadata: Additional error context.
        """
        self.code = code
        self.message = message
        super().__init__(
            status_code=status_code,
            detail=message,
            type=code.lower().replace("_", "-"),
            extra=metadata or {},
        )


class StorageNotConfiguredError(StorageError):
    """Raised when the provider is used before it is configured and started."""

    def __init__(
        self,
        message: str = "Storage is not configured or enabled",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_NOT_CONFIGURED",
            status_code=503,
            metadata=metadata,
        )


class StorageValidationError(StorageError):
    """Exception raised when provider input or options fail validation.

    Example:
        ```python
        raise StorageValidationError(
            "No filename provided",
            metadata={"operation": "upload"}
        )
        ```
    """

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error.

        Args:
            message: Human-readable error message.
            metadata: Additional error context (operation, field, etc.).
        """
        super().__init__(
            message=message,
            code="STORAGE_VALIDATION_ERROR",
            status_code=400,
            metadata=metadata,
        )


class StorageFileNotFoundError(StorageError):
    """Exception raised when a requested object or bucket does not exist."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_NOT_FOUND",
            status_code=404,
            metadata=metadata,
        )


class StoragePermissionError(StorageError):
    """Exception raised when credentials are rejected or access is denied."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_PERMISSION_DENIED",
            status_code=403,
            metadata=metadata,
        )


class StorageTimeoutError(StorageError):
    """Exception raised when the object store does not answer in time."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_TIMEOUT",
            status_code=504,
            metadata=metadata,
        )


class StorageUploadError(StorageError):
    """Exception raised when file upload operations fail.

    Example:
        ```python
        raise StorageUploadError(
            "Failed to upload file: connection reset",
            metadata={"bucket": bucket, "key": key}
        )
        ```
    """

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            metadata=metadata,
        )


class StorageDownloadError(StorageError):
    """Exception raised when reading an object as a buffer or stream fails."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_DOWNLOAD_ERROR",
            status_code=500,
            metadata=metadata,
        )


class StoragePresignError(StorageError):
    """Exception raised when a presigned URL cannot be generated."""

    def __init__(
        self,
        message: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code="STORAGE_PRESIGN_ERROR",
            status_code=500,
            metadata=metadata,
        )


_NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchBucket", "NotFound", "404"})
_PERMISSION_CODES = frozenset(
    {
        "AccessDenied",
        "ExpiredToken",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "InvalidToken",
    }
)
_TIMEOUT_CODES = frozenset({"RequestTimeout", "RequestTimeTooSkewed", "SlowDown"})
_VALIDATION_CODES = frozenset(
    {
        "InvalidRequest",
        "InvalidArgument",
        "InvalidBucketName",
        "KeyTooLongError",
        "MetadataTooLarge",
    }
)


def client_error_code(error: ClientError) -> str:
    """Return the S3 error code carried by a botocore ClientError."""
    return str(error.response.get("Error", {}).get("Code", "Unknown"))


def map_boto_error(
    error: ClientError,
    operation: str,
    key: str | None = None,
    message: str | None = None,
    default: type[StorageError] | None = None,
) -> StorageError:
    """Map a botocore ClientError to a domain-specific StorageError.

    Args:
        error: The botocore ClientError to map.
        operation: The provider operation being performed (e.g., "upload").
        key: Optional object key being operated on.
        message: Message for the resulting exception. Defaults to
            ``"<Operation> failed: <aws message>"``.
        default: Exception class used when the error code has no
            specific mapping. Defaults to plain ``StorageError``.

    Returns:
        StorageError: Appropriate domain-specific storage exception.

    Error Code Mappings:
        - NoSuchKey, NoSuchBucket, 404 -> StorageFileNotFoundError (404)
        - AccessDenied, InvalidAccessKeyId, ... -> StoragePermissionError (403)
        - RequestTimeout, SlowDown, ... -> StorageTimeoutError (504)
        - InvalidArgument, InvalidBucketName, ... -> StorageValidationError (400)
        - Others -> ``default`` (500)
    """
    error_code = client_error_code(error)
    error_message = error.response.get("Error", {}).get("Message", str(error))

    metadata: dict[str, Any] = {
        "operation": operation,
        "aws_error_code": error_code,
        "aws_error_message": error_message,
        "aws_request_id": error.response.get("ResponseMetadata", {}).get("RequestId"),
    }
    if key:
        metadata["key"] = key

    message = message or f"{operation.capitalize()} failed: {error_message}"

    if error_code in _NOT_FOUND_CODES:
        return StorageFileNotFoundError(message=message, metadata=metadata)
    if error_code in _PERMISSION_CODES:
        return StoragePermissionError(message=message, metadata=metadata)
    if error_code in _TIMEOUT_CODES:
        return StorageTimeoutError(message=message, metadata=metadata)
    if error_code in _VALIDATION_CODES:
        return StorageValidationError(message=message, metadata=metadata)

    if default is None:
        return StorageError(message=message, metadata=metadata)
    return default(message=message, metadata=metadata)
