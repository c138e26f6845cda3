"""Unit tests for storage exception mapping."""

from botocore.exceptions import ClientError
import pytest

from minio_file_service.core.exceptions import AppException
from minio_file_service.infra.storage.exceptions import (
    StorageError,
    StorageFileNotFoundError,
    StoragePermissionError,
    StorageTimeoutError,
    StorageUploadError,
    StorageValidationError,
    map_boto_error,
)


def _client_error(code: str) -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": f"{code} happened"},
            "ResponseMetadata": {"RequestId": "req-1"},
        },
        "GetObject",
    )


@pytest.mark.parametrize(
    ("code", "expected", "status"),
    [
        ("NoSuchKey", StorageFileNotFoundError, 404),
        ("NoSuchBucket", StorageFileNotFoundError, 404),
        ("AccessDenied", StoragePermissionError, 403),
        ("SignatureDoesNotMatch", StoragePermissionError, 403),
        ("RequestTimeout", StorageTimeoutError, 504),
        ("InvalidBucketName", StorageValidationError, 400),
    ],
)
def test_known_codes_are_mapped(code, expected, status):
    error = map_boto_error(_client_error(code), operation="get_buffer", key="a.txt")

    assert isinstance(error, expected)
    assert error.status_code == status
    assert error.extra["aws_error_code"] == code
    assert error.extra["aws_request_id"] == "req-1"
    assert error.extra["key"] == "a.txt"


def test_unknown_code_uses_default_class_and_message():
    error = map_boto_error(
        _client_error("InternalError"),
        operation="upload",
        message="Failed to upload file: boom",
        default=StorageUploadError,
    )

    assert isinstance(error, StorageUploadError)
    assert error.message == "Failed to upload file: boom"
    assert error.status_code == 500


def test_unknown_code_without_default_is_plain_storage_error():
    error = map_boto_error(_client_error("InternalError"), operation="upload")

    assert type(error) is StorageError
    assert error.message == "Upload failed: InternalError happened"


def test_storage_errors_are_app_exceptions():
    error = StorageValidationError("No filename provided")

    assert isinstance(error, AppException)
    assert error.detail == "No filename provided"
    assert error.type == "storage-validation-error"
    assert error.title == "Bad Request"
