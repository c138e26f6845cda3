"""Unit tests for application exceptions."""

import pytest

from minio_file_service.core.exceptions import AppException, ServiceUnavailableException


@pytest.mark.unit
class TestAppException:
    def test_default_title_from_status(self):
        exc = AppException(status_code=504, detail="MinIO did not answer")

        assert exc.title == "Gateway Timeout"
        assert exc.type == "about:blank"
        assert exc.extra == {}
        assert str(exc) == "MinIO did not answer"

    def test_unknown_status_title(self):
        assert AppException(status_code=418, detail="x").title == "Error"

    def test_service_unavailable(self):
        exc = ServiceUnavailableException(
            detail="File storage is not configured",
            type="storage-not-configured",
            extra={"bucket": "medusa-media"},
        )

        assert exc.status_code == 503
        assert exc.title == "Service Unavailable"
        assert exc.type == "storage-not-configured"
        assert exc.extra == {"bucket": "medusa-media"}
