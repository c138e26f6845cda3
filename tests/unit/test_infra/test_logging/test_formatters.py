"""Tests for the JSONL formatter, log context and dictConfig builder."""

import json
import logging
import sys

from minio_file_service.core.settings.logs import LoggingSettings
from minio_file_service.infra.logging import (
    ContextInjectingFilter,
    JSONFormatter,
    build_logging_config,
    clear_log_context,
    get_log_context,
    set_log_context,
)


def _record(msg: str = "Deleted file %s", *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="minio_file_service.infra.storage.provider",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args or ("a.png",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_single_line_json_with_extras(self):
        formatter = JSONFormatter(static={"service": "minio-file-service"})

        output = formatter.format(_record(bucket="medusa-media"))

        assert "\n" not in output
        data = json.loads(output)
        assert data["level"] == "INFO"
        assert data["message"] == "Deleted file a.png"
        assert data["bucket"] == "medusa-media"
        assert data["service"] == "minio-file-service"
        assert data["timestamp"].endswith("Z")
        assert "trace_id" not in data

    def test_exception_is_included(self):
        formatter = JSONFormatter()
        try:
            raise ValueError("bad policy")
        except ValueError:
            record = logging.LogRecord(
                "x", logging.ERROR, __file__, 1, "failed", None, exc_info=sys.exc_info()
            )

        data = json.loads(formatter.format(record))

        assert "ValueError: bad policy" in data["exception"]


class TestLogContext:
    def test_filter_injects_context_without_overwriting(self):
        set_log_context(request_id="req-1", bucket="from-context")
        record = _record(bucket="explicit")

        assert ContextInjectingFilter().filter(record) is True
        assert record.request_id == "req-1"
        assert record.bucket == "explicit"

    def test_clear(self):
        set_log_context(request_id="req-1")
        clear_log_context()

        assert get_log_context() == {}


class TestBuildLoggingConfig:
    def test_text_console_only(self):
        config = build_logging_config(LoggingSettings(json_format=False, log_file=None))

        assert config["root"]["handlers"] == ["console"]
        assert config["handlers"]["console"]["formatter"] == "text"

    def test_file_handler_is_rotating_json(self, tmp_path):
        log_file = str(tmp_path / "service.log")
        config = build_logging_config(
            LoggingSettings(log_file=log_file, console_enabled=False, backup_count=2)
        )

        assert config["root"]["handlers"] == ["file"]
        handler = config["handlers"]["file"]
        assert handler["class"] == "logging.handlers.RotatingFileHandler"
        assert handler["filename"] == log_file
        assert handler["backupCount"] == 2
        assert handler["formatter"] == "json"
