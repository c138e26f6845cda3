"""Logging configuration setup.

Configures the root logger once with ``logging.config.dictConfig``:

- a console handler (JSONL or plain text)
- an optional rotating JSONL file handler
- ContextInjectingFilter on every handler for request-scoped fields

Application loggers are plain ``logging.getLogger(__name__)`` loggers that
propagate to the root.
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from minio_file_service.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

_LOGGING_INITIALIZED = False

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def build_logging_config(
    settings: LoggingSettings,
    service_name: str = "minio-file-service",
) -> dict[str, Any]:
    """Build the dictConfig mapping for the given settings."""
    json_formatter = {
        "()": "minio_file_service.infra.logging.formatters.JSONFormatter",
        "static": {"service": service_name},
    }
    formatters: dict[str, Any] = {
        "json": json_formatter,
        "text": {"format": _TEXT_FORMAT},
    }
    filters = {
        "context": {"()": "minio_file_service.infra.logging.context.ContextInjectingFilter"}
    }

    handlers: dict[str, Any] = {}
    if settings.console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "json" if settings.json_format else "text",
            "filters": ["context"],
        }
    if settings.log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": settings.log_file,
            "maxBytes": settings.max_bytes,
            "backupCount": settings.backup_count,
            "encoding": "utf-8",
            "formatter": "json",
            "filters": ["context"],
        }

    loggers: dict[str, Any] = {}
    if settings.include_uvicorn:
        # Hand uvicorn records to the root handlers.
        loggers = {
            name: {"handlers": [], "propagate": True, "level": settings.level}
            for name in _UVICORN_LOGGERS
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": settings.level, "handlers": list(handlers)},
    }


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from minio_file_service.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    if settings_obj.log_file:
        Path(settings_obj.log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.captureWarnings(True)
    logging.config.dictConfig(build_logging_config(settings_obj))
    _LOGGING_INITIALIZED = True

    logger.debug(
        "Logging configured",
        extra={"level": settings_obj.level, "json_format": settings_obj.json_format},
    )
