"""Structured logging: dictConfig setup, JSONL formatter and log context."""

from __future__ import annotations

from .config import build_logging_config, setup_logging
from .context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from .formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "build_logging_config",
    "clear_log_context",
    "get_log_context",
    "set_log_context",
    "setup_logging",
]
