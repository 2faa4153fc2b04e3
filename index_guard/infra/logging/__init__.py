"""Logging infrastructure: dictConfig setup, JSONL formatter, log context."""

from __future__ import annotations

from index_guard.infra.logging.config import configure_logging, setup_logging
from index_guard.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from index_guard.infra.logging.formatters import JSONFormatter

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "clear_log_context",
    "configure_logging",
    "get_log_context",
    "set_log_context",
    "setup_logging",
]
