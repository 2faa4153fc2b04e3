"""CLI utilities for formatting output."""

from index_guard.cli.utils.formatters import error, header, index_list, info, success, warning

__all__ = ["error", "header", "index_list", "info", "success", "warning"]
