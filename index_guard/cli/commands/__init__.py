"""CLI command modules."""

from index_guard.cli.commands import config, resolve, server

__all__ = ["config", "resolve", "server"]
