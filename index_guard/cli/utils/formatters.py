"""Terminal output for CLI commands.

Resolution results go to stdout so that ``--format json`` output can be piped.
Status lines (loaded catalog, warnings, errors) go to stderr.
"""

from collections.abc import Iterable

import click

# level -> (symbol, color, stderr)
_STATUS_STYLES: dict[str, tuple[str, str, bool]] = {
    "success": ("✓", "green", False),
    "error": ("✗", "red", True),
    "warning": ("⚠", "yellow", True),
    "info": ("ℹ", "blue", True),
}


def _status(level: str, message: str) -> None:
    symbol, color, to_stderr = _STATUS_STYLES[level]
    click.secho(f"{symbol} {message}", fg=color, err=to_stderr)


def success(message: str) -> None:
    _status("success", message)


def error(message: str) -> None:
    _status("error", message)


def warning(message: str) -> None:
    _status("warning", message)


def info(message: str) -> None:
    _status("info", message)


def header(message: str) -> None:
    """Print a section title in bold cyan."""
    click.secho(f"\n{message}", fg="cyan", bold=True)


def index_list(names: Iterable[str], all_marker: str = "_all") -> None:
    """Print resolved names one per line, highlighting the catch-all sentinel."""
    for name in names:
        if name == all_marker:
            click.secho(f"  {name}", fg="yellow", bold=True)
        else:
            click.echo(f"  {name}")
