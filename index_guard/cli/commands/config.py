"""Configuration management commands."""

import json

import click

from index_guard.cli.utils import header, info
from index_guard.core.settings import (
    get_app_settings,
    get_logging_settings,
    get_resolution_settings,
)


@click.group(name="config")
def config() -> None:
    """Configuration management commands."""


@config.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format",
)
def show(output_format: str) -> None:
    """Display current configuration settings."""
    info("Loading configuration...")

    config_dict: dict[str, dict[str, object]] = {
        "app": get_app_settings().model_dump(mode="json"),
        "logging": get_logging_settings().model_dump(mode="json"),
        "resolution": get_resolution_settings().model_dump(mode="json"),
    }

    if output_format == "json":
        click.echo(json.dumps(config_dict, indent=2))
        return

    for section, values in config_dict.items():
        header(section)
        for key, value in values.items():
            click.echo(f"  {key:<22} {value}")
