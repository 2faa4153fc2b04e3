"""Main CLI entry point for index-guard commands."""

import click

from index_guard.cli.commands import config, resolve, server
from index_guard.infra.logging import setup_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="index-guard")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Index Guard CLI - inspect which indices a search request touches.

    \b
    Commands:
      resolve    Resolve a request described in a JSON file
      explain    Resolve a REST call such as GET /logs-*/_search
      config     Configuration management
      serve      Run the resolution API server

    \b
    Quick Start:
      index-guard explain GET /logs-*/_search --catalog catalog.json
      index-guard resolve --request request.json --catalog catalog.json --format json
    """
    ctx.ensure_object(dict)


cli.add_command(resolve.resolve)
cli.add_command(resolve.explain)
cli.add_command(config.config)
cli.add_command(server.serve)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
