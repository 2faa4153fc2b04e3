"""Server commands."""

import click
import uvicorn

from index_guard.cli.utils import info
from index_guard.core.settings import get_app_settings


@click.command(name="serve")
@click.option("--host", default=None, help="Host to bind (default: from settings)")
@click.option("--port", default=None, type=int, help="Port to bind (default: from settings)")
@click.option("--reload/--no-reload", default=False, help="Enable auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Run the resolution API server."""
    settings = get_app_settings()
    host = host or settings.host
    port = port or settings.port

    info(f"Starting {settings.service_name} on {host}:{port}")
    uvicorn.run(
        "index_guard.app.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )
