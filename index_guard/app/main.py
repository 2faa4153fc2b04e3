"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from index_guard.app.exception_handlers import configure_exception_handlers
from index_guard.app.router import setup_routers
from index_guard.core.settings import get_app_settings
from index_guard.infra.logging import setup_logging


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Settings are loaded once and cached via LRU cache.

    Returns:
        Configured FastAPI application instance.
    """
    setup_logging()
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        version=app_settings.version,
        debug=app_settings.debug,
    )

    configure_exception_handlers(app)
    setup_routers(app, app_settings)

    return app
