"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from index_guard.core.settings import get_app_settings
from index_guard.features.health.router import router as health_router
from index_guard.features.resolution.router import router as resolution_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from index_guard.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional application settings override for the API prefix.
    """
    settings = app_settings or get_app_settings()

    app.include_router(health_router)
    app.include_router(resolution_router, prefix=settings.api_prefix)

    logger.debug("Routers registered", extra={"api_prefix": settings.api_prefix})
