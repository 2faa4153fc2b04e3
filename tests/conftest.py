"""Pytest configuration and shared fixtures.

Organization:
    - Catalog Fixtures: in-memory catalogs matching the documented scenarios
    - Engine Fixtures: engines with default and overridden policies
    - Application Fixtures: FastAPI app and HTTP client
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Iterator
import os

from httpx import ASGITransport, AsyncClient
import pytest

from index_guard.core.resolution import IndexResolutionEngine, InMemoryCatalog
from index_guard.core.settings import clear_settings_cache

# Keep tests independent from local configuration files and log files
os.environ.setdefault("RESOLUTION_CONFIG_DIR", "/nonexistent-index-guard-conf")
os.environ.setdefault("APP_CONFIG_DIR", "/nonexistent-index-guard-conf")
os.environ.setdefault("LOGGING_CONFIG_DIR", "/nonexistent-index-guard-conf")
os.environ.setdefault("LOG_FILE_ENABLED", "false")


# ============================================================================
# Settings
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Clear cached settings and engine singletons around every test."""
    from index_guard.core.dependencies.resolution import get_catalog, get_resolution_engine

    clear_settings_cache()
    get_catalog.cache_clear()
    get_resolution_engine.cache_clear()
    yield
    clear_settings_cache()
    get_catalog.cache_clear()
    get_resolution_engine.cache_clear()


# ============================================================================
# Catalog Fixtures
# ============================================================================


@pytest.fixture
def logs_catalog() -> InMemoryCatalog:
    """Two log indices, one of them aliased as ``app-logs``."""
    return InMemoryCatalog({"logs-2024": ["app-logs"], "logs-2023": []})


@pytest.fixture
def scenario_catalog() -> InMemoryCatalog:
    """Catalog of the ``logs-*`` expansion scenario."""
    return InMemoryCatalog({"logs-a": [], "logs-b": [], "other": []})


# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def engine(logs_catalog: InMemoryCatalog) -> IndexResolutionEngine:
    """Engine with default settings over the logs catalog."""
    return IndexResolutionEngine(logs_catalog)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def app(logs_catalog: InMemoryCatalog):
    """FastAPI application whose engine resolves against the logs catalog."""
    from index_guard.app.main import create_app
    from index_guard.core.dependencies.resolution import get_resolution_engine

    application = create_app()
    application.dependency_overrides[get_resolution_engine] = lambda: IndexResolutionEngine(
        logs_catalog
    )
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
