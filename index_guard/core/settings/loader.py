"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from index_guard.core.settings.loader import get_resolution_settings

    settings = get_resolution_settings()  # First call: loads and validates
    settings = get_resolution_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the cache to force reload:
    get_resolution_settings.cache_clear()

    Or construct directly with overrides:
    settings = ResolutionSettings(pattern_policy="replace")
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .logs import LoggingSettings
from .resolution import ResolutionSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_resolution_settings() -> ResolutionSettings:
    """Get cached index resolution settings.

    Returns:
        Validated and frozen ResolutionSettings instance.
    """
    return ResolutionSettings()


def clear_settings_cache() -> None:
    """Clear every cached settings instance (used by tests and config reloads)."""
    get_app_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_resolution_settings.cache_clear()
