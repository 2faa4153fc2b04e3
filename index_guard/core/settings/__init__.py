"""Modular Pydantic Settings v2 configuration.

Each domain has its own frozen settings model and LRU-cached loader:
    from index_guard.core.settings import get_resolution_settings

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. YAML/conf.d files (optional, local/dev)
    3. Environment variables (production)
    4. .env file (development only)
    5. secrets_dir (Kubernetes/Docker secrets)
"""

from __future__ import annotations

from .app import AppSettings
from .loader import (
    clear_settings_cache,
    get_app_settings,
    get_logging_settings,
    get_resolution_settings,
)
from .logs import LoggingSettings
from .resolution import PatternPolicy, ResolutionSettings

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "PatternPolicy",
    "ResolutionSettings",
    "clear_settings_cache",
    "get_app_settings",
    "get_logging_settings",
    "get_resolution_settings",
]
