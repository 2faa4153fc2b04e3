"""FastAPI dependencies for route handlers."""

from __future__ import annotations

from index_guard.core.dependencies.resolution import (
    RequestContextDep,
    ResolutionEngineDep,
    ResolutionServiceDep,
    get_catalog,
    get_request_context,
    get_resolution_engine,
    get_resolution_service,
)

__all__ = [
    "RequestContextDep",
    "ResolutionEngineDep",
    "ResolutionServiceDep",
    "get_catalog",
    "get_request_context",
    "get_resolution_engine",
    "get_resolution_service",
]
