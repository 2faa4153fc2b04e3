"""Index resolution dependencies for FastAPI route handlers.

Usage:
    from index_guard.core.dependencies.resolution import RequestContextDep

    @router.get("/explain/{target:path}")
    async def explain(context: RequestContextDep):
        return {"indices": sorted(context.indices)}

In tests, override ``get_resolution_engine`` through
``app.dependency_overrides`` to inject an engine over a fixture catalog.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from index_guard.core.exceptions import BadRequestException, CatalogUnavailableException
from index_guard.core.resolution import IndexResolutionEngine, InMemoryCatalog, RequestContext
from index_guard.core.settings import get_resolution_settings
from index_guard.features.resolution.service import ResolutionService
from index_guard.infra.logging.context import set_log_context

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_catalog() -> InMemoryCatalog:
    """Catalog shared by every request, loaded from the configured file if any."""
    settings = get_resolution_settings()
    if settings.catalog_path is not None:
        try:
            return InMemoryCatalog.from_file(settings.catalog_path)
        except BadRequestException as exc:
            logger.error(
                "Configured catalog cannot be loaded",
                extra={"path": str(settings.catalog_path), "detail": exc.detail},
            )
            raise CatalogUnavailableException(
                detail=exc.detail, extra={"path": str(settings.catalog_path)}
            ) from exc
    logger.warning("No catalog configured, wildcard expansion will find nothing")
    return InMemoryCatalog()


@lru_cache(maxsize=1)
def get_resolution_engine() -> IndexResolutionEngine:
    """Engine configured from ResolutionSettings; capabilities are fixed at startup."""
    return IndexResolutionEngine.from_settings(get_resolution_settings(), get_catalog())


def get_resolution_service(
    engine: Annotated[IndexResolutionEngine, Depends(get_resolution_engine)],
) -> ResolutionService:
    return ResolutionService(engine)


async def get_request_context(
    request: Request,
    service: Annotated[ResolutionService, Depends(get_resolution_service)],
) -> RequestContext:
    """Build the RequestContext of a proxied call from the ``target`` path parameter."""
    body = await request.body()
    path = "/" + request.path_params.get("target", "").lstrip("/")
    context = service.build_context(
        request.method,
        path,
        body or None,
        headers=dict(request.headers),
        remote_address=request.client.host if request.client else None,
    )
    set_log_context(action=context.action, target_path=path)
    return context


ResolutionEngineDep = Annotated[IndexResolutionEngine, Depends(get_resolution_engine)]
ResolutionServiceDep = Annotated[ResolutionService, Depends(get_resolution_service)]
RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]

__all__ = [
    "RequestContextDep",
    "ResolutionEngineDep",
    "ResolutionServiceDep",
    "get_catalog",
    "get_request_context",
    "get_resolution_engine",
    "get_resolution_service",
]
