"""Liveness endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from index_guard.core.dependencies.resolution import ResolutionEngineDep

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness probe")
async def health(engine: ResolutionEngineDep) -> dict[str, object]:
    """Report liveness and the size of the loaded catalog."""
    return {"status": "ok", "catalog_names": len(engine.snapshot().names())}
