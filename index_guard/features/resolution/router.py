"""API router for index resolution.

Endpoints:
    POST /resolve                 - Resolve a request described as JSON
    GET|POST|PUT|DELETE /explain/{target}
                                  - Resolve a proxied REST call, e.g.
                                    GET /explain/logs-*/_search

Example Usage:
    POST /api/v1/resolve
    {"kind": "composite", "action": "indices:data/read/msearch",
     "sub_requests": [{"indices": ["idx1"]}, {"indices": ["idx2", "idx3"]}]}

    -> {"indices": ["idx1", "idx2", "idx3"], "all_indices": false, ...}
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from index_guard.core.dependencies.resolution import RequestContextDep, ResolutionServiceDep
from index_guard.features.resolution.schemas import (
    ExplainResponse,
    ResolveRequest,
    ResolveResponse,
)

router = APIRouter(tags=["resolution"])
logger = logging.getLogger(__name__)


@router.post(
    "/resolve",
    response_model=ResolveResponse,
    status_code=status.HTTP_200_OK,
    summary="Resolve the indices a request touches",
)
async def resolve_indices(
    payload: ResolveRequest,
    service: ResolutionServiceDep,
) -> ResolveResponse:
    """Resolve the index scope of a request described in the body."""
    return service.resolve(payload.to_action_request())


@router.api_route(
    "/explain/{target:path}",
    methods=["GET", "POST", "PUT", "DELETE"],
    response_model=ExplainResponse,
    summary="Resolve the indices a proxied REST call touches",
)
async def explain_request(
    target: str,
    context: RequestContextDep,
    service: ResolutionServiceDep,
) -> ExplainResponse:
    """Translate ``target`` (plus body) into an action request and resolve it."""
    return service.explain(context)
