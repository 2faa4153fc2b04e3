"""Index resolution feature: HTTP API over the resolution engine."""

from __future__ import annotations

from .rest import action_request_from_rest
from .schemas import ExplainResponse, ResolveRequest, ResolveResponse, SubRequestSpec
from .service import ResolutionService

__all__ = [
    "ExplainResponse",
    "ResolutionService",
    "ResolveRequest",
    "ResolveResponse",
    "SubRequestSpec",
    "action_request_from_rest",
]
