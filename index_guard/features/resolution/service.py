"""Resolution service shared by the HTTP API and the CLI."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from index_guard.core.resolution import (
    ALL_INDICES,
    RequestContext,
    RequestFacts,
    ResolutionContext,
    describe_indices,
)
from index_guard.features.resolution.rest import action_request_from_rest
from index_guard.features.resolution.schemas import ExplainResponse, ResolveResponse

if TYPE_CHECKING:
    from collections.abc import Mapping

    from index_guard.core.resolution import IndexResolutionEngine, ResolvedIndexSet

logger = logging.getLogger(__name__)


class ResolutionService:
    """Answer "which indices does this request touch" for callers outside the engine."""

    def __init__(self, engine: IndexResolutionEngine) -> None:
        self.engine = engine

    def resolve(self, action_request: Any) -> ResolveResponse:
        resolved = self.engine.resolve(ResolutionContext(action_request))
        return self._response(action_request, resolved)

    def build_context(
        self,
        method: str,
        path: str,
        body: bytes | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        remote_address: str | None = None,
    ) -> RequestContext:
        """Wrap a proxied REST call into a RequestContext."""
        action_request = action_request_from_rest(method, path, body)
        return RequestContext(
            action_request,
            self.engine,
            method=method.upper(),
            path=path,
            headers=headers,
            remote_address=remote_address,
            body=body,
        )

    def explain(self, context: RequestContext) -> ExplainResponse:
        resolved = context.indices
        logger.info(
            "Resolved request scope",
            extra={
                "action": context.action,
                "path": context.path,
                "indices": describe_indices(resolved),
            },
        )
        base = self._response(context.action_request, resolved)
        return ExplainResponse(
            **base.model_dump(),
            method=context.method,
            path=context.path,
            audit=str(context),
        )

    @staticmethod
    def _response(action_request: Any, resolved: ResolvedIndexSet) -> ResolveResponse:
        facts = RequestFacts(action_request)
        return ResolveResponse(
            action=facts.action,
            kind=facts.kind(),
            indices=sorted(resolved),
            all_indices=resolved == {ALL_INDICES},
            description=describe_indices(resolved),
        )
