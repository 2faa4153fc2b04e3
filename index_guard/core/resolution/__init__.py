"""Index resolution: which indices and aliases does a request touch.

Components:
    Request model:
        - SingleRequest / CompositeRequest / UnsupportedRequest: request variants
        - RequestFacts: normalized read-only view over a request

    Collaborators:
        - ResourceCatalog / InMemoryCatalog / CatalogSnapshot: live index metadata
        - WildcardMatcher / GlobMatcher: pattern matching over resource names

    Engine:
        - IndexResolutionEngine: resolve() and assign()
        - ResolutionContext: per-request result cell
        - mine_payload_indices: index names embedded in query bodies
        - RequestContext: transport metadata plus audit rendering

Usage:
    >>> from index_guard.core.resolution import (
    ...     IndexResolutionEngine, InMemoryCatalog, ResolutionContext, SingleRequest,
    ... )
    >>> engine = IndexResolutionEngine(InMemoryCatalog({"logs-2024": ["app-logs"]}))
    >>> engine.resolve(ResolutionContext(SingleRequest("indices:data/read/search", indices=[])))
    frozenset({'_all'})
"""

from __future__ import annotations

from index_guard.core.resolution.catalog import (
    CatalogSnapshot,
    InMemoryCatalog,
    ResourceCatalog,
)
from index_guard.core.resolution.context import RequestContext
from index_guard.core.resolution.engine import (
    IndexResolutionEngine,
    RequestCapabilities,
    ResolutionContext,
    describe_indices,
    search_actions_predicate,
)
from index_guard.core.resolution.facts import RequestFacts
from index_guard.core.resolution.matcher import GlobMatcher, MatcherFactory, WildcardMatcher
from index_guard.core.resolution.payload import mine_payload_indices
from index_guard.core.resolution.requests import (
    ActionRequest,
    CompositeRequest,
    SingleRequest,
    UnsupportedRequest,
)
from index_guard.core.resolution.types import (
    ALL_INDICES,
    SEARCH_ALIAS,
    RequestKind,
    ResolvedIndexSet,
)

__all__ = [
    "ALL_INDICES",
    "SEARCH_ALIAS",
    "ActionRequest",
    "CatalogSnapshot",
    "CompositeRequest",
    "GlobMatcher",
    "InMemoryCatalog",
    "IndexResolutionEngine",
    "MatcherFactory",
    "RequestCapabilities",
    "RequestContext",
    "RequestFacts",
    "RequestKind",
    "ResolutionContext",
    "ResolvedIndexSet",
    "ResourceCatalog",
    "SingleRequest",
    "UnsupportedRequest",
    "WildcardMatcher",
    "describe_indices",
    "mine_payload_indices",
    "search_actions_predicate",
]
