"""Index resolution engine.

Computes the exact, deduplicated set of resource names a request touches so
that the policy layer evaluates literal names only.

Resolution steps:
    1. Collect the declared names (composite requests aggregate every
       sub-request) and deduplicate them.
    2. For search-like single requests, merge names mined from the query
       body, then add every catalog index or alias matched by the declared
       patterns. Aliases are added under their own name.
    3. Collapse empty sets and sets holding a catch-all token (``_all``,
       ``_search``) to the single sentinel ``_all``.
    4. Memoize the result on the request's ResolutionContext.

Example:
    >>> catalog = InMemoryCatalog({"logs-a": [], "logs-b": [], "other": []})
    >>> engine = IndexResolutionEngine(catalog)
    >>> context = ResolutionContext(
    ...     SingleRequest("indices:data/read/search", indices=["logs-*"])
    ... )
    >>> sorted(engine.resolve(context))
    ['logs-*', 'logs-a', 'logs-b']
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from index_guard.core.exceptions import IndexPermissionException
from index_guard.core.resolution.catalog import CatalogSnapshot, ResourceCatalog
from index_guard.core.resolution.facts import RequestFacts
from index_guard.core.resolution.matcher import GlobMatcher, MatcherFactory
from index_guard.core.resolution.payload import mine_payload_indices
from index_guard.core.resolution.requests import SingleRequest
from index_guard.core.resolution.types import (
    ALL_INDICES,
    SEARCH_ALIAS,
    RequestKind,
    ResolvedIndexSet,
)

if TYPE_CHECKING:
    from index_guard.core.settings.resolution import PatternPolicy, ResolutionSettings

logger = logging.getLogger(__name__)

__all__ = [
    "IndexResolutionEngine",
    "RequestCapabilities",
    "ResolutionContext",
    "SearchPredicate",
    "describe_indices",
    "search_actions_predicate",
]

SearchPredicate = Callable[[RequestFacts], bool]

DEFAULT_SEARCH_ACTIONS = ("indices:data/read/search",)


@dataclass(frozen=True)
class RequestCapabilities:
    """What the host lets the engine do with request index fields.

    Decided once at startup. Without ``read_indices`` resolving a single
    request raises IndexPermissionException; without ``rewrite_indices``
    assign() only updates the resolved view.
    """

    read_indices: bool = True
    rewrite_indices: bool = True


@dataclass
class ResolutionContext:
    """Result cell for one request, owned by whoever handles that request."""

    request: Any
    resolved: ResolvedIndexSet | None = None

    @property
    def is_resolved(self) -> bool:
        return self.resolved is not None


def search_actions_predicate(actions: Iterable[str]) -> SearchPredicate:
    """Build a predicate accepting single requests whose action is in ``actions``."""
    allowed = frozenset(actions)

    def is_search_like(facts: RequestFacts) -> bool:
        return facts.kind() is RequestKind.SINGLE and facts.action in allowed

    return is_search_like


def describe_indices(resolved: Iterable[str] | None) -> str:
    """Render a resolved set for audit logs, e.g. ``[logs-a logs-b]``."""
    if resolved is None:
        return "[]"
    return "[" + " ".join(sorted(resolved)) + "]"


class IndexResolutionEngine:
    """Resolve and rewrite the index scope of action requests.

    The engine holds no per-request state: results live on the
    ResolutionContext passed in. One engine may serve many requests
    concurrently as long as its catalog supports concurrent reads.
    """

    def __init__(
        self,
        catalog: ResourceCatalog | None = None,
        matcher_factory: MatcherFactory = GlobMatcher,
        *,
        is_search_like: SearchPredicate | None = None,
        catch_all_tokens: Iterable[str] = (ALL_INDICES, SEARCH_ALIAS),
        mine_payload: bool = True,
        pattern_policy: PatternPolicy = "keep",
        capabilities: RequestCapabilities | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            catalog: Source of existing indices and aliases. None behaves like
                an empty catalog.
            matcher_factory: Builds a WildcardMatcher from a set of patterns.
            is_search_like: Decides which requests get payload mining and
                wildcard expansion. Defaults to single search requests.
            catch_all_tokens: Declared names that collapse the set to ``_all``.
            mine_payload: Merge index names found in the query body.
            pattern_policy: ``keep`` leaves matched patterns in the set,
                ``replace`` drops a pattern once it matched something.
            capabilities: Host-granted access to request index fields.
        """
        if pattern_policy not in ("keep", "replace"):
            msg = f"Unknown pattern policy: {pattern_policy!r}"
            raise ValueError(msg)
        self.catalog = catalog
        self.matcher_factory = matcher_factory
        self.is_search_like = is_search_like or search_actions_predicate(DEFAULT_SEARCH_ACTIONS)
        self.catch_all_tokens = frozenset(catch_all_tokens)
        self.mine_payload = mine_payload
        self.pattern_policy = pattern_policy
        self.capabilities = capabilities or RequestCapabilities()

    @classmethod
    def from_settings(
        cls,
        settings: ResolutionSettings,
        catalog: ResourceCatalog | None = None,
        matcher_factory: MatcherFactory = GlobMatcher,
    ) -> IndexResolutionEngine:
        """Build an engine configured by ResolutionSettings."""
        return cls(
            catalog,
            matcher_factory,
            is_search_like=search_actions_predicate(settings.search_actions),
            catch_all_tokens=settings.catch_all_tokens,
            mine_payload=settings.mine_payload,
            pattern_policy=settings.pattern_policy,
            capabilities=RequestCapabilities(
                read_indices=settings.can_read_indices,
                rewrite_indices=settings.can_rewrite_indices,
            ),
        )

    def snapshot(self) -> CatalogSnapshot:
        return CatalogSnapshot.take(self.catalog)

    def resolve(self, context: ResolutionContext) -> ResolvedIndexSet:
        """Return the resolved index set of the request, computing it once.

        Raises:
            IndexPermissionException: If the host does not allow reading the
                request's index field.
        """
        if context.resolved is not None:
            return context.resolved

        facts = RequestFacts(context.request)
        kind = facts.kind()
        if kind is RequestKind.SINGLE and not self.capabilities.read_indices:
            logger.error("Can't get indices for request", extra={"action": facts.action})
            raise IndexPermissionException(
                detail="Insufficient permissions to extract the indices. Abort!",
                extra={"action": facts.action},
            )

        base = self._collect(facts)
        if kind is not RequestKind.COMPOSITE and self.is_search_like(facts):
            base = self._expand(facts, base)
        resolved = self._normalize(base)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Discovered indices: %s",
                ",".join(sorted(resolved)),
                extra={"action": facts.action, "request_kind": kind.value},
            )
        context.resolved = resolved
        return resolved

    def assign(self, context: ResolutionContext, new_indices: Iterable[str]) -> bool:
        """Re-scope a request to ``new_indices``.

        The resolved view always changes. The underlying request is updated
        only when the engine may rewrite index fields and the request has a
        writable one; callers reading the raw request otherwise still see
        the old indices.

        Returns:
            True if the underlying request was rewritten as well.
        """
        names = frozenset(new_indices)
        if ALL_INDICES in names:
            names = frozenset({ALL_INDICES})

        request = context.request
        pushed = False
        if isinstance(request, SingleRequest) and self.capabilities.rewrite_indices:
            pushed = request.set_indices(sorted(names))

        if not pushed:
            logger.warning(
                "Index rewrite applies to the resolved view only",
                extra={
                    "action": RequestFacts(request).action,
                    "request_type": type(request).__name__,
                    "rewrite_allowed": self.capabilities.rewrite_indices,
                },
            )
        context.resolved = names
        return pushed

    def _collect(self, facts: RequestFacts) -> set[str]:
        try:
            return set(facts.declared_indices())
        except IndexPermissionException:
            raise
        except Exception:
            logger.debug(
                "Failed to discover indices associated to this request",
                extra={"action": facts.action},
                exc_info=True,
            )
            return set()

    def _expand(self, facts: RequestFacts, base: set[str]) -> set[str]:
        if self.mine_payload:
            base = base | mine_payload_indices(facts.payload_bytes())
        if not base:
            return base

        universe = self.snapshot().names()
        matcher = self.matcher_factory(base)
        matches = {name for name in universe if matcher.match(name)}
        expanded = base | matches

        if self.pattern_policy == "replace":
            for pattern in base - universe:
                pattern_matcher = self.matcher_factory([pattern])
                if any(pattern_matcher.match(name) for name in matches):
                    expanded.discard(pattern)
        return expanded

    def _normalize(self, base: set[str]) -> ResolvedIndexSet:
        if not base or ALL_INDICES in base or base & self.catch_all_tokens:
            return frozenset({ALL_INDICES})
        return frozenset(base)
