"""Per-request facade handed to the policy layer.

Bundles the transport metadata of one inbound request with its action
request and resolution cell, and renders the whole thing for audit logs.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from index_guard.core.resolution.engine import ResolutionContext, describe_indices
from index_guard.core.resolution.facts import RequestFacts

if TYPE_CHECKING:
    from index_guard.core.resolution.engine import IndexResolutionEngine
    from index_guard.core.resolution.types import ResolvedIndexSet

logger = logging.getLogger(__name__)

__all__ = ["CONTENT_NOT_AVAILABLE", "LOCALHOST", "RequestContext"]

LOCALHOST = "127.0.0.1"
CONTENT_NOT_AVAILABLE = "<not available>"

# Every textual form of the loopback address, IPv6 included
_LOCALHOST_RE = re.compile(r"^(127(\.\d+){1,3}|[0:]+1)$")


class RequestContext:
    """One inbound request as seen by the access-control layer.

    Example:
        >>> ctx = RequestContext(
        ...     SingleRequest("indices:data/read/search", indices=[]),
        ...     engine,
        ...     method="GET",
        ...     path="/_search",
        ...     remote_address="::1",
        ... )
        >>> ctx.remote_address
        '127.0.0.1'
        >>> ctx.indices
        frozenset({'_all'})
    """

    def __init__(
        self,
        action_request: Any,
        engine: IndexResolutionEngine,
        *,
        action: str | None = None,
        method: str = "GET",
        path: str = "/",
        headers: Mapping[str, str] | None = None,
        remote_address: str | None = None,
        body: bytes | None = None,
    ) -> None:
        self.action_request = action_request
        self.engine = engine
        self.action = action if action is not None else RequestFacts(action_request).action
        self.method = method
        self.path = path
        self.headers = dict(headers or {})
        self._remote_address = remote_address
        self._body = body
        self._content: str | None = None
        self.resolution = ResolutionContext(action_request)

    @property
    def remote_address(self) -> str | None:
        """Client address, with any loopback form reported as 127.0.0.1."""
        host = self._remote_address
        if host and _LOCALHOST_RE.search(host):
            return LOCALHOST
        return host

    @property
    def content(self) -> str:
        """Request body as text, decoded once."""
        if self._content is None:
            if self._body is None:
                self._content = CONTENT_NOT_AVAILABLE
            else:
                try:
                    self._content = self._body.decode("utf-8")
                except UnicodeDecodeError:
                    self._content = CONTENT_NOT_AVAILABLE
        return self._content

    @property
    def indices(self) -> ResolvedIndexSet:
        return self.engine.resolve(self.resolution)

    def set_indices(self, names: Iterable[str]) -> bool:
        """Re-scope the request. See IndexResolutionEngine.assign()."""
        return self.engine.assign(self.resolution, names)

    def available_indices_and_aliases(self) -> frozenset[str]:
        return self.engine.snapshot().names()

    def describe_indices(self) -> str:
        try:
            return describe_indices(self.indices)
        except Exception:
            logger.debug("Cannot render indices", exc_info=True)
            return "[<CANNOT GET INDICES>]"

    def __str__(self) -> str:
        return (
            f"{{ action: {self.action}"
            f", OA:{self.remote_address}"
            f", indices:{self.describe_indices()}"
            f", M:{self.method}"
            f", P:{self.path}"
            f", C:{self.content}"
            f", Headers:{self.headers}"
            "}"
        )
