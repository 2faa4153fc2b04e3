"""Action request variants understood by the resolution engine.

The transport layer translates whatever it receives into one of three
variants. Each variant states its own kind, so the engine never has to
probe an object to find out whether it carries indices.

    >>> search = SingleRequest("indices:data/read/search", indices=["logs-*"])
    >>> multi = CompositeRequest(
    ...     "indices:data/read/msearch",
    ...     sub_requests=[SingleRequest("indices:data/read/search", indices=["a"])],
    ... )
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import ClassVar

from index_guard.core.resolution.types import RequestKind

__all__ = [
    "ActionRequest",
    "CompositeRequest",
    "PayloadSource",
    "SingleRequest",
    "UnsupportedRequest",
]

#: Raw body, text body, or a reader invoked lazily (it may fail).
PayloadSource = bytes | str | Callable[[], bytes | None] | None


@dataclass
class ActionRequest:
    """Base for every request variant."""

    kind: ClassVar[RequestKind] = RequestKind.UNSUPPORTED

    action: str
    payload: PayloadSource = field(default=None, repr=False)


@dataclass
class SingleRequest(ActionRequest):
    """A request exposing one indices accessor.

    Attributes:
        indices: Declared index names, or None when the accessor does not
            apply to this request (for example a scroll continuation).
        writable: Whether the index field may be overwritten to re-scope
            the request before it executes.
    """

    kind: ClassVar[RequestKind] = RequestKind.SINGLE

    indices: list[str] | None = None
    writable: bool = True

    def set_indices(self, names: list[str]) -> bool:
        """Overwrite the index field. Returns False if the field is read-only."""
        if not self.writable:
            return False
        self.indices = list(names)
        return True


@dataclass
class CompositeRequest(ActionRequest):
    """A request made of independent sub-requests, each with its own indices."""

    kind: ClassVar[RequestKind] = RequestKind.COMPOSITE

    sub_requests: list[SingleRequest] = field(default_factory=list)


@dataclass
class UnsupportedRequest(ActionRequest):
    """A request without index information (cluster-level operations and the like)."""

    description: str = ""
