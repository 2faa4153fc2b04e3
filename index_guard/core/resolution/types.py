"""Shared types and constants for index resolution."""

from __future__ import annotations

from enum import Enum
from typing import TypeAlias

__all__ = [
    "ALL_INDICES",
    "SEARCH_ALIAS",
    "RequestKind",
    "ResolvedIndexSet",
]

#: Sentinel meaning "every resource"; never shares a resolved set with other names.
ALL_INDICES = "_all"

#: Historical token meaning "no specific index given".
SEARCH_ALIAS = "_search"

ResolvedIndexSet: TypeAlias = frozenset[str]


class RequestKind(str, Enum):
    """Shape of an inbound action request."""

    SINGLE = "single"
    COMPOSITE = "composite"
    UNSUPPORTED = "unsupported"
