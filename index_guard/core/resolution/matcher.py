"""Glob-style matching of resource names.

Only ``*`` is special: it matches any run of characters, including none.
Every other character, ``?`` and ``.`` included, is literal.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from functools import lru_cache
from typing import Protocol, TypeAlias

__all__ = ["GlobMatcher", "MatcherFactory", "WildcardMatcher", "has_wildcard"]


class WildcardMatcher(Protocol):
    """Decides whether a candidate name matches any pattern it was built from."""

    def match(self, candidate: str) -> bool: ...


MatcherFactory: TypeAlias = Callable[[Iterable[str]], WildcardMatcher]


def has_wildcard(pattern: str) -> bool:
    return "*" in pattern


@lru_cache(maxsize=2048)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile one glob pattern to an anchored regex.

    Cached so that patterns shared across requests compile once.
    """
    regex = re.escape(pattern).replace("\\*", ".*")
    return re.compile(f"^{regex}$", re.DOTALL)


class GlobMatcher:
    """Immutable matcher over a set of glob patterns.

    Example:
        >>> matcher = GlobMatcher(["logs-*", "metrics"])
        >>> matcher.match("logs-2024")
        True
        >>> matcher.match("metrics-2024")
        False
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        unique = frozenset(patterns)
        self._literals = frozenset(p for p in unique if not has_wildcard(p))
        self._compiled = tuple(_compile_pattern(p) for p in unique if has_wildcard(p))

    def match(self, candidate: str) -> bool:
        if candidate in self._literals:
            return True
        return any(pattern.match(candidate) for pattern in self._compiled)
