"""Tests for glob matching of resource names."""

from __future__ import annotations

import pytest

from index_guard.core.resolution import GlobMatcher
from index_guard.core.resolution.matcher import has_wildcard


@pytest.mark.parametrize(
    ("patterns", "candidate", "expected"),
    [
        (["logs-*"], "logs-2024", True),
        (["logs-*"], "logs-", True),
        (["logs-*"], "app-logs", False),
        (["*"], "anything", True),
        (["*-2024"], "logs-2024", True),
        (["l*s-2*"], "logs-2023", True),
        (["metrics"], "metrics", True),
        (["metrics"], "metrics-2024", False),
        (["logs.?"], "logs.?", True),
        (["logs.?"], "logsab", False),
        ([], "logs", False),
        (["a", "b*"], "bee", True),
    ],
)
def test_glob_matcher(patterns, candidate, expected) -> None:
    assert GlobMatcher(patterns).match(candidate) is expected


def test_has_wildcard() -> None:
    assert has_wildcard("logs-*")
    assert not has_wildcard("logs-2024")
