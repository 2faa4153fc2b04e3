"""Unit tests for IndexResolutionEngine."""

from __future__ import annotations

import logging

import pytest

from index_guard.core.exceptions import IndexPermissionException
from index_guard.core.resolution import (
    ALL_INDICES,
    CompositeRequest,
    GlobMatcher,
    IndexResolutionEngine,
    InMemoryCatalog,
    RequestCapabilities,
    ResolutionContext,
    SingleRequest,
    UnsupportedRequest,
    describe_indices,
    search_actions_predicate,
)
from index_guard.core.settings import ResolutionSettings

SEARCH = "indices:data/read/search"
GET = "indices:data/read/get"


def search(*indices: str, payload: bytes | None = None) -> SingleRequest:
    return SingleRequest(SEARCH, payload=payload, indices=list(indices))


def resolve(engine: IndexResolutionEngine, request) -> frozenset[str]:
    return engine.resolve(ResolutionContext(request))


@pytest.mark.unit
class TestResolveBasics:
    """Declared names, deduplication and the _all sentinel."""

    def test_empty_single_request_resolves_to_all(self, engine: IndexResolutionEngine) -> None:
        assert resolve(engine, search()) == {ALL_INDICES}

    def test_single_request_without_payload_or_indices_resolves_to_all(
        self, engine: IndexResolutionEngine
    ) -> None:
        assert resolve(engine, SingleRequest(GET, indices=None)) == {ALL_INDICES}

    def test_non_search_request_keeps_declared_names(self, engine: IndexResolutionEngine) -> None:
        assert resolve(engine, SingleRequest(GET, indices=["a", "a", "b"])) == {"a", "b"}

    def test_duplicates_are_removed(self) -> None:
        engine = IndexResolutionEngine(InMemoryCatalog())
        assert resolve(engine, search("a", "a", "b")) == {"a", "b"}

    @pytest.mark.parametrize("token", ["_all", "_search"])
    def test_catch_all_token_collapses_set(self, engine: IndexResolutionEngine, token: str) -> None:
        assert resolve(engine, search("myindex", token)) == {ALL_INDICES}

    def test_catch_all_token_on_non_search_request(self, engine: IndexResolutionEngine) -> None:
        assert resolve(engine, SingleRequest(GET, indices=["myindex", "_all"])) == {ALL_INDICES}

    def test_sentinel_is_exclusive(self, engine: IndexResolutionEngine) -> None:
        requests = [
            search(),
            search("logs-*"),
            search("_all", "logs-2024"),
            SingleRequest(GET, indices=["x", "_search"]),
            UnsupportedRequest("cluster:monitor/health"),
        ]
        for request in requests:
            resolved = resolve(engine, request)
            if ALL_INDICES in resolved:
                assert len(resolved) == 1

    def test_sentinel_is_exclusive_with_custom_tokens(self) -> None:
        engine = IndexResolutionEngine(catch_all_tokens=["*"])
        assert resolve(engine, SingleRequest(GET, indices=["_all", "x"])) == {ALL_INDICES}
        assert resolve(engine, SingleRequest(GET, indices=["_search", "x"])) == {"_search", "x"}

    def test_unsupported_request_resolves_to_all(self, engine: IndexResolutionEngine) -> None:
        assert resolve(engine, UnsupportedRequest("cluster:monitor/health")) == {ALL_INDICES}

    def test_foreign_object_resolves_to_all(self, engine: IndexResolutionEngine) -> None:
        assert resolve(engine, object()) == {ALL_INDICES}


@pytest.mark.unit
class TestMemoization:
    """Results are computed once per ResolutionContext."""

    def test_resolve_is_idempotent(self, engine: IndexResolutionEngine) -> None:
        context = ResolutionContext(search("logs-*"))

        first = engine.resolve(context)
        second = engine.resolve(context)

        assert first is second
        assert context.is_resolved

    def test_memoized_value_ignores_later_catalog_changes(
        self, logs_catalog: InMemoryCatalog
    ) -> None:
        engine = IndexResolutionEngine(logs_catalog)
        context = ResolutionContext(search("logs-*"))
        first = engine.resolve(context)

        logs_catalog.put_index("logs-2025")

        assert engine.resolve(context) == first
        assert "logs-2025" in resolve(engine, search("logs-*"))

    def test_separate_contexts_resolve_independently(self, engine: IndexResolutionEngine) -> None:
        request = search("logs-2023")
        assert engine.resolve(ResolutionContext(request)) is not engine.resolve(
            ResolutionContext(request)
        )


@pytest.mark.unit
class TestCompositeRequests:
    """Composite requests aggregate every sub-request."""

    def test_sub_requests_are_aggregated(self, engine: IndexResolutionEngine) -> None:
        request = CompositeRequest(
            "indices:data/read/msearch",
            sub_requests=[search("a"), search("b", "c"), search()],
        )
        assert resolve(engine, request) == {"a", "b", "c"}

    def test_scenario_two_sub_requests(self, engine: IndexResolutionEngine) -> None:
        request = CompositeRequest(
            "indices:data/read/msearch",
            sub_requests=[search("idx1"), search("idx2", "idx3")],
        )
        assert resolve(engine, request) == {"idx1", "idx2", "idx3"}

    def test_composite_never_expands_wildcards(self, engine: IndexResolutionEngine) -> None:
        request = CompositeRequest("indices:data/read/msearch", sub_requests=[search("logs-*")])
        assert resolve(engine, request) == {"logs-*"}

    def test_composite_without_names_resolves_to_all(self, engine: IndexResolutionEngine) -> None:
        request = CompositeRequest("indices:data/read/msearch", sub_requests=[search(), search()])
        assert resolve(engine, request) == {ALL_INDICES}


@pytest.mark.unit
class TestWildcardExpansion:
    """Declared patterns are expanded against the catalog for search-like requests."""

    def test_pattern_expands_to_indices_not_unmatched_alias(
        self, engine: IndexResolutionEngine
    ) -> None:
        resolved = resolve(engine, search("logs-*"))

        assert {"logs-2024", "logs-2023"} <= resolved
        assert "app-logs" not in resolved

    def test_alias_passes_through_under_its_own_name(self, engine: IndexResolutionEngine) -> None:
        resolved = resolve(engine, search("app-*"))

        assert "app-logs" in resolved
        assert "logs-2024" not in resolved

    def test_scenario_keep_policy(self, scenario_catalog: InMemoryCatalog) -> None:
        engine = IndexResolutionEngine(scenario_catalog)
        assert resolve(engine, search("logs-*")) == {"logs-*", "logs-a", "logs-b"}

    def test_scenario_replace_policy(self, scenario_catalog: InMemoryCatalog) -> None:
        engine = IndexResolutionEngine(scenario_catalog, pattern_policy="replace")
        assert resolve(engine, search("logs-*")) == {"logs-a", "logs-b"}

    def test_replace_policy_keeps_unmatched_pattern(self, scenario_catalog: InMemoryCatalog) -> None:
        engine = IndexResolutionEngine(scenario_catalog, pattern_policy="replace")
        assert resolve(engine, search("metrics-*")) == {"metrics-*"}

    def test_replace_policy_keeps_literal_names(self, scenario_catalog: InMemoryCatalog) -> None:
        engine = IndexResolutionEngine(scenario_catalog, pattern_policy="replace")
        assert resolve(engine, search("other", "logs-*")) == {"other", "logs-a", "logs-b"}

    def test_non_search_request_is_not_expanded(self, engine: IndexResolutionEngine) -> None:
        assert resolve(engine, SingleRequest(GET, indices=["logs-*"])) == {"logs-*"}

    def test_empty_catalog_adds_nothing(self) -> None:
        engine = IndexResolutionEngine(InMemoryCatalog())
        assert resolve(engine, search("logs-*")) == {"logs-*"}

    def test_missing_catalog_adds_nothing(self) -> None:
        engine = IndexResolutionEngine(None)
        assert resolve(engine, search("logs-*")) == {"logs-*"}

    def test_failing_catalog_degrades_to_empty_snapshot(self) -> None:
        class BrokenCatalog:
            def list_indices(self):
                raise ConnectionError("cluster state unavailable")

        engine = IndexResolutionEngine(BrokenCatalog())
        assert resolve(engine, search("logs-*")) == {"logs-*"}

    def test_custom_search_predicate(self, engine: IndexResolutionEngine) -> None:
        count_engine = IndexResolutionEngine(
            engine.catalog,
            is_search_like=search_actions_predicate(["indices:data/read/count"]),
        )
        count = SingleRequest("indices:data/read/count", indices=["logs-*"])

        assert "logs-2024" in resolve(count_engine, count)
        assert resolve(count_engine, search("logs-*")) == {"logs-*"}

    def test_custom_matcher_factory_is_used(self, logs_catalog: InMemoryCatalog) -> None:
        built: list[frozenset[str]] = []

        def factory(patterns):
            patterns = frozenset(patterns)
            built.append(patterns)
            return GlobMatcher(patterns)

        engine = IndexResolutionEngine(logs_catalog, factory)
        resolve(engine, search("logs-2023"))

        assert built == [frozenset({"logs-2023"})]


@pytest.mark.unit
class TestPayloadMining:
    """Index names embedded in the query body of search requests."""

    def test_mined_names_are_merged(self, engine: IndexResolutionEngine) -> None:
        request = search("a", payload=b'{"indices": {"indices": ["x", "y"]}}')
        assert resolve(engine, request) == {"a", "x", "y"}

    def test_mined_pattern_is_expanded(self, engine: IndexResolutionEngine) -> None:
        request = search(payload=b'{"indices": {"index": "logs-*"}}')
        assert {"logs-2024", "logs-2023"} <= resolve(engine, request)

    def test_malformed_payload_is_ignored(self, engine: IndexResolutionEngine) -> None:
        assert resolve(engine, search("a", payload=b"{not json")) == {"a"}

    def test_mining_can_be_disabled(self, logs_catalog: InMemoryCatalog) -> None:
        engine = IndexResolutionEngine(logs_catalog, mine_payload=False)
        request = search("a", payload=b'{"indices": {"index": "x"}}')
        assert resolve(engine, request) == {"a"}

    def test_unreadable_payload_is_ignored(self, engine: IndexResolutionEngine) -> None:
        def reader() -> bytes:
            raise OSError("connection reset")

        request = SingleRequest(SEARCH, payload=reader, indices=["a"])
        assert resolve(engine, request) == {"a"}


@pytest.mark.unit
class TestPermissions:
    """Capability checks replace security-manager interception."""

    def test_missing_read_capability_raises(self, logs_catalog: InMemoryCatalog) -> None:
        engine = IndexResolutionEngine(
            logs_catalog, capabilities=RequestCapabilities(read_indices=False)
        )

        with pytest.raises(IndexPermissionException) as exc_info:
            resolve(engine, search("logs-*"))

        assert exc_info.value.type == "index-permission-denied"
        assert exc_info.value.extra["action"] == SEARCH

    def test_missing_read_capability_leaves_context_unresolved(self) -> None:
        engine = IndexResolutionEngine(capabilities=RequestCapabilities(read_indices=False))
        context = ResolutionContext(search("a"))

        with pytest.raises(IndexPermissionException):
            engine.resolve(context)

        assert not context.is_resolved

    def test_permission_error_from_payload_reader_propagates(
        self, engine: IndexResolutionEngine
    ) -> None:
        def reader() -> bytes:
            raise IndexPermissionException()

        with pytest.raises(IndexPermissionException):
            resolve(engine, SingleRequest(SEARCH, payload=reader, indices=["a"]))

    def test_composite_needs_no_read_capability(self) -> None:
        engine = IndexResolutionEngine(capabilities=RequestCapabilities(read_indices=False))
        request = CompositeRequest("indices:data/read/msearch", sub_requests=[search("a")])
        assert resolve(engine, request) == {"a"}


@pytest.mark.unit
class TestAssign:
    """Rewriting the scope of a request."""

    def test_assign_updates_view_and_request(self, engine: IndexResolutionEngine) -> None:
        request = search("logs-*")
        context = ResolutionContext(request)
        engine.resolve(context)

        pushed = engine.assign(context, {"logs-2024"})

        assert pushed is True
        assert engine.resolve(context) == {"logs-2024"}
        assert request.indices == ["logs-2024"]

    def test_assign_before_resolve_wins(self, engine: IndexResolutionEngine) -> None:
        context = ResolutionContext(search())
        engine.assign(context, ["a", "b"])
        assert engine.resolve(context) == {"a", "b"}

    def test_assign_read_only_request_updates_view_only(
        self, engine: IndexResolutionEngine, caplog: pytest.LogCaptureFixture
    ) -> None:
        request = SingleRequest(SEARCH, indices=["logs-*"], writable=False)
        context = ResolutionContext(request)

        with caplog.at_level(logging.WARNING, logger="index_guard.core.resolution.engine"):
            pushed = engine.assign(context, ["logs-2023"])

        assert pushed is False
        assert context.resolved == {"logs-2023"}
        assert request.indices == ["logs-*"]
        assert "resolved view only" in caplog.text

    def test_assign_without_rewrite_capability(self, logs_catalog: InMemoryCatalog) -> None:
        engine = IndexResolutionEngine(
            logs_catalog, capabilities=RequestCapabilities(rewrite_indices=False)
        )
        request = search("logs-*")
        context = ResolutionContext(request)

        assert engine.assign(context, ["logs-2023"]) is False
        assert request.indices == ["logs-*"]
        assert engine.resolve(context) == {"logs-2023"}

    def test_assign_composite_updates_view_only(self, engine: IndexResolutionEngine) -> None:
        request = CompositeRequest("indices:data/read/msearch", sub_requests=[search("a")])
        context = ResolutionContext(request)

        assert engine.assign(context, ["b"]) is False
        assert request.sub_requests[0].indices == ["a"]
        assert context.resolved == {"b"}

    def test_assign_keeps_sentinel_exclusive(self, engine: IndexResolutionEngine) -> None:
        context = ResolutionContext(search("a"))
        engine.assign(context, ["_all", "a"])
        assert context.resolved == {ALL_INDICES}


@pytest.mark.unit
class TestConfiguration:
    """Engines built from ResolutionSettings."""

    def test_from_settings(self, scenario_catalog: InMemoryCatalog) -> None:
        settings = ResolutionSettings(
            pattern_policy="replace",
            search_actions=["indices:data/read/count"],
            can_rewrite_indices=False,
        )
        engine = IndexResolutionEngine.from_settings(settings, scenario_catalog)

        count = SingleRequest("indices:data/read/count", indices=["logs-*"])
        assert resolve(engine, count) == {"logs-a", "logs-b"}
        assert resolve(engine, search("logs-*")) == {"logs-*"}
        assert engine.capabilities.rewrite_indices is False

    def test_unknown_pattern_policy_rejected(self) -> None:
        with pytest.raises(ValueError, match="pattern policy"):
            IndexResolutionEngine(pattern_policy="drop")  # type: ignore[arg-type]


@pytest.mark.unit
class TestRendering:
    """Audit rendering of resolved sets."""

    def test_describe_indices_sorts_names(self) -> None:
        assert describe_indices(frozenset({"b", "a"})) == "[a b]"

    def test_describe_empty_and_missing(self) -> None:
        assert describe_indices(frozenset()) == "[]"
        assert describe_indices(None) == "[]"

    def test_discovered_indices_logged_at_debug(
        self, engine: IndexResolutionEngine, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="index_guard.core.resolution.engine"):
            resolve(engine, SingleRequest(GET, indices=["b", "a"]))

        assert "Discovered indices: a,b" in caplog.text


@pytest.mark.unit
class TestHostileInput:
    """Malformed bodies and off-type fields never abort resolution."""

    def test_deeply_nested_payload(self, engine: IndexResolutionEngine) -> None:
        depth = 100_000
        payload = b'{"indices": ' + b"[" * depth + b"]" * depth + b"}"

        resolved = resolve(engine, search("logs-*", payload=payload))

        assert resolved == {"logs-*", "logs-2024", "logs-2023"}

    def test_reader_returning_mapping(self, engine: IndexResolutionEngine) -> None:
        request = SingleRequest(SEARCH, payload=lambda: {"q": 1}, indices=["logs-2023"])
        assert resolve(engine, request) == {"logs-2023"}

    def test_off_type_indices_field(self, engine: IndexResolutionEngine) -> None:
        assert resolve(engine, SingleRequest(SEARCH, indices=7)) == {ALL_INDICES}
