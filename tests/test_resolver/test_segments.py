"""Tests for snippetgen.resolver.segments."""

from __future__ import annotations

import logging

import pytest

from snippetgen.exceptions import SchemaResolutionError, UnsupportedSegmentKind, VerbMismatch
from snippetgen.models import (
    BoundOperation,
    EntitySet,
    HTTPMethod,
    SchemaType,
    SegmentKind,
    TypeKind,
    TypeReference,
)
from snippetgen.resolver.segments import SegmentResolver, resolve_segments, split_call
from snippetgen.schema.graph import SchemaGraph


def _kinds(segments) -> list[str]:  # noqa: ANN001
    return [s.kind.value for s in segments]


class TestRootSegments:
    def test_singleton(self, graph: SchemaGraph) -> None:
        (me,) = resolve_segments(["me"], graph, HTTPMethod.GET)
        assert me.kind == SegmentKind.SINGLETON
        assert me.type_name == "microsoft.graph.user"
        assert me.is_collection is False
        assert me.position == 0

    def test_entity_set(self, graph: SchemaGraph) -> None:
        (users,) = resolve_segments(["users"], graph, HTTPMethod.GET)
        assert users.kind == SegmentKind.ENTITY_SET_ROOT
        assert users.is_collection is True

    def test_function_import(self, graph: SchemaGraph) -> None:
        (schedule,) = resolve_segments(["getSchedule"], graph, HTTPMethod.GET)
        assert schedule.kind == SegmentKind.FUNCTION
        assert schedule.type_name == "microsoft.graph.event"
        assert schedule.is_collection is True

    def test_unknown_root_raises(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError) as exc_info:
            resolve_segments(["nope"], graph, HTTPMethod.GET)
        assert exc_info.value.identifier == "nope"
        assert exc_info.value.position == 0

    def test_empty_path_raises(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError):
            resolve_segments([], graph, HTTPMethod.GET)

    def test_parenthesised_key_on_entity_set(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["users('42')", "messages"], graph, HTTPMethod.GET)
        assert _kinds(segments) == ["EntitySetRoot", "Key", "NavigationProperty"]
        assert segments[1].identifier == "'42'"
        assert segments[1].owner == "users"

    def test_parenthesised_key_on_singleton_raises(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError) as exc_info:
            resolve_segments(["me(id='1')"], graph, HTTPMethod.GET)
        assert exc_info.value.identifier == "me(id='1')"
        assert exc_info.value.position == 0


class TestNavigationAndProperties:
    def test_navigation_collection(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "messages"], graph, HTTPMethod.GET)
        assert _kinds(segments) == ["Singleton", "NavigationProperty"]
        assert segments[1].type_name == "microsoft.graph.message"
        assert segments[1].is_collection is True
        assert segments[1].position == 1

    def test_structural_property(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "messages", "{id}", "body"], graph, HTTPMethod.GET)
        assert _kinds(segments) == ["Singleton", "NavigationProperty", "Key", "StructuralProperty"]
        assert segments[3].type_name == "microsoft.graph.itemBody"

    def test_inherited_property(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "id"], graph, HTTPMethod.GET)
        assert segments[-1].kind == SegmentKind.STRUCTURAL_PROPERTY
        assert segments[-1].type_name == "Edm.String"

    def test_deep_navigation(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(
            ["me", "drive", "root", "children", "{item-id}", "children"], graph, HTTPMethod.GET
        )
        assert _kinds(segments) == [
            "Singleton",
            "NavigationProperty",
            "NavigationProperty",
            "NavigationProperty",
            "Key",
            "NavigationProperty",
        ]
        assert segments[-1].type_name == "microsoft.graph.driveItem"

    def test_unknown_member_raises_with_position(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError) as exc_info:
            resolve_segments(["me", "drive", "bogus"], graph, HTTPMethod.GET)
        assert exc_info.value.identifier == "bogus"
        assert exc_info.value.position == 2
        assert "microsoft.graph.drive" in str(exc_info.value)

    def test_member_after_primitive_raises(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError):
            resolve_segments(["me", "displayName", "length"], graph, HTTPMethod.GET)

    def test_parenthesised_key_on_collection_navigation(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "messages('AAMk')"], graph, HTTPMethod.GET)
        assert _kinds(segments) == ["Singleton", "NavigationProperty", "Key"]
        assert segments[2].identifier == "'AAMk'"
        assert segments[2].owner == "messages"

    @pytest.mark.parametrize("raw", ["manager(id='x')", "displayName('x')", "drive()"])
    def test_arguments_on_single_valued_member_raise(self, graph: SchemaGraph, raw: str) -> None:
        with pytest.raises(SchemaResolutionError) as exc_info:
            resolve_segments(["me", raw], graph, HTTPMethod.GET)
        assert exc_info.value.identifier == raw
        assert exc_info.value.position == 1


class TestKeys:
    @pytest.mark.parametrize(
        "key",
        ["{id}", "'42'", "42", "1b9a5e7c-0c47-4f2e-9a4c-12ab34cd56ef", "alice@contoso.com"],
    )
    def test_key_forms(self, graph: SchemaGraph, key: str) -> None:
        segments = resolve_segments(["users", key], graph, HTTPMethod.GET)
        assert segments[1].kind == SegmentKind.KEY
        assert segments[1].identifier == key
        assert segments[1].is_collection is False
        assert segments[1].type_name == "microsoft.graph.user"

    def test_bare_identifier_key(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["users", "alice", "messages"], graph, HTTPMethod.GET)
        assert _kinds(segments) == ["EntitySetRoot", "Key", "NavigationProperty"]

    def test_key_records_its_collection(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "events", "{id}"], graph, HTTPMethod.GET)
        assert segments[2].owner == "events"
        assert segments[1].owner is None

    def test_unknown_identifier_under_collection_is_logged_as_key(
        self, graph: SchemaGraph, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="snippetgen.resolver.segments")
        segments = resolve_segments(["me", "events", "calendarVew"], graph, HTTPMethod.GET)
        assert segments[2].kind == SegmentKind.KEY
        assert "Reading 'calendarVew' as a key of microsoft.graph.event" in caplog.text

    def test_key_only_after_collection(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError):
            resolve_segments(["me", "{id}"], graph, HTTPMethod.GET)

    def test_member_name_is_not_a_key(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["users", "delta"], graph, HTTPMethod.GET)
        assert segments[1].kind == SegmentKind.FUNCTION

    def test_system_segment_is_never_a_key(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError):
            resolve_segments(["users", "$count"], graph, HTTPMethod.GET)


class TestCasts:
    def test_cast_on_collection(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "memberOf", "microsoft.graph.group"], graph, HTTPMethod.GET)
        assert segments[-1].kind == SegmentKind.CAST
        assert segments[-1].type_name == "microsoft.graph.group"
        assert segments[-1].is_collection is True

    def test_cast_by_alias(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "manager", "graph.user"], graph, HTTPMethod.GET)
        assert segments[-1].kind == SegmentKind.CAST
        assert segments[-1].is_collection is False

    def test_cast_then_member(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(
            ["me", "messages", "{id}", "microsoft.graph.eventMessage", "event"],
            graph,
            HTTPMethod.GET,
        )
        assert segments[-1].type_name == "microsoft.graph.event"

    def test_cast_with_arguments_raises(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError) as exc_info:
            resolve_segments(
                ["me", "memberOf", "microsoft.graph.group('1')"], graph, HTTPMethod.GET
            )
        assert exc_info.value.position == 2

    def test_unrelated_type_is_not_a_cast(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError):
            resolve_segments(["me", "manager", "microsoft.graph.message"], graph, HTTPMethod.GET)


class TestOperations:
    def test_bound_action(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "sendMail"], graph, HTTPMethod.POST)
        assert segments[-1].kind == SegmentKind.ACTION
        assert segments[-1].type_name is None
        assert isinstance(segments[-1].reference, BoundOperation)

    def test_bound_function_on_collection(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "messages", "delta"], graph, HTTPMethod.GET)
        assert segments[-1].kind == SegmentKind.FUNCTION
        assert segments[-1].type_name == "microsoft.graph.message"
        assert segments[-1].is_collection is True

    def test_function_with_arguments(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "drive", "search(q='budget')"], graph, HTTPMethod.GET)
        assert segments[-1].identifier == "search"
        assert segments[-1].arguments == "q='budget'"
        assert segments[-1].type_name == "microsoft.graph.driveItem"

    def test_operation_inherited_from_base_binding(self, graph: SchemaGraph) -> None:
        segments = resolve_segments(["me", "getMemberGroups"], graph, HTTPMethod.POST)
        assert segments[-1].kind == SegmentKind.ACTION
        assert segments[-1].type_name == "Edm.String"

    def test_action_with_read_verb_raises(self, graph: SchemaGraph) -> None:
        with pytest.raises(VerbMismatch) as exc_info:
            resolve_segments(["me", "sendMail"], graph, HTTPMethod.GET)
        assert exc_info.value.identifier == "sendMail"
        assert exc_info.value.position == 1
        assert exc_info.value.method == "GET"

    def test_function_with_write_verb_raises(self, graph: SchemaGraph) -> None:
        with pytest.raises(VerbMismatch):
            resolve_segments(["users", "delta"], graph, HTTPMethod.POST)

    def test_collection_bound_function_not_reachable_from_entity(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError):
            resolve_segments(["me", "delta"], graph, HTTPMethod.GET)

    def test_member_after_void_action_raises(self, graph: SchemaGraph) -> None:
        with pytest.raises(SchemaResolutionError) as exc_info:
            resolve_segments(["me", "sendMail", "x"], graph, HTTPMethod.POST)
        assert exc_info.value.position == 2


class TestPrecedence:
    def test_property_wins_over_operation(self) -> None:
        thing = SchemaType(
            name="thing",
            namespace="ns",
            kind=TypeKind.ENTITY,
            properties={"status": TypeReference(type_name="Edm.String")},
        )
        op = BoundOperation(
            name="status",
            namespace="ns",
            kind="Function",
            binding=TypeReference(type_name="ns.thing"),
            return_type=TypeReference(type_name="Edm.Int32"),
        )
        graph = SchemaGraph(
            [thing],
            entity_sets=[EntitySet(name="thing", type_name="ns.thing", is_singleton=True)],
            operations=[op],
        )
        segments = resolve_segments(["thing", "status"], graph, HTTPMethod.GET)
        assert segments[-1].kind == SegmentKind.STRUCTURAL_PROPERTY

    def test_undeclared_target_type_is_unsupported(self) -> None:
        graph = SchemaGraph(
            [],
            entity_sets=[EntitySet(name="ghosts", type_name="ns.ghost")],
        )
        with pytest.raises(UnsupportedSegmentKind):
            resolve_segments(["ghosts"], graph, HTTPMethod.GET)


class TestHelpers:
    def test_split_call(self) -> None:
        assert split_call("search(q='x')") == ("search", "q='x'")
        assert split_call("delta()") == ("delta", "")
        assert split_call("messages") == ("messages", None)

    def test_resolver_is_reusable(self, graph: SchemaGraph) -> None:
        resolver = SegmentResolver(graph, HTTPMethod.GET)
        first = resolver.resolve(["me", "messages"])
        second = resolver.resolve(["users"])
        assert len(first) == 2
        assert len(second) == 1
