"""Tests for snippetgen.schema.graph."""

from __future__ import annotations

import pytest

from snippetgen.models import SchemaType, TypeKind, TypeReference
from snippetgen.schema.graph import SchemaGraph


class TestTypeLookup:
    def test_find_by_alias(self, graph: SchemaGraph) -> None:
        found = graph.find_type("graph.message")
        assert found is not None
        assert found.qualified_name == "microsoft.graph.message"

    def test_edm_types_are_synthesised(self, graph: SchemaGraph) -> None:
        found = graph.find_type("Edm.Int64")
        assert found is not None
        assert found.kind == TypeKind.PRIMITIVE

    def test_unknown_type(self, graph: SchemaGraph) -> None:
        assert graph.find_type("microsoft.graph.nope") is None
        with pytest.raises(KeyError):
            graph.get_type("microsoft.graph.nope")


class TestInheritance:
    def test_base_chain(self, graph: SchemaGraph) -> None:
        user = graph.get_type("microsoft.graph.user")
        names = [t.name for t in graph.base_chain(user)]
        assert names == ["user", "directoryObject", "entity"]

    def test_inherited_property(self, graph: SchemaGraph) -> None:
        user = graph.get_type("microsoft.graph.user")
        ref = graph.find_property(user, "id")
        assert ref is not None and ref.type_name == "Edm.String"

    def test_derived_types_are_transitive(self, graph: SchemaGraph) -> None:
        entity = graph.get_type("microsoft.graph.entity")
        names = {t.name for t in graph.derived_types(entity)}
        assert {"user", "group", "message", "eventMessage", "fileAttachment"} <= names

    def test_find_derived_type_short_and_qualified(self, graph: SchemaGraph) -> None:
        directory_object = graph.get_type("microsoft.graph.directoryObject")
        assert graph.find_derived_type(directory_object, "group") is not None
        assert graph.find_derived_type(directory_object, "microsoft.graph.user") is not None
        assert graph.find_derived_type(directory_object, "message") is None

    def test_is_derived_from(self, graph: SchemaGraph) -> None:
        event_message = graph.get_type("microsoft.graph.eventMessage")
        assert graph.is_derived_from(event_message, "graph.outlookItem")
        assert not graph.is_derived_from(event_message, "graph.event")

    def test_cyclic_base_types_terminate(self) -> None:
        a = SchemaType(name="a", namespace="ns", kind=TypeKind.ENTITY, base_type="ns.b")
        b = SchemaType(name="b", namespace="ns", kind=TypeKind.ENTITY, base_type="ns.a")
        graph = SchemaGraph([a, b])
        assert [t.name for t in graph.base_chain(a)] == ["a", "b"]


class TestMembers:
    def test_bound_operation_requires_matching_collection_flag(self, graph: SchemaGraph) -> None:
        user = graph.get_type("microsoft.graph.user")
        assert graph.find_bound_operations(user, True, "delta")
        assert graph.find_bound_operations(user, False, "delta") == []

    def test_bound_operation_reachable_from_derived_type(self, graph: SchemaGraph) -> None:
        user = graph.get_type("microsoft.graph.user")
        (op,) = graph.find_bound_operations(user, False, "getMemberGroups")
        assert op.binding == TypeReference(type_name="microsoft.graph.directoryObject")

    def test_qualified_operation_name(self, graph: SchemaGraph) -> None:
        user = graph.get_type("microsoft.graph.user")
        assert graph.find_bound_operations(user, False, "microsoft.graph.sendMail")
        assert graph.find_bound_operations(user, False, "other.ns.sendMail") == []

    def test_has_member(self, graph: SchemaGraph) -> None:
        user = graph.get_type("microsoft.graph.user")
        assert graph.has_member(user, True, "messages")
        assert graph.has_member(user, True, "displayName")
        assert graph.has_member(user, True, "delta")
        assert not graph.has_member(user, True, "alice@contoso.com")
