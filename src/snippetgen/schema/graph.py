"""Read-only, name-indexed schema graph.

The :class:`SchemaGraph` is a flat table of :class:`~snippetgen.models.SchemaType`
definitions keyed by qualified name. Properties, navigation edges, base
types and operation bindings all refer to other types by qualified name, so
cyclic schemas (``user.manager -> directoryObject``, ``directoryObject`` back
to ``user`` through a cast) are represented without any ownership cycle and
every lookup is a dict access.

The graph is built once by :func:`~snippetgen.schema.builder.build_schema_graph`
(or directly, in tests) and then passed explicitly into every resolution
call. Nothing in this module mutates the graph after construction.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Iterator, Optional

from snippetgen.models import (
    BoundOperation,
    EntitySet,
    SchemaType,
    TypeKind,
    TypeReference,
)

EDM_NAMESPACE = "Edm"
"""Namespace of the built-in primitive types (``Edm.String``, ``Edm.Int32``...)."""


class SchemaGraph:
    """Indexed, immutable view over types, entity sets and operations.

    Args:
        types: Every named type declared by the schema. Primitive ``Edm``
            types need not be listed; they are synthesised on lookup.
        entity_sets: Entity sets and singletons of the entity container.
        operations: Bound operations, grouped internally by short name.
        operation_imports: Unbound operations exposed at the service root,
            keyed by the import name.
        aliases: Namespace aliases (``{"graph": "microsoft.graph"}``).
    """

    def __init__(
        self,
        types: Iterable[SchemaType],
        entity_sets: Iterable[EntitySet] = (),
        operations: Iterable[BoundOperation] = (),
        operation_imports: Optional[dict[str, list[BoundOperation]]] = None,
        aliases: Optional[dict[str, str]] = None,
    ) -> None:
        self._types: dict[str, SchemaType] = {t.qualified_name: t for t in types}
        self._entity_sets: dict[str, EntitySet] = {es.name: es for es in entity_sets}
        self._aliases: dict[str, str] = dict(aliases or {})

        bound: dict[str, list[BoundOperation]] = defaultdict(list)
        for op in operations:
            bound[op.name].append(op)
        self._operations: dict[str, tuple[BoundOperation, ...]] = {
            name: tuple(ops) for name, ops in bound.items()
        }
        self._imports: dict[str, tuple[BoundOperation, ...]] = {
            name: tuple(ops) for name, ops in (operation_imports or {}).items()
        }

        # Direct children per base type, used to find cast targets.
        children: dict[str, list[str]] = defaultdict(list)
        for t in self._types.values():
            if t.base_type:
                children[self.qualify(t.base_type)].append(t.qualified_name)
        self._children: dict[str, tuple[str, ...]] = {
            base: tuple(names) for base, names in children.items()
        }

    # ------------------------------------------------------------------
    # Names and types
    # ------------------------------------------------------------------

    def qualify(self, name: str) -> str:
        """Expand a namespace alias in *name* (``graph.user`` -> ``microsoft.graph.user``)."""
        namespace, _, short = name.rpartition(".")
        if namespace in self._aliases:
            return f"{self._aliases[namespace]}.{short}"
        return name

    def find_type(self, name: str) -> Optional[SchemaType]:
        """Return the type with qualified (or aliased) *name*, or ``None``.

        ``Edm.*`` names always resolve to a synthesised primitive type.
        """
        qualified = self.qualify(name)
        found = self._types.get(qualified)
        if found is not None:
            return found
        namespace, _, short = qualified.rpartition(".")
        if namespace == EDM_NAMESPACE and short:
            return SchemaType(name=short, namespace=EDM_NAMESPACE, kind=TypeKind.PRIMITIVE)
        return None

    def get_type(self, name: str) -> SchemaType:
        """Return the type named *name*.

        Raises:
            KeyError: If the graph holds no such type.
        """
        found = self.find_type(name)
        if found is None:
            raise KeyError(f"Unknown type '{name}'")
        return found

    @property
    def types(self) -> list[SchemaType]:
        return list(self._types.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find_type(name) is not None

    def __len__(self) -> int:
        return len(self._types)

    def base_chain(self, schema_type: SchemaType) -> Iterator[SchemaType]:
        """Yield *schema_type* followed by each of its base types, nearest first."""
        seen: set[str] = set()
        current: Optional[SchemaType] = schema_type
        while current is not None and current.qualified_name not in seen:
            seen.add(current.qualified_name)
            yield current
            current = self.find_type(current.base_type) if current.base_type else None

    def is_derived_from(self, schema_type: SchemaType, base_name: str) -> bool:
        """Return ``True`` if *base_name* appears in the base chain of *schema_type*."""
        wanted = self.qualify(base_name)
        return any(t.qualified_name == wanted for t in self.base_chain(schema_type))

    # ------------------------------------------------------------------
    # Entity container
    # ------------------------------------------------------------------

    @property
    def entity_sets(self) -> list[EntitySet]:
        return list(self._entity_sets.values())

    def find_entity_set(self, name: str) -> Optional[EntitySet]:
        """Return the entity set or singleton called *name*, or ``None``."""
        return self._entity_sets.get(name)

    def find_operation_imports(self, name: str) -> tuple[BoundOperation, ...]:
        """Return the unbound operations exposed at the root under *name*."""
        return self._imports.get(name, ())

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def find_navigation_property(
        self, schema_type: SchemaType, name: str
    ) -> Optional[TypeReference]:
        """Look up navigation property *name* on *schema_type* or any base type."""
        for t in self.base_chain(schema_type):
            if name in t.navigation_properties:
                return t.navigation_properties[name]
        return None

    def find_property(self, schema_type: SchemaType, name: str) -> Optional[TypeReference]:
        """Look up structural property *name* on *schema_type* or any base type."""
        for t in self.base_chain(schema_type):
            if name in t.properties:
                return t.properties[name]
        return None

    def derived_types(self, schema_type: SchemaType) -> list[SchemaType]:
        """Return every type that directly or transitively derives from *schema_type*."""
        result: list[SchemaType] = []
        pending = list(self._children.get(schema_type.qualified_name, ()))
        seen: set[str] = set()
        while pending:
            name = pending.pop(0)
            if name in seen:
                continue
            seen.add(name)
            result.append(self._types[name])
            pending.extend(self._children.get(name, ()))
        return result

    def find_derived_type(self, schema_type: SchemaType, name: str) -> Optional[SchemaType]:
        """Return the derived type called *name* (qualified or short), or ``None``."""
        qualified = self.qualify(name)
        for derived in self.derived_types(schema_type):
            if derived.qualified_name == qualified or derived.name == name:
                return derived
        return None

    def find_bound_operations(
        self, schema_type: SchemaType, is_collection: bool, name: str
    ) -> list[BoundOperation]:
        """Return operations called *name* whose binding accepts the given context.

        An operation is reachable when its binding type is *schema_type* or
        one of its base types and its binding collection flag matches
        *is_collection*. *name* may be namespace-qualified.
        """
        qualified = self.qualify(name)
        short = qualified.rpartition(".")[2]
        chain = {t.qualified_name for t in self.base_chain(schema_type)}
        matches: list[BoundOperation] = []
        for op in self._operations.get(short, ()):
            if qualified != short and op.qualified_name != qualified:
                continue
            binding = op.binding
            assert binding is not None  # only bound operations are indexed here
            if self.qualify(binding.type_name) in chain and binding.collection == is_collection:
                matches.append(op)
        return matches

    def has_member(self, schema_type: SchemaType, is_collection: bool, name: str) -> bool:
        """Return ``True`` if *name* is any addressable member of the context.

        Considers navigation and structural properties, derived-type casts
        and bound operations.
        """
        if (
            self.find_navigation_property(schema_type, name) is not None
            or self.find_property(schema_type, name) is not None
        ):
            return True
        if self.find_derived_type(schema_type, name) is not None:
            return True
        return bool(self.find_bound_operations(schema_type, is_collection, name))
