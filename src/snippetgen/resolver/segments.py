"""Resolve raw path elements into typed :class:`~snippetgen.models.PathSegment` objects.

This is the core graph walk. Starting at the service root, each raw element
produced by :func:`~snippetgen.request.decomposer.decompose_request` is
matched against the current type context. Rules are tried in a fixed order
and the first match wins:

1. **Entity set / singleton** -- only at the service root.
2. **Key** -- the previous segment is a collection and the element looks
   like a key value (see :func:`looks_like_key`).
3. **Navigation property** -- on the current type or any base type.
4. **Structural property** -- on the current type or any base type,
   including complex-typed properties.
5. **Cast** -- a type (qualified or short name) derived from the current type.
6. **Operation** -- a bound action or function reachable from the current
   type whose verb accepts the request method. At the root, action and
   function imports are tried instead.

Anything else raises :class:`~snippetgen.exceptions.SchemaResolutionError`.
A structural property therefore always wins over a bound operation of the
same name.

Error positions refer to the index of the raw element; segment
``position`` values are ordinals in the resolved sequence, which can be
longer than the input when a parenthesised key (``orders(id=1,line=2)``)
yields an extra Key segment.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from snippetgen.exceptions import (
    SchemaResolutionError,
    UnsupportedSegmentKind,
    VerbMismatch,
)
from snippetgen.models import (
    BoundOperation,
    HTTPMethod,
    OperationKind,
    PathSegment,
    SchemaType,
    SegmentKind,
    TypeReference,
)
from snippetgen.schema.graph import SchemaGraph

logger = logging.getLogger(__name__)

_KEY_LITERAL_RE = re.compile(
    r"""^(
        \{.*\}                                  # placeholder: {id}
      | '.*'                                    # quoted literal
      | -?\d+(\.\d+)?                           # number
      | [0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}
    )$""",
    re.VERBOSE,
)
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][\w.]*$")
_CALL_RE = re.compile(r"^(?P<name>[^()]+)\((?P<args>.*)\)$")

_OPERATION_SEGMENT_KINDS = {
    OperationKind.ACTION: SegmentKind.ACTION,
    OperationKind.FUNCTION: SegmentKind.FUNCTION,
}


def resolve_segments(
    raw_segments: Sequence[str],
    graph: SchemaGraph,
    method: HTTPMethod,
) -> tuple[PathSegment, ...]:
    """Resolve *raw_segments* against *graph* for a request using *method*.

    Args:
        raw_segments: Raw path elements, root first (``["me", "events"]``).
        graph: The schema graph to resolve against.
        method: The request's HTTP method; decides which bound operations
            are reachable.

    Returns:
        The resolved segments in path order. Never empty.

    Raises:
        SchemaResolutionError: If an element matches no rule.
        VerbMismatch: If an element names an operation whose verb does not
            accept *method*.
        UnsupportedSegmentKind: If the graph refers to an undeclared type.

    Example::

        segments = resolve_segments(["me", "messages", "{id}"], graph, HTTPMethod.GET)
        [s.kind.value for s in segments]
        # ['Singleton', 'NavigationProperty', 'Key']
    """
    return SegmentResolver(graph, method).resolve(raw_segments)


def split_call(element: str) -> tuple[str, Optional[str]]:
    """Split ``name(args)`` into ``(name, args)``; plain names give ``(name, None)``."""
    match = _CALL_RE.match(element)
    if match:
        return match.group("name"), match.group("args")
    return element, None


class SegmentResolver:
    """Stateful walker that resolves one path against a schema graph.

    A resolver is cheap to create and is used for a single path; the
    module-level :func:`resolve_segments` is the usual entry point.
    """

    def __init__(self, graph: SchemaGraph, method: HTTPMethod) -> None:
        self._graph = graph
        self._method = method
        self._segments: list[PathSegment] = []
        self._at_root = True
        self._current: Optional[SchemaType] = None
        self._is_collection = False

    def resolve(self, raw_segments: Sequence[str]) -> tuple[PathSegment, ...]:
        """Resolve every element of *raw_segments* in order."""
        self._segments = []
        self._at_root = True
        self._current = None
        self._is_collection = False

        for index, raw in enumerate(raw_segments):
            if self._at_root:
                self._resolve_root(raw, index)
            else:
                self._resolve_member(raw, index)
        if not self._segments:
            raise SchemaResolutionError("", 0, "the service root")
        return tuple(self._segments)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _resolve_root(self, raw: str, index: int) -> None:
        name, args = split_call(raw)

        # 1. Entity set or singleton
        entity_set = self._graph.find_entity_set(name)
        if entity_set is not None:
            target = self._type_of(entity_set.type_name, raw)
            kind = SegmentKind.SINGLETON if entity_set.is_singleton else SegmentKind.ENTITY_SET_ROOT
            if args is not None and entity_set.is_singleton:
                raise SchemaResolutionError(raw, index, f"singleton '{name}', which takes no key")
            self._push(name, kind, target, target.qualified_name, not entity_set.is_singleton)
            if args:
                self._push_key(args)
            return

        # 6. Action / function import
        imports = self._graph.find_operation_imports(name)
        if imports:
            self._push_operation(self._pick_operation(list(imports), raw, index), name, args)
            return

        raise SchemaResolutionError(raw, index, "the service root")

    def _resolve_member(self, raw: str, index: int) -> None:
        current = self._current
        if current is None:
            previous = self._segments[-1]
            raise SchemaResolutionError(raw, index, f"the result of '{previous.identifier}'")

        name, args = split_call(raw)

        # 2. Key
        if self._is_collection and args is None and self.looks_like_key(raw):
            self._push_key(raw)
            return

        # 3. Navigation property
        ref = self._graph.find_navigation_property(current, name)
        if ref is not None:
            self._push_reference(name, SegmentKind.NAVIGATION_PROPERTY, ref, args, raw, index)
            return

        # 4. Structural property
        ref = self._graph.find_property(current, name)
        if ref is not None:
            self._push_reference(name, SegmentKind.STRUCTURAL_PROPERTY, ref, args, raw, index)
            return

        # 5. Cast
        derived = self._graph.find_derived_type(current, name)
        if derived is not None:
            if args is not None:
                raise SchemaResolutionError(raw, index, f"cast to '{derived.qualified_name}'")
            self._push(name, SegmentKind.CAST, derived, derived.qualified_name, self._is_collection)
            return

        # 6. Bound operation
        operations = self._graph.find_bound_operations(current, self._is_collection, name)
        if operations:
            self._push_operation(self._pick_operation(operations, raw, index), name, args)
            return

        raise SchemaResolutionError(raw, index, current.qualified_name)

    def looks_like_key(self, identifier: str) -> bool:
        """Return ``True`` if *identifier* should be read as a key of the current collection.

        Key literals (``{id}``, quoted strings, numbers, GUIDs) and anything
        that is not a plain identifier are keys. A plain identifier is a key
        only when it names no member, derived type or operation of the
        current type (key-as-segment convention). A misspelt member under a
        collection is therefore read as a key; that fallback is logged at
        debug level. ``$``-prefixed system segments are never keys.
        """
        if identifier.startswith("$"):
            return False
        if _KEY_LITERAL_RE.match(identifier) or not _IDENTIFIER_RE.match(identifier):
            return True
        assert self._current is not None
        if self._graph.has_member(self._current, self._is_collection, identifier):
            return False
        logger.debug(
            "Reading '%s' as a key of %s because it names no member",
            identifier,
            self._current.qualified_name,
        )
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _pick_operation(
        self, operations: list[BoundOperation], raw: str, index: int
    ) -> BoundOperation:
        for op in operations:
            if op.accepts(self._method):
                return op
        raise VerbMismatch(raw, index, self._method.value, operations[0].kind.value)

    def _type_of(self, type_name: str, identifier: str) -> SchemaType:
        found = self._graph.find_type(type_name)
        if found is None:
            raise UnsupportedSegmentKind(
                f"'{identifier}' refers to type '{type_name}', which the schema does not declare"
            )
        return found

    def _push(
        self,
        identifier: str,
        kind: SegmentKind,
        target: SchemaType,
        type_name: str,
        is_collection: bool,
        owner: Optional[str] = None,
    ) -> None:
        segment = PathSegment(
            identifier=identifier,
            kind=kind,
            reference=target,
            type_name=type_name,
            is_collection=is_collection,
            position=len(self._segments),
            owner=owner,
        )
        self._segments.append(segment)
        self._at_root = False
        self._current = target
        self._is_collection = is_collection
        logger.debug("Resolved '%s' as %s -> %s", identifier, kind.value, type_name)

    def _push_key(self, identifier: str) -> None:
        assert self._current is not None
        self._push(
            identifier,
            SegmentKind.KEY,
            self._current,
            self._current.qualified_name,
            False,
            owner=self._segments[-1].identifier,
        )

    def _push_reference(
        self,
        identifier: str,
        kind: SegmentKind,
        ref: TypeReference,
        args: Optional[str],
        raw: str,
        index: int,
    ) -> None:
        if args is not None and not ref.collection:
            raise SchemaResolutionError(
                raw, index, f"single-valued '{identifier}', which takes no key"
            )
        target = self._type_of(ref.type_name, identifier)
        self._push(identifier, kind, target, target.qualified_name, ref.collection)
        if args:
            self._push_key(args)

    def _push_operation(self, op: BoundOperation, identifier: str, args: Optional[str]) -> None:
        kind = _OPERATION_SEGMENT_KINDS.get(op.kind)
        if kind is None:
            raise UnsupportedSegmentKind(f"Operation kind {op.kind!r} of '{identifier}' has no segment kind")

        return_type = op.return_type
        target = self._type_of(return_type.type_name, identifier) if return_type else None
        segment = PathSegment(
            identifier=identifier,
            kind=kind,
            reference=op,
            type_name=target.qualified_name if target else None,
            is_collection=bool(return_type and return_type.collection),
            position=len(self._segments),
            arguments=args,
        )
        self._segments.append(segment)
        self._at_root = False
        self._current = target
        self._is_collection = segment.is_collection
        logger.debug("Resolved '%s' as %s -> %s", identifier, kind.value, segment.type_name)
