"""Compute the qualified type name addressed by an identifier chain.

Snippet templates need concrete class names: the element type of the
resource being fetched, or the type of a nested request-body property such
as ``message.toRecipients.emailAddress``. :func:`class_name_of` answers that
question starting from the last resolved
:class:`~snippetgen.models.PathSegment` of a request.

The chain is walked with the same precedence as the segment resolver:
navigation property, then structural property, then derived-type cast.
Operation segments add one rule in front: the first identifier is matched
(case-insensitively) against the operation's parameters, so ``message`` under
``POST /me/sendMail`` yields the parameter's type rather than ``user``.
"""

from __future__ import annotations

import logging
from typing import Sequence

from snippetgen.exceptions import SchemaResolutionError, UnsupportedSegmentKind
from snippetgen.models import BoundOperation, PathSegment, SchemaType, SegmentKind
from snippetgen.schema.graph import SchemaGraph

logger = logging.getLogger(__name__)


def class_name_of(
    segment: PathSegment,
    identifiers: Sequence[str],
    graph: SchemaGraph,
) -> str:
    """Return the qualified type name the identifier chain lands on.

    Args:
        segment: The last resolved segment of the request.
        identifiers: Identifier chain, outermost first. When the first
            identifier is the segment's own identifier (or, for a Key
            segment, the collection it selects from) it denotes the
            segment's type; otherwise the chain starts inside it.
        graph: The schema graph the segment was resolved against.

    Returns:
        The namespace-qualified name of the final type. Collection-valued
        members yield their element type.

    Raises:
        SchemaResolutionError: If an identifier matches nothing, or the
            chain starts at an operation that returns nothing.
        UnsupportedSegmentKind: If *segment* carries a reference that does
            not fit its kind.

    Example::

        segment = resolve_segments(["me", "messages"], graph, HTTPMethod.POST)[-1]
        class_name_of(segment, ["messages", "toRecipients", "emailAddress"], graph)
        # 'microsoft.graph.emailAddress'
    """
    ids = list(identifiers)
    if not ids:
        return _segment_type(segment, graph, segment.identifier).qualified_name

    if ids[0] == segment.identifier or (
        segment.kind == SegmentKind.KEY and ids[0] == segment.owner
    ):
        context = _segment_type(segment, graph, ids[0])
        offset = 1
    elif segment.is_operation:
        operation = _operation_of(segment)
        param = operation.find_parameter(ids[0])
        if param is not None:
            context = _lookup(graph, param.type.type_name, ids[0], 0)
            offset = 1
        else:
            context = _segment_type(segment, graph, ids[0])
            offset = 0
    else:
        context = _segment_type(segment, graph, ids[0])
        offset = 0

    for position in range(offset, len(ids)):
        context = _step(graph, context, ids[position], position)

    logger.debug("Class name of %s -> %s", ".".join(ids), context.qualified_name)
    return context.qualified_name


def _step(graph: SchemaGraph, context: SchemaType, identifier: str, position: int) -> SchemaType:
    ref = graph.find_navigation_property(context, identifier)
    if ref is None:
        ref = graph.find_property(context, identifier)
    if ref is not None:
        return _lookup(graph, ref.type_name, identifier, position)

    derived = graph.find_derived_type(context, identifier)
    if derived is not None:
        return derived

    raise SchemaResolutionError(identifier, position, context.qualified_name)


def _segment_type(segment: PathSegment, graph: SchemaGraph, identifier: str) -> SchemaType:
    if segment.is_operation:
        operation = _operation_of(segment)
        if operation.return_type is None:
            raise SchemaResolutionError(
                identifier, 0, f"'{operation.qualified_name}', which returns nothing"
            )
        return _lookup(graph, operation.return_type.type_name, identifier, 0)

    if not isinstance(segment.reference, SchemaType):
        raise UnsupportedSegmentKind(
            f"Segment '{segment.identifier}' of kind {segment.kind!r} does not reference a type"
        )
    return segment.reference


def _operation_of(segment: PathSegment) -> BoundOperation:
    if not isinstance(segment.reference, BoundOperation):
        raise UnsupportedSegmentKind(
            f"{segment.kind.value} segment '{segment.identifier}' does not reference an operation"
        )
    return segment.reference


def _lookup(graph: SchemaGraph, type_name: str, identifier: str, position: int) -> SchemaType:
    found = graph.find_type(type_name)
    if found is None:
        raise SchemaResolutionError(identifier, position, f"undeclared type '{type_name}'")
    return found
