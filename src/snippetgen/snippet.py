"""Request model -- one captured request resolved against one schema graph.

:class:`RequestModel` is what snippet templates consume. Building it runs
the whole pipeline eagerly:

1. :func:`~snippetgen.request.decomposer.decompose_request` splits the URL.
2. :func:`~snippetgen.resolver.segments.resolve_segments` types the path.
3. :func:`~snippetgen.query.parser.parse_query_options` parses query options
   and headers.

Any failure aborts construction with the corresponding
:class:`~snippetgen.exceptions.SnippetGenError`; a model that exists is
always fully resolved. The model is frozen, so one instance can feed the
generators of several languages.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from snippetgen.languages.base import ExpressionProvider
from snippetgen.models import (
    HTTPMethod,
    HttpRequest,
    PathSegment,
    QueryOptions,
)
from snippetgen.query.generator import generate_query_section
from snippetgen.query.parser import DEFAULT_RESERVED_HEADERS, parse_query_options
from snippetgen.request.decomposer import decompose_request
from snippetgen.resolver.class_name import class_name_of
from snippetgen.resolver.segments import resolve_segments
from snippetgen.schema.graph import SchemaGraph

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_ROOT = "https://graph.microsoft.com/v1.0"


class RequestModel(BaseModel):
    """A request whose path, query options and headers are fully resolved."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: HTTPMethod
    segments: tuple[PathSegment, ...]
    query_options: QueryOptions
    headers: tuple[tuple[str, str], ...] = ()
    body: Optional[str] = None
    graph: SchemaGraph

    @property
    def last_segment(self) -> PathSegment:
        return self.segments[-1]

    def class_name_of(self, identifiers: Sequence[str] = ()) -> str:
        """Qualified type name of *identifiers*, rooted at the last segment.

        See :func:`~snippetgen.resolver.class_name.class_name_of`.
        """
        return class_name_of(self.last_segment, identifiers, self.graph)

    def generate_query_section(self, provider: ExpressionProvider) -> str:
        """Query section of the snippet in *provider*'s language."""
        return generate_query_section(self.query_options, provider)


def build_request_model(
    request: HttpRequest,
    graph: SchemaGraph,
    service_root: str = DEFAULT_SERVICE_ROOT,
    reserved_headers: Iterable[str] = DEFAULT_RESERVED_HEADERS,
) -> RequestModel:
    """Decompose, resolve and parse *request* against *graph*.

    Args:
        request: The captured request.
        graph: The schema graph of the target service.
        service_root: Absolute service root URL the request is relative to.
        reserved_headers: Header names never emitted as Header options.

    Returns:
        The resolved :class:`RequestModel`.

    Raises:
        InvalidUsageError: If the URL lies outside *service_root* or has no
            resource path.
        SchemaResolutionError: If a path element cannot be resolved.
        VerbMismatch: If an operation is addressed with the wrong verb.
        UnsupportedSegmentKind: If the graph refers to an undeclared type.
        MalformedQueryOption: If ``$skip``, ``$top`` or ``$count`` is invalid.

    Example::

        model = build_request_model(
            HttpRequest(method="GET", url="https://graph.microsoft.com/v1.0/me/people?$top=5"),
            graph,
        )
        model.class_name_of(["people"])              # 'microsoft.graph.person'
        model.generate_query_section(JavascriptExpressions())   # '\\n\\t.top(5)'
    """
    decomposed = decompose_request(request, service_root)
    segments = resolve_segments(decomposed.path_segments, graph, request.method)
    query_options = parse_query_options(
        decomposed.query_string, decomposed.headers, reserved_headers
    )
    logger.debug(
        "Built request model for %s %s (%d segments)",
        request.method.value,
        request.url,
        len(segments),
    )
    return RequestModel(
        method=request.method,
        segments=segments,
        query_options=query_options,
        headers=decomposed.headers,
        body=request.body,
        graph=graph,
    )
