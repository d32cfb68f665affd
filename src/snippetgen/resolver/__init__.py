"""Resolvers -- walk the schema graph to type a request's resource path.

Typical usage::

    from snippetgen.resolver import class_name_of, resolve_segments

    segments = resolve_segments(["me", "messages"], graph, HTTPMethod.POST)
    class_name_of(segments[-1], ["messages", "body"], graph)
    # 'microsoft.graph.itemBody'

Sub-modules:

* :mod:`~snippetgen.resolver.segments` -- Ordered rule-based resolution of
  raw path elements into :class:`~snippetgen.models.PathSegment` objects.
* :mod:`~snippetgen.resolver.class_name` -- Qualified type name for an
  identifier chain rooted at the last resolved segment.
"""

from snippetgen.resolver.class_name import class_name_of
from snippetgen.resolver.segments import SegmentResolver, resolve_segments

__all__ = ["SegmentResolver", "class_name_of", "resolve_segments"]
