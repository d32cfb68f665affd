"""Schema graph -- load CSDL JSON documents and index them for resolution.

This sub-package turns a raw OData CSDL JSON document (JSON or YAML, local
file or remote URL) into a :class:`~snippetgen.schema.graph.SchemaGraph`
that the resolvers query by name.

Typical usage::

    from snippetgen.schema import load_schema_graph

    graph = load_schema_graph("https://example.com/graph-v1.0.csdl.json")
    graph.find_entity_set("users")

Sub-modules:

* :mod:`~snippetgen.schema.loader` -- I/O layer (URL, file, stdin) plus
  format detection and CSDL version validation.
* :mod:`~snippetgen.schema.builder` -- Walks the document and produces the
  indexed graph, checking every type reference.
* :mod:`~snippetgen.schema.graph` -- The read-only graph and its lookups.
"""

from snippetgen.schema.builder import build_schema_graph
from snippetgen.schema.graph import SchemaGraph
from snippetgen.schema.loader import (
    load_schema_document,
    load_schema_graph,
    validate_csdl_version,
)

__all__ = [
    "SchemaGraph",
    "build_schema_graph",
    "load_schema_document",
    "load_schema_graph",
    "validate_csdl_version",
]
