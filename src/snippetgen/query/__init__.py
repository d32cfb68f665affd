"""Query options -- parse them from a request and render them per language.

Typical usage::

    from snippetgen.languages import JavascriptExpressions
    from snippetgen.query import generate_query_section, parse_query_options

    options = parse_query_options("$select=displayName&$top=5", headers)
    generate_query_section(options, JavascriptExpressions())

Sub-modules:

* :mod:`~snippetgen.query.parser` -- Recognises system query options and
  request headers, validating numeric and boolean values.
* :mod:`~snippetgen.query.generator` -- Canonical-order rendering through an
  :class:`~snippetgen.languages.base.ExpressionProvider`, plus the
  :func:`join_list` helper.
"""

from snippetgen.query.generator import CANONICAL_ORDER, generate_query_section, join_list
from snippetgen.query.parser import DEFAULT_RESERVED_HEADERS, parse_query_options

__all__ = [
    "CANONICAL_ORDER",
    "DEFAULT_RESERVED_HEADERS",
    "generate_query_section",
    "join_list",
    "parse_query_options",
]
