"""Parse a request's query string and headers into recognised query options.

Recognised system query options (``$`` prefix optional, names
case-insensitive):

===========  ==========================================================
Option       Parsed value
===========  ==========================================================
``select``   tuple of field names (comma-delimited, blanks dropped)
``filter``   opaque expression string
``search``   opaque term, surrounding double quotes removed
``orderby``  opaque expression string
``skip``     non-negative ``int``
``top``      non-negative ``int``
``count``    ``bool`` (``true`` / ``false``)
``expand``   opaque expression string
===========  ==========================================================

Every request header that is not reserved becomes one Header option, in
request order. Unrecognised query keys are ignored so that newer server
options never break snippet generation.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable
from urllib.parse import unquote

from snippetgen.exceptions import MalformedQueryOption
from snippetgen.models import QueryOption, QueryOptionKind, QueryOptions

logger = logging.getLogger(__name__)

DEFAULT_RESERVED_HEADERS: tuple[str, ...] = ("Host", "Content-Length", "Authorization")
"""Headers that describe the transport rather than the call and are never emitted."""

_SYSTEM_OPTIONS: dict[str, QueryOptionKind] = {
    kind.value: kind for kind in QueryOptionKind if kind != QueryOptionKind.HEADER
}

_NON_NEGATIVE_INT_RE = re.compile(r"^\d+$")


def parse_query_options(
    query_string: str,
    headers: Iterable[tuple[str, str]] = (),
    reserved_headers: Iterable[str] = DEFAULT_RESERVED_HEADERS,
) -> QueryOptions:
    """Parse *query_string* and *headers* into a :class:`~snippetgen.models.QueryOptions`.

    When a system option appears more than once the last occurrence wins.

    Args:
        query_string: The raw query string, without the leading ``?``.
        headers: Ordered ``(name, value)`` request header pairs.
        reserved_headers: Header names (case-insensitive) to leave out.

    Returns:
        The recognised options.

    Raises:
        MalformedQueryOption: If ``$skip`` or ``$top`` is not a non-negative
            integer, or ``$count`` is not a boolean.

    Example::

        >>> opts = parse_query_options("$select=displayName,givenName&$top=5")
        >>> opts.get(QueryOptionKind.SELECT).value
        ('displayName', 'givenName')
    """
    options: dict[QueryOptionKind, QueryOption] = {}
    for key, value in _split_query(query_string):
        kind = _SYSTEM_OPTIONS.get(key.lstrip("$").lower())
        if kind is None:
            logger.debug("Ignoring unrecognised query option '%s'", key)
            continue
        parsed = _parse_value(kind, key, value)
        if parsed is None:
            logger.debug("Ignoring empty query option '%s'", key)
            continue
        options[kind] = QueryOption(kind=kind, value=parsed)

    reserved = {name.lower() for name in reserved_headers}
    header_options = tuple(
        QueryOption(kind=QueryOptionKind.HEADER, name=name, value=value)
        for name, value in headers
        if name.lower() not in reserved
    )
    return QueryOptions(options=options, headers=header_options)


def _split_query(query_string: str) -> list[tuple[str, str]]:
    """Split a raw query string into decoded ``(key, value)`` pairs.

    ``+`` is kept literally: request URLs are not form-encoded, and OData
    expressions may legitimately contain it.
    """
    pairs: list[tuple[str, str]] = []
    for part in query_string.lstrip("?").split("&"):
        if not part:
            continue
        key, _, value = part.partition("=")
        pairs.append((unquote(key).strip(), unquote(value)))
    return pairs


def _parse_value(kind: QueryOptionKind, key: str, value: str) -> Any:
    """Convert a raw option value; ``None`` means the option carries nothing."""
    if not value.strip():
        return None

    if kind in (QueryOptionKind.SKIP, QueryOptionKind.TOP):
        stripped = value.strip()
        if not _NON_NEGATIVE_INT_RE.match(stripped):
            raise MalformedQueryOption(key, value, "a non-negative integer")
        return int(stripped)

    if kind == QueryOptionKind.COUNT:
        lowered = value.strip().lower()
        if lowered not in ("true", "false"):
            raise MalformedQueryOption(key, value, "true or false")
        return lowered == "true"

    if kind == QueryOptionKind.SELECT:
        fields = tuple(f.strip() for f in value.split(",") if f.strip())
        return fields or None

    if kind == QueryOptionKind.SEARCH:
        return _strip_quotes(value)

    return value


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value
