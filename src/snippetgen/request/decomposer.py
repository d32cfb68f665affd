"""Split a captured HTTP request into raw path elements, query string and headers.

The decomposer is the first step of the pipeline. It knows nothing about the
schema: it strips the service root from the request URL, percent-decodes the
remaining path, and breaks it into the raw identifier strings the
:mod:`~snippetgen.resolver.segments` resolver consumes.

Path handling rules:

* The service root (``https://graph.microsoft.com/v1.0``) is removed.
  Relative URLs (``/me/events``) are accepted as already root-relative.
* Empty elements are dropped, so trailing slashes (``/me/people/``) and
  doubled slashes are harmless.
* A parenthesised key directly after a name (``users('42')``) is split into
  two elements (``users`` and ``'42'``) so that the key gets its own
  segment. Parentheses holding named arguments (``reminderView(a=1,b=2)``)
  are kept on the element because they belong to a function call.
* Slashes inside parentheses or quotes do not split the path.
"""

from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import unquote, urlsplit

from snippetgen.exceptions import InvalidUsageError
from snippetgen.models import DecomposedRequest, HttpRequest

# name(args) with the argument text captured; name may be namespace-qualified
_CALL_RE = re.compile(r"^(?P<name>[^()]+)\((?P<args>.*)\)$")

# Named argument list: ``a=1`` or ``a=1,b='x'``
_NAMED_ARGS_RE = re.compile(r"^\s*[A-Za-z_][\w.]*\s*=")


def decompose_request(request: HttpRequest, service_root: str) -> DecomposedRequest:
    """Decompose *request* relative to *service_root*.

    Args:
        request: The captured request.
        service_root: Absolute service root URL (scheme, host and any
            version path such as ``/v1.0``).

    Returns:
        A :class:`~snippetgen.models.DecomposedRequest` with at least one
        raw path element.

    Raises:
        InvalidUsageError: If the URL points at a different host or outside
            the service root path, or if no resource path remains.

    Example::

        >>> decompose_request(
        ...     HttpRequest(method="GET", url="https://graph.microsoft.com/v1.0/me/events?$top=5"),
        ...     "https://graph.microsoft.com/v1.0",
        ... ).path_segments
        ('me', 'events')
    """
    root = urlsplit(service_root)
    url = urlsplit(request.url)

    if url.scheme or url.netloc:
        if url.netloc.lower() != root.netloc.lower():
            raise InvalidUsageError(
                f"Request host '{url.netloc}' does not match service root '{service_root}'"
            )
        path = _strip_root_path(url.path, root.path, request.url)
    else:
        # Relative URLs may still carry the version path ("/v1.0/me").
        root_path = root.path.rstrip("/")
        if root_path and (url.path == root_path or url.path.startswith(root_path + "/")):
            path = url.path[len(root_path):]
        else:
            path = url.path

    elements = list(_split_elements(path))
    if not elements:
        raise InvalidUsageError(f"Request URL '{request.url}' addresses no resource path")

    return DecomposedRequest(
        path_segments=tuple(elements),
        query_string=url.query,
        headers=tuple(request.headers),
    )


def split_path(path: str) -> list[str]:
    """Split a root-relative resource path into raw elements.

    Exposed for callers that already hold a path without host or query.
    """
    return list(_split_elements(path))


def _strip_root_path(path: str, root_path: str, original: str) -> str:
    root_path = root_path.rstrip("/")
    if not root_path:
        return path
    if path == root_path or path.startswith(root_path + "/"):
        return path[len(root_path):]
    raise InvalidUsageError(
        f"Request URL '{original}' is outside the service root path '{root_path}'"
    )


def _split_elements(path: str) -> Iterable[str]:
    for raw in _split_outside_brackets(path):
        element = unquote(raw)
        if not element:
            continue
        match = _CALL_RE.match(element)
        if match and not _NAMED_ARGS_RE.match(match.group("args")) and match.group("args"):
            # users('42') -> users, '42'
            yield match.group("name")
            yield match.group("args")
        else:
            yield element


def _split_outside_brackets(path: str) -> list[str]:
    """Split *path* on ``/`` except inside parentheses or single quotes."""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    in_quote = False
    for ch in path:
        if ch == "'" and depth:
            in_quote = not in_quote
        elif not in_quote:
            if ch == "(":
                depth += 1
            elif ch == ")" and depth:
                depth -= 1
            elif ch == "/" and not depth:
                parts.append("".join(current))
                current = []
                continue
        current.append(ch)
    parts.append("".join(current))
    return parts
