"""Generate the query section of a snippet through an expression provider.

:func:`generate_query_section` walks the parsed options in a fixed canonical
order and concatenates one provider fragment per option present:

    select, filter, search, orderby, skip, top, count, expand, header...

Header fragments come last, in the order the headers appeared in the
request. The order never depends on how the options were written in the
query string, so the same request yields the same section shape in every
target language.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Sequence

from snippetgen.models import QueryOption, QueryOptionKind, QueryOptions

if TYPE_CHECKING:
    from snippetgen.languages.base import ExpressionProvider

CANONICAL_ORDER: tuple[QueryOptionKind, ...] = (
    QueryOptionKind.SELECT,
    QueryOptionKind.FILTER,
    QueryOptionKind.SEARCH,
    QueryOptionKind.ORDER_BY,
    QueryOptionKind.SKIP,
    QueryOptionKind.TOP,
    QueryOptionKind.COUNT,
    QueryOptionKind.EXPAND,
)
"""Emission order of system query options; headers always follow."""


def generate_query_section(options: QueryOptions, provider: ExpressionProvider) -> str:
    """Render *options* with *provider* in canonical order.

    Args:
        options: Options parsed by
            :func:`~snippetgen.query.parser.parse_query_options`.
        provider: The target language's expression provider.

    Returns:
        The concatenated fragments, or ``""`` when no option is present.

    Example::

        >>> opts = parse_query_options("$top=5&$select=subject")
        >>> generate_query_section(opts, JavascriptExpressions())
        "\\n\\t.select('subject')\\n\\t.top(5)"
    """
    fragments: list[str] = []
    for kind in CANONICAL_ORDER:
        option = options.get(kind)
        if option is not None:
            fragments.append(_render(provider, option))
    for header in options.headers:
        fragments.append(provider.header(header.name or "", header.value))
    return join_list(fragments, "")


def _render(provider: ExpressionProvider, option: QueryOption) -> str:
    renderers: dict[QueryOptionKind, Callable[..., str]] = {
        QueryOptionKind.SELECT: provider.select,
        QueryOptionKind.FILTER: provider.filter,
        QueryOptionKind.SEARCH: provider.search,
        QueryOptionKind.ORDER_BY: provider.order_by,
        QueryOptionKind.SKIP: provider.skip,
        QueryOptionKind.TOP: provider.top,
        QueryOptionKind.COUNT: provider.count,
        QueryOptionKind.EXPAND: provider.expand,
    }
    return renderers[option.kind](option.value)


def join_list(items: Sequence[str], delimiter: str) -> str:
    """Join *items* with *delimiter* between consecutive items.

    Returns ``""`` for an empty sequence; an empty delimiter concatenates.

    Example::

        >>> join_list(["Test", "Test2", "Test3"], ",")
        'Test,Test2,Test3'
        >>> join_list([], ",")
        ''
    """
    return delimiter.join(items)
