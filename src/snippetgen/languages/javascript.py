"""Expression provider for the Microsoft Graph JavaScript client library.

Fragments chain onto a ``client.api(...)`` request builder, one call per
line::

    let events = await client.api('/me/events')
        .select('subject,organizer')
        .top(5)
        .get();
"""

from __future__ import annotations

from typing import Sequence

from snippetgen.languages.base import ExpressionProvider
from snippetgen.query.generator import join_list


class JavascriptExpressions(ExpressionProvider):
    """Chained ``.method('value')`` fragments for the JavaScript SDK."""

    @property
    def name(self) -> str:
        return "javascript"

    @property
    def aliases(self) -> tuple[str, ...]:
        return ("js",)

    @property
    def description(self) -> str:
        return "Microsoft Graph JavaScript client (@microsoft/microsoft-graph-client)"

    def select(self, fields: Sequence[str]) -> str:
        return f"\n\t.select('{join_list(fields, ',')}')"

    def filter(self, expression: str) -> str:
        return f"\n\t.filter('{expression}')"

    def search(self, term: str) -> str:
        return f"\n\t.search('{term}')"

    def order_by(self, expression: str) -> str:
        return f"\n\t.orderby('{expression}')"

    def skip(self, count: int) -> str:
        return f"\n\t.skip({count})"

    def top(self, count: int) -> str:
        return f"\n\t.top({count})"

    def count(self, flag: bool) -> str:
        return f"\n\t.count({'true' if flag else 'false'})"

    def expand(self, expression: str) -> str:
        return f"\n\t.expand('{expression}')"

    def header(self, name: str, value: str) -> str:
        return f"\n\t.header('{name}','{value}')"
