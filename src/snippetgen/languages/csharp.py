"""Expression provider for the Microsoft Graph .NET client library.

Fragments chain onto a request builder's ``.Request()`` call::

    var events = await graphClient.Me.Events
        .Request()
        .Select("subject,organizer")
        .Top(5)
        .GetAsync();
"""

from __future__ import annotations

from typing import Sequence

from snippetgen.languages.base import ExpressionProvider
from snippetgen.query.generator import join_list


class CSharpExpressions(ExpressionProvider):
    """Chained ``.Method("value")`` fragments for the .NET SDK."""

    @property
    def name(self) -> str:
        return "csharp"

    @property
    def aliases(self) -> tuple[str, ...]:
        return ("cs", "c#")

    @property
    def description(self) -> str:
        return "Microsoft Graph .NET client (Microsoft.Graph)"

    def select(self, fields: Sequence[str]) -> str:
        return f'\n\t.Select("{join_list(fields, ",")}")'

    def filter(self, expression: str) -> str:
        return f'\n\t.Filter("{expression}")'

    def search(self, term: str) -> str:
        return f'\n\t.Search("{term}")'

    def order_by(self, expression: str) -> str:
        return f'\n\t.OrderBy("{expression}")'

    def skip(self, count: int) -> str:
        return f"\n\t.Skip({count})"

    def top(self, count: int) -> str:
        return f"\n\t.Top({count})"

    def count(self, flag: bool) -> str:
        return f"\n\t.Count({'true' if flag else 'false'})"

    def expand(self, expression: str) -> str:
        return f'\n\t.Expand("{expression}")'

    def header(self, name: str, value: str) -> str:
        return f'\n\t.Header("{name}","{value}")'
