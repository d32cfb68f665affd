"""Expression provider for the Kiota-based Microsoft Graph Java client.

Unlike the chained SDKs, the Java client configures a request through a
``requestConfiguration`` lambda, so each fragment is a statement::

    graphClient.me().events().get(requestConfiguration -> {
        requestConfiguration.queryParameters.select = new String []{"subject", "organizer"};
        requestConfiguration.queryParameters.top = 5;
    });
"""

from __future__ import annotations

from typing import Sequence

from snippetgen.languages.base import ExpressionProvider
from snippetgen.query.generator import join_list

_QUERY = "\n\trequestConfiguration.queryParameters"


class JavaExpressions(ExpressionProvider):
    """``requestConfiguration`` assignment statements for the Java SDK."""

    @property
    def name(self) -> str:
        return "java"

    @property
    def description(self) -> str:
        return "Microsoft Graph Java client (com.microsoft.graph, Kiota)"

    def select(self, fields: Sequence[str]) -> str:
        quoted = join_list([f'"{f}"' for f in fields], ", ")
        return f"{_QUERY}.select = new String []{{{quoted}}};"

    def filter(self, expression: str) -> str:
        return f'{_QUERY}.filter = "{expression}";'

    def search(self, term: str) -> str:
        return f'{_QUERY}.search = "{term}";'

    def order_by(self, expression: str) -> str:
        return f'{_QUERY}.orderby = new String []{{"{expression}"}};'

    def skip(self, count: int) -> str:
        return f"{_QUERY}.skip = {count};"

    def top(self, count: int) -> str:
        return f"{_QUERY}.top = {count};"

    def count(self, flag: bool) -> str:
        return f"{_QUERY}.count = {'true' if flag else 'false'};"

    def expand(self, expression: str) -> str:
        return f'{_QUERY}.expand = new String []{{"{expression}"}};'

    def header(self, name: str, value: str) -> str:
        return f'\n\trequestConfiguration.headers.add("{name}", "{value}");'
