"""Tests for snippetgen.query.generator."""

from __future__ import annotations

import pytest

from snippetgen.languages.csharp import CSharpExpressions
from snippetgen.languages.javascript import JavascriptExpressions
from snippetgen.query.generator import CANONICAL_ORDER, generate_query_section, join_list
from snippetgen.query.parser import parse_query_options


def _js(query: str, headers=()) -> str:  # noqa: ANN001
    return generate_query_section(parse_query_options(query, headers), JavascriptExpressions())


class TestGenerateQuerySection:
    """JavaScript fragments for each query option."""

    def test_no_options_gives_empty_string(self) -> None:
        assert _js("") == ""

    def test_select(self) -> None:
        assert _js("$select=displayName,givenName,postalCode") == (
            "\n\t.select('displayName,givenName,postalCode')"
        )

    def test_filter_is_not_reescaped(self) -> None:
        assert _js("$filter=startswith(givenName, 'J')") == (
            "\n\t.filter('startswith(givenName, 'J')')"
        )

    def test_search(self) -> None:
        assert _js('$search="Irene McGowen"') == "\n\t.search('Irene McGowen')"

    def test_skip(self) -> None:
        assert _js("$skip=20") == "\n\t.skip(20)"

    def test_top(self) -> None:
        assert _js("$top=5") == "\n\t.top(5)"

    def test_header(self) -> None:
        assert _js("", headers=[("Prefer", "kenya-timezone")]) == (
            "\n\t.header('Prefer','kenya-timezone')"
        )

    def test_canonical_order_ignores_query_order(self) -> None:
        result = _js("$top=5&$count=true&$filter=a eq 1&$select=id", headers=[("Prefer", "x")])
        assert result == (
            "\n\t.select('id')"
            "\n\t.filter('a eq 1')"
            "\n\t.top(5)"
            "\n\t.count(true)"
            "\n\t.header('Prefer','x')"
        )

    def test_all_system_options_in_order(self) -> None:
        result = _js(
            "$expand=members&$count=false&$top=1&$skip=2&$orderby=name"
            "&$search=x&$filter=f&$select=a"
        )
        markers = [".select", ".filter", ".search", ".orderby", ".skip", ".top", ".count", ".expand"]
        positions = [result.index(m) for m in markers]
        assert positions == sorted(positions)
        assert len(CANONICAL_ORDER) == len(markers)

    def test_provider_is_swappable(self) -> None:
        options = parse_query_options("$top=5&$select=subject")
        assert generate_query_section(options, CSharpExpressions()) == (
            '\n\t.Select("subject")\n\t.Top(5)'
        )


class TestJoinList:
    @pytest.mark.parametrize(
        "items,delimiter,expected",
        [
            ([], ",", ""),
            (["Test", "Test2", "Test3"], ",", "Test,Test2,Test3"),
            (["Test", "Test2", "Test3"], "", "TestTest2Test3"),
            (["only"], ", ", "only"),
        ],
    )
    def test_join_list(self, items: list[str], delimiter: str, expected: str) -> None:
        assert join_list(items, delimiter) == expected
