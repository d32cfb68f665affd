"""Tests for snippetgen.query.parser."""

from __future__ import annotations

import pytest

from snippetgen.exceptions import MalformedQueryOption
from snippetgen.models import QueryOptionKind
from snippetgen.query.parser import parse_query_options


class TestSystemOptions:
    def test_empty_query(self) -> None:
        options = parse_query_options("")
        assert options.is_empty()

    def test_select_is_split_into_fields(self) -> None:
        options = parse_query_options("$select=displayName,givenName,postalCode")
        select = options.get(QueryOptionKind.SELECT)
        assert select is not None
        assert select.value == ("displayName", "givenName", "postalCode")

    def test_select_blank_fields_dropped(self) -> None:
        options = parse_query_options("$select=a,,b,")
        assert options.get(QueryOptionKind.SELECT).value == ("a", "b")

    def test_dollar_prefix_optional_and_case_insensitive(self) -> None:
        options = parse_query_options("TOP=5&$Skip=2")
        assert options.get(QueryOptionKind.TOP).value == 5
        assert options.get(QueryOptionKind.SKIP).value == 2

    def test_filter_is_percent_decoded_verbatim(self) -> None:
        options = parse_query_options("$filter=startswith(givenName,%20'J')")
        assert options.get(QueryOptionKind.FILTER).value == "startswith(givenName, 'J')"

    def test_plus_is_kept(self) -> None:
        options = parse_query_options("$filter=a+b")
        assert options.get(QueryOptionKind.FILTER).value == "a+b"

    def test_search_quotes_stripped(self) -> None:
        options = parse_query_options('$search="Irene McGowen"')
        assert options.get(QueryOptionKind.SEARCH).value == "Irene McGowen"

    def test_orderby_and_expand(self) -> None:
        options = parse_query_options("$orderby=displayName desc&$expand=members($select=id)")
        assert options.get(QueryOptionKind.ORDER_BY).value == "displayName desc"
        assert options.get(QueryOptionKind.EXPAND).value == "members($select=id)"

    @pytest.mark.parametrize("raw,expected", [("true", True), ("FALSE", False)])
    def test_count(self, raw: str, expected: bool) -> None:
        assert parse_query_options(f"$count={raw}").get(QueryOptionKind.COUNT).value is expected

    def test_last_duplicate_wins(self) -> None:
        options = parse_query_options("$top=5&$top=10")
        assert options.get(QueryOptionKind.TOP).value == 10

    def test_unknown_options_ignored(self) -> None:
        options = parse_query_options("$format=json&foo=bar")
        assert options.is_empty()

    def test_empty_value_ignored(self) -> None:
        options = parse_query_options("$filter=&$select=")
        assert options.is_empty()

    @pytest.mark.parametrize("query", ["$count=", "$skip=", "$top= "])
    def test_empty_typed_value_ignored(self, query: str) -> None:
        assert parse_query_options(query).is_empty()

    def test_leading_question_mark(self) -> None:
        assert parse_query_options("?$top=1").get(QueryOptionKind.TOP).value == 1


class TestMalformedOptions:
    @pytest.mark.parametrize("query", ["$top=-1", "$top=five", "$skip=1.5"])
    def test_non_integer_paging_rejected(self, query: str) -> None:
        with pytest.raises(MalformedQueryOption) as exc_info:
            parse_query_options(query)
        assert exc_info.value.option.lstrip("$") in ("top", "skip")

    def test_non_boolean_count_rejected(self) -> None:
        with pytest.raises(MalformedQueryOption, match="true or false"):
            parse_query_options("$count=yes")


class TestHeaders:
    def test_headers_in_request_order(self) -> None:
        options = parse_query_options(
            "", headers=[("Prefer", "kenya-timezone"), ("ConsistencyLevel", "eventual")]
        )
        assert [(h.name, h.value) for h in options.headers] == [
            ("Prefer", "kenya-timezone"),
            ("ConsistencyLevel", "eventual"),
        ]

    def test_reserved_headers_excluded(self) -> None:
        options = parse_query_options(
            "",
            headers=[("host", "graph.microsoft.com"), ("Authorization", "Bearer x"), ("Prefer", "a")],
        )
        assert [h.name for h in options.headers] == ["Prefer"]

    def test_custom_reserved_headers(self) -> None:
        options = parse_query_options("", headers=[("Prefer", "a")], reserved_headers=["prefer"])
        assert options.headers == ()
