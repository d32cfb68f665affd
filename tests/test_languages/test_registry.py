"""Tests for snippetgen.languages.registry."""

from __future__ import annotations

from typing import Sequence
from unittest.mock import MagicMock, patch

import pytest

from snippetgen.exceptions import LanguageError
from snippetgen.languages.javascript import JavascriptExpressions
from snippetgen.languages.registry import ENTRY_POINT_GROUP, LanguageRegistry
from snippetgen.models import LanguagesConfig


class _ODataExpressions(JavascriptExpressions):
    """Test provider emitting raw query syntax."""

    @property
    def name(self) -> str:
        return "odata"

    @property
    def aliases(self) -> tuple[str, ...]:
        return ("raw",)

    def select(self, fields: Sequence[str]) -> str:
        return "&$select=" + ",".join(fields)


def _entry_point(name: str, target: object) -> MagicMock:
    ep = MagicMock()
    ep.name = name
    ep.load.return_value = target
    return ep


@pytest.fixture
def no_entry_points():
    with patch("snippetgen.languages.registry.importlib.metadata.entry_points", return_value=[]):
        yield


class TestLookup:
    def test_builtins_by_name(self, no_entry_points: None) -> None:
        registry = LanguageRegistry.default()
        assert registry.get("javascript").name == "javascript"
        assert registry.get("csharp").name == "csharp"
        assert registry.get("java").name == "java"

    @pytest.mark.parametrize("alias,expected", [("js", "javascript"), ("C#", "csharp"), ("CS", "csharp")])
    def test_aliases_case_insensitive(self, no_entry_points: None, alias: str, expected: str) -> None:
        assert LanguageRegistry.default().get(alias).name == expected

    def test_unknown_language_raises(self, no_entry_points: None) -> None:
        with pytest.raises(LanguageError, match="Unknown language 'cobol'"):
            LanguageRegistry.default().get("cobol")

    def test_contains(self, no_entry_points: None) -> None:
        registry = LanguageRegistry.default()
        assert "js" in registry
        assert "cobol" not in registry

    def test_list_languages(self, no_entry_points: None) -> None:
        names = [entry["name"] for entry in LanguageRegistry.default().list_languages()]
        assert names == ["javascript", "csharp", "java"]


class TestFiltering:
    def test_enabled_list_is_allowlist(self, no_entry_points: None) -> None:
        registry = LanguageRegistry.default(LanguagesConfig(enabled=["java"]))
        assert "java" in registry
        assert "javascript" not in registry

    def test_disabled_list_is_blocklist(self, no_entry_points: None) -> None:
        registry = LanguageRegistry.default(LanguagesConfig(disabled=["csharp"]))
        assert "cs" not in registry
        assert "js" in registry


class TestRegistration:
    def test_duplicate_name_raises(self) -> None:
        registry = LanguageRegistry()
        registry.register(JavascriptExpressions())
        with pytest.raises(LanguageError, match="already registered"):
            registry.register(JavascriptExpressions())

    def test_discovers_entry_point_provider(self) -> None:
        eps = [_entry_point("odata", _ODataExpressions)]
        with patch("snippetgen.languages.registry.importlib.metadata.entry_points", return_value=eps) as mock:
            registry = LanguageRegistry.default()
        mock.assert_called_once_with(group=ENTRY_POINT_GROUP)
        assert registry.get("raw").select(["a"]) == "&$select=a"

    def test_builtin_entry_points_are_skipped(self) -> None:
        eps = [_entry_point("javascript", JavascriptExpressions)]
        with patch("snippetgen.languages.registry.importlib.metadata.entry_points", return_value=eps):
            registry = LanguageRegistry.default()
        eps[0].load.assert_not_called()
        assert registry.get("js").name == "javascript"

    def test_failing_entry_point_is_logged_and_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        ep = MagicMock()
        ep.name = "broken"
        ep.load.side_effect = ImportError("no module")
        with patch("snippetgen.languages.registry.importlib.metadata.entry_points", return_value=[ep]):
            with caplog.at_level("WARNING", logger="snippetgen.languages.registry"):
                registry = LanguageRegistry.default()
        assert "broken" not in registry
        assert "Failed to load language provider 'broken'" in caplog.text
