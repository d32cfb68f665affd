"""Shared test fixtures for snippetgen.

Provides reusable fixtures for loading the schema fixture, creating isolated
config environments, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from snippetgen.models import HTTPMethod, HttpRequest
from snippetgen.output import OutputFormat, OutputManager, reset_output, set_output
from snippetgen.schema.builder import build_schema_graph
from snippetgen.schema.graph import SchemaGraph


FIXTURES_DIR = Path(__file__).parent / "fixtures"
GRAPH_SCHEMA = FIXTURES_DIR / "graph_schema.json"
SERVICE_ROOT = "https://graph.microsoft.com/v1.0"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use. Log
    handlers bound to those streams are removed for the same reason.
    """
    yield
    reset_output()
    snippetgen_logger = logging.getLogger("snippetgen")
    for handler in list(snippetgen_logger.handlers):
        snippetgen_logger.removeHandler(handler)
    snippetgen_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Schema fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def graph_schema_raw() -> dict[str, Any]:
    """Load the raw Microsoft Graph shaped CSDL JSON document."""
    with open(GRAPH_SCHEMA) as f:
        return json.load(f)


@pytest.fixture
def graph(graph_schema_raw: dict[str, Any]) -> SchemaGraph:
    """Schema graph built from the Graph fixture."""
    return build_schema_graph(graph_schema_raw)


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def make_request():
    """Factory building an HttpRequest for a path under the Graph v1.0 service root."""

    def _make(method: str, path: str, headers: Any = None, body: Any = None) -> HttpRequest:
        return HttpRequest(
            method=HTTPMethod(method.upper()),
            url=f"{SERVICE_ROOT}{path}",
            headers=headers or [],
            body=body,
        )

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config. Clears all SNIPPETGEN_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "SNIPPETGEN_LANGUAGE",
        "SNIPPETGEN_SCHEMA",
        "SNIPPETGEN_SERVICE_ROOT",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
