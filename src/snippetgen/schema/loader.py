"""Load CSDL JSON schema documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw schema documents and converting
them into Python dictionaries. It supports both JSON and YAML renditions of
the OData CSDL JSON format with automatic format detection, and validates
that the document declares a supported CSDL version (4.0 or 4.01).

The public functions are:

* :func:`load_schema_document` -- Load and parse a document from any source.
* :func:`validate_csdl_version` -- Check and return the ``$Version`` string.
* :func:`load_schema_graph` -- Load, validate and build a
  :class:`~snippetgen.schema.graph.SchemaGraph` in one call.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from snippetgen.exceptions import SchemaLoadError
from snippetgen.schema.builder import build_schema_graph
from snippetgen.schema.graph import SchemaGraph

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS = ("4.0", "4.01")


def load_schema_document(source: str) -> dict[str, Any]:
    """Load a CSDL JSON document from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SchemaLoadError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


def load_schema_graph(source: str) -> SchemaGraph:
    """Load *source*, validate its CSDL version and build the schema graph."""
    document = load_schema_document(source)
    version = validate_csdl_version(document)
    logger.debug("Loaded CSDL %s document from %s", version, source)
    return build_schema_graph(document)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin and parse it as JSON, then YAML."""
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SchemaLoadError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SchemaLoadError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document from URL. Supports JSON and YAML responses.

    Raises:
        SchemaLoadError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(
            url,
            timeout=30.0,
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SchemaLoadError(
            f"HTTP {exc.response.status_code} fetching schema from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SchemaLoadError(f"Failed to fetch schema from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local .json, .yaml or .yml file.

    Falls back to content-based detection if the extension is not recognized.

    Raises:
        SchemaLoadError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SchemaLoadError(f"Schema file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaLoadError(f"Failed to read schema file {path}: {exc}") from exc

    if not content.strip():
        raise SchemaLoadError(f"Schema file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.

    Raises:
        SchemaLoadError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
            if not isinstance(result, dict):
                raise SchemaLoadError(
                    f"Schema must be a JSON/YAML object (got {type(result).__name__})"
                )
            return result
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SchemaLoadError(f"Invalid JSON: {exc}") from exc

    try:
        result = yaml.safe_load(content)
        if not isinstance(result, dict):
            raise SchemaLoadError(
                "Schema must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = "Failed to parse schema as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SchemaLoadError(msg)


def validate_csdl_version(document: dict[str, Any]) -> str:
    """Validate and return the CSDL ``$Version`` string.

    Supports CSDL 4.0 and 4.01. XML ``$metadata`` documents and OpenAPI
    descriptions are rejected with a pointer to the expected format.

    Raises:
        SchemaLoadError: If the version is missing or unsupported.
    """
    if "openapi" in document or "swagger" in document:
        raise SchemaLoadError(
            "This looks like an OpenAPI description. "
            "Expected an OData CSDL JSON document with a '$Version' field."
        )

    version = document.get("$Version")
    if version is None:
        raise SchemaLoadError(
            "Missing '$Version' field. Is this an OData CSDL JSON document?"
        )

    version_str = str(version)
    if version_str in _SUPPORTED_VERSIONS:
        return version_str

    raise SchemaLoadError(
        f"Unsupported CSDL version: {version_str}. Only 4.0 and 4.01 are supported."
    )
