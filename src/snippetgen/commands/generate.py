"""Generate commands -- run one captured request through the pipeline.

Provides three commands registered directly on the root app:

* ``snippetgen resolve METHOD URL`` -- table of resolved path segments.
* ``snippetgen query METHOD URL`` -- query section in the chosen language.
* ``snippetgen class-name METHOD URL [IDENT...]`` -- qualified type name.

All three resolve the effective configuration, load the schema graph from
``--schema`` (or the configured ``schema_source``), and build a
:class:`~snippetgen.snippet.RequestModel`. Pipeline errors are reported on
stderr and turned into the error's exit code.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import typer

from snippetgen.exceptions import InvalidUsageError, SnippetGenError
from snippetgen.models import GlobalConfig, HttpRequest
from snippetgen.output import (
    OutputFormat,
    debug,
    error,
    get_output,
    print_code,
    print_data,
    print_table,
)


_HEADER_HELP = "Request header as 'Name: value'. Repeatable."


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report a :class:`~snippetgen.exceptions.SnippetGenError` and exit with its code."""
    try:
        yield
    except SnippetGenError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def parse_header(raw: str) -> tuple[str, str]:
    """Split ``"Name: value"`` (or ``"Name=value"``) into a header pair.

    Raises:
        InvalidUsageError: If *raw* has no separator or an empty name.
    """
    sep = ":" if ":" in raw else "="
    name, found, value = raw.partition(sep)
    if not found or not name.strip():
        raise InvalidUsageError(f"Invalid header '{raw}' (expected 'Name: value')")
    return name.strip(), value.strip()


def _effective_config(ctx: typer.Context) -> GlobalConfig:
    from snippetgen.config import resolve_config

    obj = ctx.obj or {}
    return resolve_config(
        cli_language=obj.get("language"),
        cli_schema=obj.get("schema"),
        cli_service_root=obj.get("service_root"),
    )


def _build_model(
    ctx: typer.Context,
    method: str,
    url: str,
    headers: Optional[list[str]],
    body: Optional[str] = None,
):  # noqa: ANN202
    """Resolve config, load the schema and build the request model."""
    from snippetgen.schema import load_schema_graph
    from snippetgen.snippet import build_request_model

    config = _effective_config(ctx)
    if not config.schema_source:
        raise InvalidUsageError(
            "No schema configured. Pass --schema or set SNIPPETGEN_SCHEMA."
        )
    debug(f"Loading schema from {config.schema_source}")
    graph = load_schema_graph(config.schema_source)

    request = HttpRequest(
        method=method,
        url=url,
        headers=[parse_header(h) for h in headers or []],
        body=body,
    )
    return build_request_model(
        request,
        graph,
        service_root=config.service_root,
        reserved_headers=config.reserved_headers,
    ), config


def resolve_command(
    ctx: typer.Context,
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    url: str = typer.Argument(help="Request URL, absolute or root-relative."),
) -> None:
    """Show how each path element of a request resolves against the schema.

    Example::

        snippetgen --schema graph.json resolve GET /me/messages/{id}/attachments
    """
    with exit_on_error():
        model, _ = _build_model(ctx, method, url, None)

    rows = [
        [
            str(segment.position),
            segment.identifier,
            segment.kind.value,
            segment.type_name or "",
            "yes" if segment.is_collection else "no",
        ]
        for segment in model.segments
    ]
    print_table(
        ["position", "identifier", "kind", "type", "collection"],
        rows,
        title=f"{model.method.value} {url}",
    )


def query_command(
    ctx: typer.Context,
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    url: str = typer.Argument(help="Request URL including its query string."),
    header: Optional[list[str]] = typer.Option(None, "--header", "-H", help=_HEADER_HELP),
    language: Optional[str] = typer.Option(
        None, "--language", "-l", help="Target language (default from config)."
    ),
) -> None:
    """Print the query section of a snippet for a request.

    Example::

        snippetgen --schema graph.json query GET '/me/people?$top=5' -l csharp
    """
    from snippetgen.languages import LanguageRegistry

    with exit_on_error():
        model, config = _build_model(ctx, method, url, header)
        registry = LanguageRegistry.default(config.languages)
        provider = registry.get(language or config.default_language)
        section = model.generate_query_section(provider)

    debug(f"Rendered query section with provider '{provider.name}'")
    print_code(section, provider.name)


def class_name_command(
    ctx: typer.Context,
    method: str = typer.Argument(help="HTTP method, e.g. POST."),
    url: str = typer.Argument(help="Request URL."),
    identifiers: Optional[list[str]] = typer.Argument(
        None, help="Identifier chain, outermost first (e.g. message toRecipients)."
    ),
) -> None:
    """Print the qualified type name an identifier chain lands on.

    Example::

        snippetgen --schema graph.json class-name POST /me/sendMail message
    """
    with exit_on_error():
        model, _ = _build_model(ctx, method, url, None)
        name = model.class_name_of(identifiers or [])

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_json({"identifiers": identifiers or [], "class_name": name})
    else:
        print_data(name)
