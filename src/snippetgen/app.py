"""Typer application factory and CLI entry point for snippetgen.

This module wires together the top-level Typer application and registers the
built-in commands (``resolve``, ``query``, ``class-name``, ``languages``,
``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~snippetgen.exceptions.SnippetGenError` exits with the error's code;
any other exception is written to a crash log under the data directory.

See Also:
    :mod:`snippetgen.config`: Configuration resolution.
    :mod:`snippetgen.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from snippetgen import __version__
from snippetgen.commands.config import config_app
from snippetgen.commands.generate import class_name_command, query_command, resolve_command
from snippetgen.commands.languages import languages_command
from snippetgen.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="snippetgen",
    help="Resolve OData requests against a CSDL schema and render query snippets.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("resolve")(resolve_command)
app.command("query")(query_command)
app.command("class-name")(class_name_command)
app.command("languages")(languages_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"snippetgen {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    schema: Optional[str] = typer.Option(
        None, "--schema", "-s", help="CSDL JSON/YAML schema file or URL."
    ),
    service_root: Optional[str] = typer.Option(
        None, "--service-root", help="Service root URL stripped from request URLs."
    ),
    language: Optional[str] = typer.Option(
        None, "--language", help="Default target language for query sections."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~snippetgen.output.OutputManager` and log
    routing from CLI flags, and stores the schema, service-root and language overrides
    in the Typer context so that sub-commands can read them via ``ctx.obj``.
    """
    from snippetgen.output import OutputFormat, OutputManager, configure_logging, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    configure_logging(output)

    ctx.ensure_object(dict)
    ctx.obj["schema"] = schema
    ctx.obj["service_root"] = service_root
    ctx.obj["language"] = language
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from snippetgen.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``snippetgen`` console script.

    Unhandled :class:`~snippetgen.exceptions.SnippetGenError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from snippetgen.exceptions import SnippetGenError
        from snippetgen.output import error

        if isinstance(exc, SnippetGenError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
