"""Built-in CLI sub-commands for snippetgen.

This package groups the Typer command modules that form the CLI's
top-level command tree:

* :mod:`~snippetgen.commands.generate` -- ``resolve``, ``query`` and
  ``class-name``: run one captured request through the pipeline.
* :mod:`~snippetgen.commands.languages` -- list registered expression
  providers.
* :mod:`~snippetgen.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``config``) or plain callback functions
registered directly on the root app.
"""
