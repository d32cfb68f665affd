"""Languages command -- list the registered expression providers."""

from __future__ import annotations

from snippetgen.commands.generate import exit_on_error
from snippetgen.output import print_table


def languages_command() -> None:
    """List target languages available for query sections.

    Built-in providers are listed first, followed by any registered through
    the ``snippetgen.languages`` entry-point group.
    """
    from snippetgen.config import resolve_config
    from snippetgen.languages import LanguageRegistry

    with exit_on_error():
        config = resolve_config()
        registry = LanguageRegistry.default(config.languages)

    rows = [
        [entry["name"], entry["aliases"], entry["description"]]
        for entry in registry.list_languages()
    ]
    print_table(["name", "aliases", "description"], rows, title="Languages")
