"""Language registry -- discovery and lookup of expression providers.

:class:`LanguageRegistry` holds the expression providers the CLI and library
can render snippets with. The three built-in providers are always available;
third-party packages add more by registering an entry point under the
``snippetgen.languages`` group in their ``pyproject.toml``::

    [project.entry-points."snippetgen.languages"]
    python = "my_package.python_provider:PythonExpressions"

Providers are looked up case-insensitively by canonical name or by any of
their aliases (``js``, ``cs``, ...).
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Optional

from snippetgen.exceptions import LanguageError
from snippetgen.languages.base import ExpressionProvider
from snippetgen.languages.csharp import CSharpExpressions
from snippetgen.languages.java import JavaExpressions
from snippetgen.languages.javascript import JavascriptExpressions
from snippetgen.models import LanguagesConfig

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "snippetgen.languages"
"""The entry-point group name used for provider discovery."""

BUILTIN_PROVIDERS: tuple[type[ExpressionProvider], ...] = (
    JavascriptExpressions,
    CSharpExpressions,
    JavaExpressions,
)


class LanguageRegistry:
    """Registers expression providers and resolves language names to them.

    The *enabled* and *disabled* lists of
    :class:`~snippetgen.models.LanguagesConfig` act as an allowlist and a
    blocklist on canonical names. When *enabled* is non-empty only those
    providers are registered; otherwise every provider not in *disabled* is.

    Example:
        Typical usage::

            registry = LanguageRegistry.default(config.languages)
            provider = registry.get("js")
            provider.top(5)   # "\\n\\t.top(5)"
    """

    def __init__(self, config: Optional[LanguagesConfig] = None) -> None:
        self._config = config or LanguagesConfig()
        self._providers: dict[str, ExpressionProvider] = {}
        self._aliases: dict[str, str] = {}

    @classmethod
    def default(cls, config: Optional[LanguagesConfig] = None) -> LanguageRegistry:
        """Build a registry holding the built-in and entry-point providers."""
        registry = cls(config)
        for provider_cls in BUILTIN_PROVIDERS:
            registry.register(provider_cls())
        registry.discover()
        return registry

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def discover(self) -> list[str]:
        """Load third-party providers registered under :data:`ENTRY_POINT_GROUP`.

        Providers that fail to import or instantiate are logged as warnings
        and skipped. Entry points whose name is already registered (for
        example a built-in) are skipped too.

        Returns:
            The canonical names of the providers that were registered.
        """
        loaded: list[str] = []
        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            if ep.name.lower() in self._providers:
                logger.debug("Language '%s' already registered, skipping entry point", ep.name)
                continue
            try:
                provider_cls = ep.load()
                provider: ExpressionProvider = provider_cls()
            except Exception as exc:
                logger.warning("Failed to load language provider '%s': %s", ep.name, exc)
                continue
            if self.register(provider):
                loaded.append(provider.name)
        return loaded

    def register(self, provider: ExpressionProvider) -> bool:
        """Register *provider* unless the config filters it out.

        Args:
            provider: The provider instance to register.

        Returns:
            ``True`` if the provider was registered, ``False`` if the
            enabled/disabled lists excluded it.

        Raises:
            LanguageError: If the provider's name or one of its aliases is
                already taken.
        """
        name = provider.name.lower()
        enabled = {n.lower() for n in self._config.enabled}
        disabled = {n.lower() for n in self._config.disabled}
        if enabled and name not in enabled:
            logger.debug("Language '%s' not in enabled list, skipping", name)
            return False
        if name in disabled:
            logger.debug("Language '%s' is disabled, skipping", name)
            return False

        keys = [name, *(alias.lower() for alias in provider.aliases)]
        for key in keys:
            if key in self._providers or key in self._aliases:
                raise LanguageError(f"Language name '{key}' is already registered")

        self._providers[name] = provider
        for alias in keys[1:]:
            self._aliases[alias] = name
        logger.debug("Registered language '%s'", name)
        return True

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def get(self, name: str) -> ExpressionProvider:
        """Return the provider registered as *name* or under the alias *name*.

        Raises:
            LanguageError: If no provider matches.
        """
        key = name.strip().lower()
        key = self._aliases.get(key, key)
        try:
            return self._providers[key]
        except KeyError:
            available = ", ".join(sorted(self._providers)) or "none"
            raise LanguageError(
                f"Unknown language '{name}' (available: {available})"
            ) from None

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.strip().lower()
        return key in self._providers or key in self._aliases

    def list_languages(self) -> list[dict[str, str]]:
        """List registered providers with their aliases and description."""
        return [
            {
                "name": provider.name,
                "aliases": ", ".join(provider.aliases),
                "description": provider.description,
            }
            for provider in self._providers.values()
        ]
