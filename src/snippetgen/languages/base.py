"""Abstract base class for per-language expression providers.

An expression provider turns one query option into one text fragment in the
idiom of a target client library (``.select('a,b')`` for the JavaScript SDK,
``.Select("a,b")`` for the .NET SDK, ...). Providers are pure and stateless:
every method maps its arguments to a string and nothing else.

Values reach the provider already validated by
:func:`~snippetgen.query.parser.parse_query_options`, so no method may fail.
Opaque expressions (filter, orderby, expand, search) are emitted verbatim,
without re-escaping.

Example:
    Minimal provider that renders raw OData query syntax::

        class ODataProvider(ExpressionProvider):
            @property
            def name(self) -> str:
                return "odata"

            def select(self, fields):
                return f"&$select={join_list(fields, ',')}"
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence


class ExpressionProvider(ABC):
    """Base class for all expression providers.

    Subclasses implement :attr:`name` and one method per query option. The
    :class:`~snippetgen.languages.registry.LanguageRegistry` instantiates
    providers with a no-arg constructor.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the canonical language name used for lookup (e.g. ``"javascript"``)."""
        ...

    @property
    def aliases(self) -> tuple[str, ...]:
        """Return alternative lookup names. Defaults to none."""
        return ()

    @property
    def description(self) -> str:
        """Return a one-line description of the target client library."""
        return ""

    @abstractmethod
    def select(self, fields: Sequence[str]) -> str:
        """Fragment restricting the returned properties to *fields*."""

    @abstractmethod
    def filter(self, expression: str) -> str:
        """Fragment applying the boolean filter *expression*."""

    @abstractmethod
    def search(self, term: str) -> str:
        """Fragment applying the free-text search *term*."""

    @abstractmethod
    def order_by(self, expression: str) -> str:
        """Fragment applying the ordering *expression*."""

    @abstractmethod
    def skip(self, count: int) -> str:
        """Fragment skipping the first *count* results."""

    @abstractmethod
    def top(self, count: int) -> str:
        """Fragment limiting the page size to *count*."""

    @abstractmethod
    def count(self, flag: bool) -> str:
        """Fragment requesting (or not) the total result count."""

    @abstractmethod
    def expand(self, expression: str) -> str:
        """Fragment expanding related entities per *expression*."""

    @abstractmethod
    def header(self, name: str, value: str) -> str:
        """Fragment adding request header *name* with *value*."""
