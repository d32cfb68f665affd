"""Expression providers -- per-language rendering of query options.

Sub-modules:

* :mod:`~snippetgen.languages.base` -- :class:`ExpressionProvider`, the
  abstract interface every target language implements.
* :mod:`~snippetgen.languages.javascript`, :mod:`~snippetgen.languages.csharp`,
  :mod:`~snippetgen.languages.java` -- Built-in providers.
* :mod:`~snippetgen.languages.registry` -- :class:`LanguageRegistry`, name
  and alias lookup plus entry-point discovery.
"""

from snippetgen.languages.base import ExpressionProvider
from snippetgen.languages.csharp import CSharpExpressions
from snippetgen.languages.java import JavaExpressions
from snippetgen.languages.javascript import JavascriptExpressions
from snippetgen.languages.registry import ENTRY_POINT_GROUP, LanguageRegistry

__all__ = [
    "CSharpExpressions",
    "ENTRY_POINT_GROUP",
    "ExpressionProvider",
    "JavaExpressions",
    "JavascriptExpressions",
    "LanguageRegistry",
]
