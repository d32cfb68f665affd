"""Exception hierarchy for snippetgen.

All exceptions inherit from :class:`SnippetGenError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`snippetgen.exit_codes`.
The top-level error handler in :func:`snippetgen.app.main` catches
``SnippetGenError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SnippetGenError (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- MalformedQueryOption     (exit 2)
    +-- SchemaResolutionError    (exit 4)
    +-- UnsupportedSegmentKind   (exit 5)
    +-- VerbMismatch             (exit 6)
    +-- SchemaLoadError          (exit 7)
    +-- LanguageError            (exit 10)
    +-- ConfigError              (exit 1)
"""

from __future__ import annotations

from snippetgen.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_LANGUAGE_ERROR,
    EXIT_RESOLUTION_FAILURE,
    EXIT_SCHEMA_LOAD_ERROR,
    EXIT_UNSUPPORTED_SEGMENT,
    EXIT_VERB_MISMATCH,
)


class SnippetGenError(Exception):
    """Base exception for all snippetgen errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`snippetgen.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SnippetGenError):
    """Raised for invalid CLI arguments or a request that cannot be decomposed."""

    exit_code = EXIT_INVALID_USAGE


class SchemaResolutionError(SnippetGenError):
    """Raised when a path identifier matches no edge from the current type context.

    Attributes:
        identifier: The raw identifier that failed to resolve.
        position: Zero-based ordinal of the identifier in its sequence.
    """

    exit_code = EXIT_RESOLUTION_FAILURE

    def __init__(self, identifier: str, position: int, context: str | None = None):
        message = f"Cannot resolve '{identifier}' at position {position}"
        if context:
            message += f" (no matching member on {context})"
        super().__init__(message)
        self.identifier = identifier
        self.position = position


class UnsupportedSegmentKind(SnippetGenError):
    """Raised when a resolved reference does not correspond to a known segment kind.

    This indicates a mismatch between the schema graph and the resolver
    rather than a problem with the request itself.
    """

    exit_code = EXIT_UNSUPPORTED_SEGMENT


class MalformedQueryOption(SnippetGenError):
    """Raised when a query option carries a value of the wrong shape.

    Attributes:
        option: The canonical option name (e.g. ``"$top"``).
        value: The raw value found in the query string.
    """

    exit_code = EXIT_INVALID_USAGE

    def __init__(self, option: str, value: str, expected: str):
        super().__init__(f"Invalid value for {option}: '{value}' (expected {expected})")
        self.option = option
        self.value = value


class VerbMismatch(SnippetGenError):
    """Raised when a bound operation is addressed with an incompatible HTTP method.

    Functions must be invoked with a read verb and actions with a write
    verb. Raised only when the operation name matched but no overload
    accepts the request method.
    """

    exit_code = EXIT_VERB_MISMATCH

    def __init__(self, identifier: str, position: int, method: str, operation_kind: str):
        super().__init__(
            f"{operation_kind.capitalize()} '{identifier}' at position {position} "
            f"cannot be invoked with {method.upper()}"
        )
        self.identifier = identifier
        self.position = position
        self.method = method


class SchemaLoadError(SnippetGenError):
    """Raised when the schema document cannot be loaded, parsed, or validated."""

    exit_code = EXIT_SCHEMA_LOAD_ERROR


class LanguageError(SnippetGenError):
    """Raised when an expression provider is unknown or fails to load."""

    exit_code = EXIT_LANGUAGE_ERROR


class ConfigError(SnippetGenError):
    """Raised for configuration problems (invalid JSON, bad field values)."""

    exit_code = EXIT_GENERIC_FAILURE
