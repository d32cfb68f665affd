"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~snippetgen.exceptions.SnippetGenError` subclass.
Shell wrappers can inspect the exit code to tell a bad URL apart from a
broken schema without parsing stderr.

Example::

    $ snippetgen resolve GET https://graph.microsoft.com/v1.0/me/nope
    $ echo $?
    4   # EXIT_RESOLUTION_FAILURE -- 'nope' is not a member of microsoft.graph.user
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or a malformed request."""

EXIT_RESOLUTION_FAILURE = 4
"""A path identifier could not be matched against the schema."""

EXIT_UNSUPPORTED_SEGMENT = 5
"""A resolved schema element does not map to any known segment kind."""

EXIT_VERB_MISMATCH = 6
"""A bound operation was addressed with an incompatible HTTP method."""

EXIT_SCHEMA_LOAD_ERROR = 7
"""The schema document could not be loaded, parsed, or validated."""

EXIT_LANGUAGE_ERROR = 10
"""An expression provider failed to load or is unknown."""
