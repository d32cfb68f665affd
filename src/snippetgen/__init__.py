"""snippetgen -- Resolve captured OData requests into typed snippet models.

This package takes a captured HTTP request against an OData service such as
Microsoft Graph, resolves its resource path against the service's CSDL
schema, and renders its query options as code fragments for a target
client library.

Typical workflow::

    snippetgen --schema graph.csdl.json resolve GET /me/messages
    snippetgen --schema graph.csdl.json query GET '/me/people?$top=5' -l js
    snippetgen --schema graph.csdl.json class-name POST /me/sendMail message

Modules:
    app: Typer application factory and CLI entry point.
    snippet: RequestModel, the resolved request consumed by templates.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
