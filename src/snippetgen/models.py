"""Canonical Pydantic models shared across all snippetgen modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`LanguagesConfig`, and :class:`GlobalConfig`.

**Schema models** -- produced by the schema builder and stored in the
:class:`~snippetgen.schema.graph.SchemaGraph`:
    :class:`TypeKind`, :class:`TypeReference`, :class:`SchemaType`,
    :class:`OperationKind`, :class:`OperationParameter`,
    :class:`BoundOperation`, and :class:`EntitySet`.

**Request models** -- produced while decomposing and resolving a request:
    :class:`HTTPMethod`, :class:`HttpRequest`, :class:`DecomposedRequest`,
    :class:`SegmentKind`, :class:`PathSegment`, :class:`QueryOptionKind`,
    :class:`QueryOption`, and :class:`QueryOptions`.

Schema and request models are frozen: once built they are never mutated, so
one loaded graph and one resolved request can be shared between several
snippet generators.
"""

from __future__ import annotations

import enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Config ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class LanguagesConfig(BaseModel):
    """Explicit expression-provider allow/deny lists stored in :class:`GlobalConfig`."""

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/snippetgen/config.json``.

    Loaded and saved by :func:`~snippetgen.config.load_global_config` and
    :func:`~snippetgen.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~snippetgen.config.resolve_config`
    for the full precedence chain.
    """

    default_language: str = Field(
        default="javascript", description="Expression provider used when none is given"
    )
    service_root: str = Field(
        default="https://graph.microsoft.com/v1.0",
        description="Service root URL stripped from request URLs",
    )
    schema_source: Optional[str] = Field(
        default=None, description="URL or file path to a CSDL JSON/YAML schema"
    )
    reserved_headers: list[str] = Field(
        default_factory=lambda: ["Host", "Content-Length", "Authorization"],
        description="Request headers never emitted as header fragments",
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
    languages: LanguagesConfig = Field(default_factory=LanguagesConfig)


# --- Schema ---


class TypeKind(str, enum.Enum):
    """Kinds of named types held by the schema graph."""

    PRIMITIVE = "Primitive"
    COMPLEX = "Complex"
    ENTITY = "Entity"
    ENUM = "Enum"


class TypeReference(BaseModel):
    """A reference to a named type, optionally wrapped in a collection.

    References store the qualified type name rather than the type itself so
    that cyclic navigation (``user -> manager -> user``) never produces an
    ownership cycle.
    """

    model_config = ConfigDict(frozen=True)

    type_name: str
    collection: bool = False


class SchemaType(BaseModel):
    """A named type: primitive, complex, entity or enum.

    ``properties`` and ``navigation_properties`` hold only the members
    declared directly on this type; inherited members are found by walking
    ``base_type`` through the graph.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    kind: TypeKind
    properties: dict[str, TypeReference] = Field(default_factory=dict)
    navigation_properties: dict[str, TypeReference] = Field(default_factory=dict)
    base_type: Optional[str] = None
    abstract: bool = False
    enum_members: tuple[str, ...] = ()

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}"


class OperationKind(str, enum.Enum):
    """Bound or imported operation kinds."""

    ACTION = "Action"
    FUNCTION = "Function"


class OperationParameter(BaseModel):
    """One declared (non-binding) parameter of an action or function."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeReference


class BoundOperation(BaseModel):
    """An action or function, either bound to a type or exposed as an import.

    ``binding`` is ``None`` for operations reachable only through the
    entity container (action/function imports).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    namespace: str
    kind: OperationKind
    binding: Optional[TypeReference] = None
    parameters: tuple[OperationParameter, ...] = ()
    return_type: Optional[TypeReference] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}"

    @property
    def is_bound(self) -> bool:
        return self.binding is not None

    def accepts(self, method: HTTPMethod) -> bool:
        """Return ``True`` if *method* is a verb this operation may be invoked with.

        Functions are side-effect free and require a read verb; actions
        require a write verb.
        """
        if self.kind == OperationKind.FUNCTION:
            return method.is_read
        return method.is_write

    def find_parameter(self, name: str) -> Optional[OperationParameter]:
        """Look up a parameter by name, ignoring case.

        Request bodies conventionally camel-case parameter names
        (``message``) while schemas often Pascal-case them (``Message``).
        """
        wanted = name.lower()
        for param in self.parameters:
            if param.name.lower() == wanted:
                return param
        return None


class EntitySet(BaseModel):
    """An entity set or singleton exposed by the entity container."""

    model_config = ConfigDict(frozen=True)

    name: str
    type_name: str
    is_singleton: bool = False


# --- Request ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods a captured request may carry."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @property
    def is_read(self) -> bool:
        return self in (HTTPMethod.GET, HTTPMethod.HEAD)

    @property
    def is_write(self) -> bool:
        return self in (HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH, HTTPMethod.DELETE)


class HttpRequest(BaseModel):
    """A captured HTTP request: method, URL, ordered headers, optional body.

    Headers are an ordered list of ``(name, value)`` pairs so that repeated
    headers and their original order survive. A plain dict is accepted for
    convenience and converted in insertion order.

    Example::

        HttpRequest(
            method="GET",
            url="https://graph.microsoft.com/v1.0/me/events?$top=5",
            headers={"Prefer": 'outlook.timezone="Pacific Standard Time"'},
        )
    """

    method: HTTPMethod
    url: str
    headers: list[tuple[str, str]] = Field(default_factory=list)
    body: Optional[str] = None

    @field_validator("method", mode="before")
    @classmethod
    def _normalise_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("headers", mode="before")
    @classmethod
    def _headers_from_mapping(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return list(value.items())
        return value


class DecomposedRequest(BaseModel):
    """Raw path elements, raw query string and headers split out of a request."""

    model_config = ConfigDict(frozen=True)

    path_segments: tuple[str, ...]
    query_string: str = ""
    headers: tuple[tuple[str, str], ...] = ()


class SegmentKind(str, enum.Enum):
    """What a resolved path segment denotes."""

    ENTITY_SET_ROOT = "EntitySetRoot"
    SINGLETON = "Singleton"
    KEY = "Key"
    NAVIGATION_PROPERTY = "NavigationProperty"
    STRUCTURAL_PROPERTY = "StructuralProperty"
    CAST = "Cast"
    ACTION = "Action"
    FUNCTION = "Function"


class PathSegment(BaseModel):
    """One resolved element of a resource path.

    ``reference`` is the schema element the identifier resolved to: a
    :class:`SchemaType` for data segments or a :class:`BoundOperation` for
    Action/Function segments. ``type_name`` is the qualified name of the
    type the segment addresses (the return type for operations, ``None``
    for operations returning nothing). ``arguments`` keeps the raw text of
    a parenthesised key or function argument list, if any. Key segments
    record the identifier of the collection they select from in ``owner``.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    kind: SegmentKind
    reference: Union[SchemaType, BoundOperation]
    type_name: Optional[str] = None
    is_collection: bool = False
    position: int = 0
    arguments: Optional[str] = None
    owner: Optional[str] = None

    @property
    def is_operation(self) -> bool:
        return self.kind in (SegmentKind.ACTION, SegmentKind.FUNCTION)


class QueryOptionKind(str, enum.Enum):
    """Recognised query options, declared in canonical emission order."""

    SELECT = "select"
    FILTER = "filter"
    SEARCH = "search"
    ORDER_BY = "orderby"
    SKIP = "skip"
    TOP = "top"
    COUNT = "count"
    EXPAND = "expand"
    HEADER = "header"


class QueryOption(BaseModel):
    """A single parsed query option.

    ``value`` is a tuple of field names for Select, an ``int`` for Skip and
    Top, a ``bool`` for Count and the raw string otherwise. Header options
    also carry the header ``name``.
    """

    model_config = ConfigDict(frozen=True)

    kind: QueryOptionKind
    value: Any
    name: Optional[str] = None


class QueryOptions(BaseModel):
    """The full set of options recognised in one request.

    System query options are keyed by kind (at most one each); header
    options are kept separately in request order.
    """

    model_config = ConfigDict(frozen=True)

    options: dict[QueryOptionKind, QueryOption] = Field(default_factory=dict)
    headers: tuple[QueryOption, ...] = ()

    def get(self, kind: QueryOptionKind) -> Optional[QueryOption]:
        return self.options.get(kind)

    def is_empty(self) -> bool:
        return not self.options and not self.headers
