"""Build a :class:`~snippetgen.schema.graph.SchemaGraph` from a CSDL JSON document.

This module walks an OData CSDL JSON document (as returned by
:func:`~snippetgen.schema.loader.load_schema_document`) and builds the flat,
name-indexed graph the resolvers work on.

The single public entry point is :func:`build_schema_graph`. Internally it
delegates to private helpers that each handle one kind of schema member:

* ``_extract_structured_type`` -- ``EntityType`` and ``ComplexType`` members
  with their structural and navigation properties.
* ``_extract_enum_type`` -- ``EnumType`` members.
* ``_extract_operation`` -- one overload of an ``Action`` or ``Function``.
* ``_extract_container`` -- entity sets, singletons and operation imports of
  the entity container.

Every type reference is qualified (namespace aliases expanded) at build time
and checked against the finished graph, so dangling references surface as a
:class:`~snippetgen.exceptions.SchemaLoadError` here rather than as a
confusing resolution failure later.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

from snippetgen.exceptions import SchemaLoadError
from snippetgen.models import (
    BoundOperation,
    EntitySet,
    OperationKind,
    OperationParameter,
    SchemaType,
    TypeKind,
    TypeReference,
)
from snippetgen.schema.graph import SchemaGraph

logger = logging.getLogger(__name__)

_DEFAULT_TYPE = "Edm.String"

_STRUCTURED_KINDS = {
    "EntityType": TypeKind.ENTITY,
    "ComplexType": TypeKind.COMPLEX,
}


def build_schema_graph(document: dict[str, Any]) -> SchemaGraph:
    """Build a :class:`~snippetgen.schema.graph.SchemaGraph` from a CSDL JSON dict.

    Args:
        document: The parsed CSDL JSON document, with schema namespaces as
            top-level keys and an optional ``$EntityContainer`` naming the
            container.

    Returns:
        A fully indexed, immutable schema graph.

    Raises:
        SchemaLoadError: If the document is structurally invalid or refers
            to a type that is not declared.

    Example::

        doc = load_schema_document("graph.json")
        validate_csdl_version(doc)
        graph = build_schema_graph(doc)
        graph.find_entity_set("users").type_name  # 'microsoft.graph.user'
    """
    aliases = _collect_aliases(document)

    types: list[SchemaType] = []
    bound: list[BoundOperation] = []
    unbound: dict[str, list[BoundOperation]] = {}
    containers: dict[str, dict[str, Any]] = {}

    for namespace, schema in _iter_schemas(document):
        for name, member in schema.items():
            if name.startswith("$"):
                continue
            if isinstance(member, list):
                for overload in member:
                    op = _extract_operation(namespace, name, overload, aliases)
                    if op.is_bound:
                        bound.append(op)
                    else:
                        unbound.setdefault(op.qualified_name, []).append(op)
                continue
            if not isinstance(member, dict):
                raise SchemaLoadError(f"Schema member '{namespace}.{name}' must be an object")

            kind = member.get("$Kind")
            if kind in _STRUCTURED_KINDS:
                types.append(_extract_structured_type(namespace, name, member, aliases))
            elif kind == "EnumType":
                types.append(_extract_enum_type(namespace, name, member))
            elif kind == "TypeDefinition":
                types.append(SchemaType(name=name, namespace=namespace, kind=TypeKind.PRIMITIVE))
            elif kind == "EntityContainer":
                containers[f"{namespace}.{name}"] = member
            else:
                logger.debug("Skipping schema member '%s.%s' of kind %s", namespace, name, kind)

    entity_sets, imports = _extract_container(document, containers, unbound, aliases)

    graph = SchemaGraph(
        types=types,
        entity_sets=entity_sets,
        operations=bound,
        operation_imports=imports,
        aliases=aliases,
    )
    _check_references(graph, bound, unbound)
    logger.debug(
        "Built schema graph: %d types, %d entity sets, %d bound operations",
        len(types),
        len(entity_sets),
        len(bound),
    )
    return graph


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _iter_schemas(document: dict[str, Any]) -> Iterator[tuple[str, dict[str, Any]]]:
    """Yield ``(namespace, schema)`` pairs for every schema in the document."""
    for key, value in document.items():
        if key.startswith("$"):
            continue
        if not isinstance(value, dict):
            raise SchemaLoadError(f"Schema '{key}' must be an object")
        yield key, value


def _collect_aliases(document: dict[str, Any]) -> dict[str, str]:
    aliases: dict[str, str] = {}
    for namespace, schema in _iter_schemas(document):
        alias = schema.get("$Alias")
        if alias:
            aliases[alias] = namespace
    return aliases


def _qualify(name: str, aliases: dict[str, str]) -> str:
    namespace, _, short = name.rpartition(".")
    if namespace in aliases:
        return f"{aliases[namespace]}.{short}"
    return name


def _type_reference(member: dict[str, Any], aliases: dict[str, str]) -> TypeReference:
    return TypeReference(
        type_name=_qualify(member.get("$Type", _DEFAULT_TYPE), aliases),
        collection=bool(member.get("$Collection", False)),
    )


def _extract_structured_type(
    namespace: str,
    name: str,
    member: dict[str, Any],
    aliases: dict[str, str],
) -> SchemaType:
    """Extract an entity or complex type with its declared properties.

    Members whose ``$Kind`` is ``NavigationProperty`` become navigation
    edges; every other object-valued member is a structural property
    (``$Kind`` defaults to ``Property`` in CSDL JSON).
    """
    properties: dict[str, TypeReference] = {}
    navigation: dict[str, TypeReference] = {}
    for prop_name, prop in member.items():
        if prop_name.startswith("$") or "@" in prop_name:
            continue
        if not isinstance(prop, dict):
            raise SchemaLoadError(
                f"Property '{prop_name}' of '{namespace}.{name}' must be an object"
            )
        if prop.get("$Kind") == "NavigationProperty":
            navigation[prop_name] = _type_reference(prop, aliases)
        else:
            properties[prop_name] = _type_reference(prop, aliases)

    base_type = member.get("$BaseType")
    return SchemaType(
        name=name,
        namespace=namespace,
        kind=_STRUCTURED_KINDS[member["$Kind"]],
        properties=properties,
        navigation_properties=navigation,
        base_type=_qualify(base_type, aliases) if base_type else None,
        abstract=bool(member.get("$Abstract", False)),
    )


def _extract_enum_type(namespace: str, name: str, member: dict[str, Any]) -> SchemaType:
    members = tuple(
        key for key in member
        if not key.startswith("$") and "@" not in key
    )
    return SchemaType(name=name, namespace=namespace, kind=TypeKind.ENUM, enum_members=members)


def _extract_operation(
    namespace: str,
    name: str,
    overload: Any,
    aliases: dict[str, str],
) -> BoundOperation:
    """Extract one overload of an action or function.

    For bound operations the first ``$Parameter`` is the binding parameter;
    it becomes :attr:`~snippetgen.models.BoundOperation.binding` and is not
    listed among the declared parameters.
    """
    if not isinstance(overload, dict):
        raise SchemaLoadError(f"Overload of '{namespace}.{name}' must be an object")
    kind_value = overload.get("$Kind")
    try:
        kind = OperationKind(kind_value)
    except ValueError:
        raise SchemaLoadError(
            f"'{namespace}.{name}' has unsupported operation kind {kind_value!r}"
        ) from None

    raw_params = overload.get("$Parameter", [])
    is_bound = bool(overload.get("$IsBound", False))
    binding: Optional[TypeReference] = None
    if is_bound:
        if not raw_params:
            raise SchemaLoadError(
                f"Bound {kind.value.lower()} '{namespace}.{name}' has no binding parameter"
            )
        binding = _type_reference(raw_params[0], aliases)
        raw_params = raw_params[1:]

    if any(not isinstance(p, dict) or "$Name" not in p for p in raw_params):
        raise SchemaLoadError(f"Parameter of '{namespace}.{name}' has no $Name")
    parameters = tuple(
        OperationParameter(name=p["$Name"], type=_type_reference(p, aliases))
        for p in raw_params
    )
    return_type = overload.get("$ReturnType")
    return BoundOperation(
        name=name,
        namespace=namespace,
        kind=kind,
        binding=binding,
        parameters=parameters,
        return_type=_type_reference(return_type, aliases) if return_type else None,
    )


def _extract_container(
    document: dict[str, Any],
    containers: dict[str, dict[str, Any]],
    unbound: dict[str, list[BoundOperation]],
    aliases: dict[str, str],
) -> tuple[list[EntitySet], dict[str, list[BoundOperation]]]:
    """Extract entity sets, singletons and operation imports from the container.

    The container named by ``$EntityContainer`` is used; when the document
    omits it and declares exactly one container, that one is used.
    """
    container_name = document.get("$EntityContainer")
    if container_name:
        container = containers.get(_qualify(container_name, aliases))
        if container is None:
            raise SchemaLoadError(f"Entity container '{container_name}' is not declared")
    elif len(containers) == 1:
        container = next(iter(containers.values()))
    elif not containers:
        return [], {}
    else:
        raise SchemaLoadError("Multiple entity containers declared but $EntityContainer is missing")

    entity_sets: list[EntitySet] = []
    imports: dict[str, list[BoundOperation]] = {}
    for name, member in container.items():
        if name.startswith("$") or not isinstance(member, dict):
            continue
        target = member.get("$Action") or member.get("$Function")
        if target:
            ops = unbound.get(_qualify(target, aliases))
            if not ops:
                raise SchemaLoadError(f"Operation import '{name}' refers to unknown '{target}'")
            imports[name] = ops
            continue
        if "$Type" not in member:
            raise SchemaLoadError(f"Container member '{name}' has no $Type")
        entity_sets.append(
            EntitySet(
                name=name,
                type_name=_qualify(member["$Type"], aliases),
                is_singleton=not member.get("$Collection", False),
            )
        )
    return entity_sets, imports


def _check_references(
    graph: SchemaGraph,
    bound: list[BoundOperation],
    unbound: dict[str, list[BoundOperation]],
) -> None:
    """Raise :class:`SchemaLoadError` for the first reference to an undeclared type."""

    def check(ref_name: str, where: str) -> None:
        if graph.find_type(ref_name) is None:
            raise SchemaLoadError(f"{where} refers to undeclared type '{ref_name}'")

    for t in graph.types:
        if t.base_type:
            check(t.base_type, f"Base type of '{t.qualified_name}'")
        for name, ref in {**t.properties, **t.navigation_properties}.items():
            check(ref.type_name, f"Property '{t.qualified_name}/{name}'")

    for es in graph.entity_sets:
        check(es.type_name, f"Entity set '{es.name}'")

    operations = list(bound) + [op for ops in unbound.values() for op in ops]
    for op in operations:
        if op.binding is not None:
            check(op.binding.type_name, f"Binding of '{op.qualified_name}'")
        for param in op.parameters:
            check(param.type.type_name, f"Parameter '{param.name}' of '{op.qualified_name}'")
        if op.return_type is not None:
            check(op.return_type.type_name, f"Return type of '{op.qualified_name}'")
