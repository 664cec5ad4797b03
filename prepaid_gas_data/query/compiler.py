"""
GraphQL compilation

Turns an EntityDescriptor + QueryConfig into a query document and its
variables. Output is deterministic: equal inputs give byte-identical
documents and equal variables.

    query GetPools($first: Int!, $skip: Int!, $memberCount_gte: BigInt) {
      pools(where: { memberCount_gte: $memberCount_gte }, orderBy: memberCount, orderDirection: desc, first: $first, skip: $skip) {
        id
        memberCount
      }
    }

Variable types follow field conventions: ``id`` -> ID, BigInt fields of the
entity -> BigInt, Int fields -> Int, boolean values -> Boolean, anything
else -> String. ``_in`` / ``_not_in`` filters wrap the type as ``[T!]``.
Filters with a None value render as a ``null`` literal and get no variable.
Nested filters are named ``relation_field`` (``pool_: { id }`` -> ``$pool_id``);
a name already taken gets a numeric suffix (``$pool_id_2``).
"""

from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Type

from ..constants import DEFAULT_LIMIT
from ..data.types import SubgraphEntity
from ..transformers.wire import convert_big_ints_to_strings
from .filters import Filter, FilterNode, RelationFilter, to_filters
from .types import DESCRIPTORS, EntityDescriptor, QueryConfig, RelationSelection

INDENT = "  "
RESERVED_VARIABLES = frozenset({"first", "skip"})


class CompiledQuery(NamedTuple):
    document: str
    variables: Dict[str, Any]


class _Variable(NamedTuple):
    name: str
    graphql_type: str
    value: Any


def _variable_name(prefix: str, key: str) -> str:
    return f"{prefix}_{key}" if prefix else key


def _unique_name(name: str, variables: List[_Variable]) -> str:
    taken = RESERVED_VARIABLES | {existing.name for existing in variables}
    candidate, suffix = name, 2
    while candidate in taken:
        candidate = f"{name}_{suffix}"
        suffix += 1
    return candidate


def _graphql_type(entity_type: Type[SubgraphEntity], node: Filter) -> str:
    sample = node.value[0] if node.op.is_list and node.value else node.value
    if isinstance(sample, bool):
        scalar = "Boolean"
    else:
        scalar = entity_type.scalar_type(node.field)
    return f"[{scalar}!]" if node.op.is_list else scalar


def _coerce(graphql_type: str, value: Any) -> Any:
    # Int travels as a JSON number, everything else as strings
    if graphql_type.strip("[]!") == "Int":
        return value
    return convert_big_ints_to_strings(value)


def _render_where(
    nodes: Iterable[FilterNode],
    entity_type: Type[SubgraphEntity],
    prefix: str,
    variables: List[_Variable],
) -> str:
    parts = []
    for node in nodes:
        if isinstance(node, RelationFilter):
            related = entity_type.related_type(node.relation) or SubgraphEntity
            inner = _render_where(node.filters, related, _variable_name(prefix, node.relation), variables)
            parts.append(f"{node.key}: {inner}")
            continue

        if node.value is None:
            parts.append(f"{node.key}: null")
            continue

        name = _unique_name(_variable_name(prefix, node.key), variables)
        graphql_type = _graphql_type(entity_type, node)
        variables.append(_Variable(name, graphql_type, _coerce(graphql_type, node.value)))
        parts.append(f"{node.key}: ${name}")
    return "{ " + ", ".join(parts) + " }"


def _field_name(selection: str) -> str:
    return selection.split("{")[0].split("(")[0].strip()


def _render_relation(relation: RelationSelection, depth: int) -> List[str]:
    args = []
    if relation.first is not None:
        args.append(f"first: {relation.first}")
    if relation.order_by:
        args.append(f"orderBy: {relation.order_by}")
    if relation.order_direction:
        args.append(f"orderDirection: {relation.order_direction}")

    head = relation.name + (f"({', '.join(args)})" if args else "")
    lines = [INDENT * depth + head + " {"]
    lines.extend(INDENT * (depth + 1) + name for name in relation.fields)
    lines.append(INDENT * depth + "}")
    return lines


def resolve_fields(
    descriptor: EntityDescriptor,
    config: QueryConfig,
    relations: Sequence[RelationSelection] = (),
) -> Tuple[str, ...]:
    """Selected fields, or entity defaults, minus those replaced by relation selections"""
    selected = config.selected_fields or list(descriptor.default_fields)
    included = {relation.name for relation in relations}
    return tuple(name for name in selected if _field_name(name) not in included)


def default_relation_fields(entity_type: Optional[Type[SubgraphEntity]]) -> Tuple[str, ...]:
    """Scalar default fields of a related entity, or just ``id`` if it has no builder"""
    descriptor = DESCRIPTORS.get(entity_type) if entity_type else None
    return descriptor.scalar_fields if descriptor else ("id",)


def compile_query(
    descriptor: EntityDescriptor,
    config: QueryConfig,
    relations: Sequence[RelationSelection] = (),
    default_limit: int = DEFAULT_LIMIT,
) -> CompiledQuery:
    """
    Compile a builder configuration.

    Args:
        descriptor: Target entity
        config: Accumulated configuration
        relations: Nested relation selections, rendered after the fields
        default_limit: ``first`` used when the config leaves it unset

    Returns:
        CompiledQuery(document, variables)
    """
    filter_variables: List[_Variable] = []
    args = []
    if config.where:
        where = _render_where(to_filters(config.where), descriptor.entity_type, "", filter_variables)
        args.append(f"where: {where}")
    if config.order_by:
        args.append(f"orderBy: {config.order_by}")
    if config.order_direction:
        args.append(f"orderDirection: {config.order_direction}")
    args.append("first: $first")
    args.append("skip: $skip")

    declarations = ["$first: Int!", "$skip: Int!"]
    declarations.extend(f"${var.name}: {var.graphql_type}" for var in filter_variables)

    lines = [
        f"query {descriptor.query_name}({', '.join(declarations)}) {{",
        f"{INDENT}{descriptor.root_key}({', '.join(args)}) {{",
    ]
    lines.extend(INDENT * 2 + name for name in resolve_fields(descriptor, config, relations))
    for relation in relations:
        lines.extend(_render_relation(relation, 2))
    lines.append(INDENT + "}")
    lines.append("}")

    variables: Dict[str, Any] = {
        "first": config.first if config.first is not None else default_limit,
        "skip": config.skip if config.skip is not None else 0,
    }
    for var in filter_variables:
        variables[var.name] = var.value

    return CompiledQuery("\n".join(lines), variables)
