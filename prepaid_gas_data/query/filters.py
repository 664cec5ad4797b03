"""
Typed filter representation

Where-maps use the subgraph's ``<field>[_<operator>]`` key convention, and
relationship filters use keys ending in ``_`` whose value is a nested
where-map:

    {"memberCount_gte": "10", "paymaster_": {"address": "0xabc"}}

``to_filters`` turns such a map into ``Filter`` / ``RelationFilter`` nodes
that the compiler renders. ``merge_where`` implements the builder's merge
rule.
"""

import copy
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Tuple, Union

from ..errors import UnsupportedFilterError, ValidationError

_KEY_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class FilterOp(Enum):
    """Comparison operator, valued by its key suffix"""
    EQ = ""
    NOT = "_not"
    GT = "_gt"
    GTE = "_gte"
    LT = "_lt"
    LTE = "_lte"
    IN = "_in"
    NOT_IN = "_not_in"
    CONTAINS = "_contains"
    NOT_CONTAINS = "_not_contains"

    @property
    def suffix(self) -> str:
        return self.value

    @property
    def is_list(self) -> bool:
        return self in (FilterOp.IN, FilterOp.NOT_IN)


# longest first so "_not_in" wins over "_in" and "_not"
_SUFFIXES: Tuple[FilterOp, ...] = tuple(
    sorted((op for op in FilterOp if op is not FilterOp.EQ), key=lambda op: -len(op.suffix))
)


@dataclass(frozen=True)
class Filter:
    """Single ``field <op> value`` condition"""
    field: str
    op: FilterOp
    value: Any

    @property
    def key(self) -> str:
        return self.field + self.op.suffix


@dataclass(frozen=True)
class RelationFilter:
    """Conditions on a related entity, rendered as ``relation_: { ... }``"""
    relation: str
    filters: Tuple["FilterNode", ...]

    @property
    def key(self) -> str:
        return self.relation + "_"


FilterNode = Union[Filter, RelationFilter]


def parse_filter_key(key: str) -> Tuple[str, FilterOp]:
    """
    Split a where key into field name and operator.

    >>> parse_filter_key("memberCount_gte")
    ('memberCount', <FilterOp.GTE: '_gte'>)

    Raises:
        UnsupportedFilterError: key is not a valid filter name
    """
    if not isinstance(key, str) or not _KEY_PATTERN.match(key) or key.endswith("_"):
        raise UnsupportedFilterError(f"Invalid filter key: {key!r}")

    for op in _SUFFIXES:
        if key.endswith(op.suffix) and len(key) > len(op.suffix):
            return key[:-len(op.suffix)], op
    return key, FilterOp.EQ


def to_filters(where: Mapping[str, Any]) -> List[FilterNode]:
    """Where-map -> filter nodes, preserving key order"""
    nodes: List[FilterNode] = []
    for key, value in where.items():
        if isinstance(key, str) and key.endswith("_") and _KEY_PATTERN.match(key[:-1] or "-"):
            if not isinstance(value, Mapping):
                raise UnsupportedFilterError(
                    f"Relationship filter '{key}' needs a mapping, got {type(value).__name__}"
                )
            nodes.append(RelationFilter(key[:-1], tuple(to_filters(value))))
            continue

        field, op = parse_filter_key(key)
        if op.is_list and not isinstance(value, (list, tuple)):
            raise UnsupportedFilterError(f"Filter '{key}' needs a list value")
        nodes.append(Filter(field, op, value))
    return nodes


def merge_where(existing: Mapping[str, Any], conditions: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge conditions into an existing where-map.

    Last write wins per key. A relationship key merged onto an existing
    relationship map merges the nested maps by the same rule.
    """
    merged = dict(existing)
    for key, value in conditions.items():
        current = merged.get(key)
        if key.endswith("_") and isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_where(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def check_date(date: str) -> str:
    """Validate a YYYY-MM-DD date used by daily stats filters"""
    if not isinstance(date, str) or not _DATE_PATTERN.match(date):
        raise ValidationError(f"Expected a YYYY-MM-DD date, got {date!r}")
    try:
        datetime.strptime(date, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date!r}") from e
    return date
