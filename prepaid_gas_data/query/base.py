"""
Generic query builder

One builder class drives every entity. It is parameterized by an
EntityDescriptor; entity builders subclass it only to set DESCRIPTOR and
add named convenience filters.

Configuration methods mutate the builder and return it for chaining.
Terminal methods are coroutines. A builder instance must not be used by
two coroutines at once: ``first()`` temporarily changes the limit.
"""

import copy
import logging
from collections.abc import Mapping
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from ..constants import DEFAULT_LIMIT, MAX_SAFE_LIMIT, ORDER_DIRECTIONS
from ..data.types import SubgraphEntity
from ..errors import QueryError, ValidationError
from .compiler import CompiledQuery, compile_query, default_relation_fields
from .filters import merge_where, to_filters
from .types import EntityDescriptor, QueryConfig, RelationSelection, Transport

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=SubgraphEntity)
B = TypeVar("B", bound="QueryBuilder")


def _check_limit(n: Any, max_limit: int, name: str = "limit") -> int:
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValidationError(f"{name} must be an integer, got {n!r}")
    if n < 0:
        raise ValidationError(f"{name} must be non-negative, got {n}")
    if n > max_limit:
        raise ValidationError(f"{name} {n} exceeds the maximum of {max_limit}")
    return n


def _check_direction(direction: Any) -> str:
    if direction not in ORDER_DIRECTIONS:
        raise ValidationError(f"Order direction must be 'asc' or 'desc', got {direction!r}")
    return direction


class QueryBuilder(Generic[E]):
    """Fluent builder for one subgraph entity

    Usage is the same for every entity:
        pools = await (
            QueryBuilder(client, POOL_DESCRIPTOR)
            .where({"memberCount_gte": "10"})
            .order_by("memberCount", "desc")
            .limit(5)
            .execute()
        )
    """

    DESCRIPTOR: Optional[EntityDescriptor] = None

    def __init__(
        self,
        client: Transport,
        descriptor: Optional[EntityDescriptor] = None,
        max_limit: int = MAX_SAFE_LIMIT,
        default_limit: int = DEFAULT_LIMIT
    ):
        """
        Args:
            client: Transport with ``async execute(query, variables)``
            descriptor: Target entity. Defaults to the class DESCRIPTOR
            max_limit: Ceiling enforced by ``limit()``
            default_limit: ``first`` sent when no limit was set
        """
        descriptor = descriptor or self.DESCRIPTOR
        if descriptor is None:
            raise TypeError(f"{type(self).__name__} needs an EntityDescriptor")

        self.client = client
        self.descriptor = descriptor
        self.max_limit = max_limit
        self.default_limit = default_limit
        self._config = self._initial_config()
        self._relations: Dict[str, RelationSelection] = {}

    def _initial_config(self) -> QueryConfig:
        return QueryConfig(
            order_by=self.descriptor.default_order_by,
            order_direction=self.descriptor.default_order_direction if self.descriptor.default_order_by else None,
        )

    # ------------------------------------------------------------------
    # configuration

    def select(self: B, fields: Sequence[str]) -> B:
        """Project only the given fields (no schema validation here)"""
        if not isinstance(fields, (list, tuple)) or not fields:
            raise ValidationError("select() needs a non-empty list of field names")
        for name in fields:
            if not isinstance(name, str) or not name.strip():
                raise ValidationError(f"Invalid field name: {name!r}")
        self._config.selected_fields = list(fields)
        return self

    def where(self: B, conditions: Mapping) -> B:
        """Merge conditions into the where-map (last write wins per key)"""
        if not isinstance(conditions, Mapping):
            raise ValidationError(f"where() needs a mapping, got {type(conditions).__name__}")
        to_filters(conditions)
        self._config.where = merge_where(self._config.where, conditions)
        return self

    def limit(self: B, n: int) -> B:
        self._config.first = _check_limit(n, self.max_limit)
        return self

    def skip(self: B, n: int) -> B:
        if isinstance(n, bool) or not isinstance(n, int):
            raise ValidationError(f"skip must be an integer, got {n!r}")
        if n < 0:
            raise ValidationError(f"skip must be non-negative, got {n}")
        self._config.skip = n
        return self

    def order_by(self: B, field: str, direction: Optional[str] = None) -> B:
        """Order by field. direction defaults to the entity's default direction."""
        if not isinstance(field, str) or not field:
            raise ValidationError(f"Invalid order field: {field!r}")
        self._config.order_by = field
        self._config.order_direction = _check_direction(direction or self.descriptor.default_order_direction)
        return self

    def unordered(self: B) -> B:
        """Drop ordering; the server then returns results in an implementation-defined order"""
        self._config.order_by = None
        self._config.order_direction = None
        return self

    def include(
        self: B,
        relation: str,
        fields: Optional[Sequence[str]] = None,
        first: Optional[int] = None,
        order_by: Optional[str] = None,
        order_direction: Optional[str] = None
    ) -> B:
        """
        Nest a related entity's fields in the selection.

        Args:
            relation: Relation field name (e.g. "pool", "members")
            fields: Nested fields. Defaults to the related entity's scalar defaults
            first: Limit for list relations
            order_by: Order for list relations
            order_direction: "asc" or "desc"
        """
        if first is not None:
            _check_limit(first, self.max_limit, name=f"{relation} limit")
        if order_direction is not None:
            _check_direction(order_direction)
        if fields is None:
            fields = default_relation_fields(self.descriptor.entity_type.related_type(relation))
        elif not isinstance(fields, (list, tuple)) or not fields:
            raise ValidationError(f"include('{relation}') needs a non-empty list of fields")

        self._relations[relation] = RelationSelection(
            name=relation,
            fields=tuple(fields),
            first=first,
            order_by=order_by,
            order_direction=order_direction,
        )
        return self

    def reset(self: B) -> B:
        """Clear filters, selection, pagination and relations; keep the default order"""
        self._config = self._initial_config()
        self._relations = {}
        return self

    # ------------------------------------------------------------------
    # inspection

    @property
    def config(self) -> QueryConfig:
        """Copy of the current configuration"""
        return self._config.copy()

    def get_config(self) -> QueryConfig:
        return self._config.copy()

    def build(self) -> CompiledQuery:
        """Compile to (document, variables) without executing"""
        return compile_query(
            self.descriptor,
            self._config,
            tuple(self._relations.values()),
            default_limit=self.default_limit,
        )

    def clone(self: B) -> B:
        """Independent copy of the same builder type"""
        twin = copy.copy(self)
        twin._config = self._config.copy()
        twin._relations = dict(self._relations)
        return twin

    # ------------------------------------------------------------------
    # execution

    async def _request(self, name: str, document: str, variables: Dict[str, Any], root_key: str) -> Any:
        """Run a document and return the value under root_key"""
        logger.debug("%s variables=%s", name, variables)
        try:
            data = await self.client.execute(document, variables)
        except QueryError:
            raise
        except Exception as e:
            logger.error("%s failed: %s", name, e)
            raise QueryError(f"{name} failed: {e}", cause=e) from e

        if not isinstance(data, Mapping) or root_key not in data:
            raise QueryError(f"Response has no '{root_key}' field")
        return data[root_key]

    async def execute(self) -> List[E]:
        """
        Run the query.

        Returns:
            Entities under the descriptor's root key, in server order

        Raises:
            QueryError: transport failure or missing root key
            ParseError: malformed integer in the response
        """
        return await self._fetch(warn_full_page=True)

    async def _fetch(self, warn_full_page: bool) -> List[E]:
        document, variables = self.build()
        root_key = self.descriptor.root_key
        rows = await self._request(self.descriptor.query_name, document, variables, root_key)
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise QueryError(f"Expected a list under '{root_key}', got {type(rows).__name__}")

        entities = [self.descriptor.entity_type.from_dict(row) for row in rows]

        first = variables["first"]
        if warn_full_page and first and len(entities) == first:
            logger.warning(
                "%s returned a full page of %d results; more may exist (use skip() to paginate)",
                self.descriptor.query_name, first
            )
        return entities

    async def execute_and_serialize(self) -> List[Dict[str, Any]]:
        """execute() with each entity converted to its wire dict"""
        return [entity.to_dict() for entity in await self.execute()]

    async def first(self) -> Optional[E]:
        """First match or None. The configured limit is restored afterwards."""
        previous = self._config.first
        self._config.first = 1
        try:
            results = await self._fetch(warn_full_page=False)
        finally:
            self._config.first = previous
        return results[0] if results else None

    async def first_serialized(self) -> Optional[Dict[str, Any]]:
        entity = await self.first()
        return entity.to_dict() if entity is not None else None

    async def exists(self) -> bool:
        return await self.first() is not None

    async def count(self) -> int:
        """
        Number of results of the configured query.

        This is not a server-side count: it fetches one page (the configured
        limit, default 100) and counts it client-side, so it is O(n) and
        capped by the limit.
        """
        return len(await self.execute())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.descriptor.root_key} {self._config!r}>"
