"""
Merkle root history query builder

Besides the filters, the builder answers root history questions for one
pool, such as whether a root was ever published and which root is the latest.
"""

from typing import List, Optional, Union

from ...data.types import MerkleRoot
from ...errors import ValidationError
from ...transformers.wire import to_filter_amount
from ..base import QueryBuilder
from ..types import EntityDescriptor, RootStatistics

Amount = Union[int, str]

MERKLE_ROOT_FIELDS = (
    "id",
    "rootIndex",
    "root",
    "pool { id poolId network }",
    "createdAtTimestamp",
    "createdAtBlock",
    "createdAtTransaction",
)

MERKLE_ROOT_DESCRIPTOR = EntityDescriptor(
    root_key="merkleRoots",
    entity_type=MerkleRoot,
    default_fields=MERKLE_ROOT_FIELDS,
    default_order_by="rootIndex",
    default_order_direction="desc",
)


def _root_index(index: int) -> int:
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise ValidationError(f"Root index must be a non-negative integer, got {index!r}")
    return index


class MerkleRootQueryBuilder(QueryBuilder[MerkleRoot]):
    """Pool root history, highest index first by default"""

    DESCRIPTOR = MERKLE_ROOT_DESCRIPTOR

    def by_network(self, network: str) -> "MerkleRootQueryBuilder":
        return self.where({"pool_": {"network": network}})

    def by_pool(self, pool_id: Amount) -> "MerkleRootQueryBuilder":
        return self.where({"pool_": {"poolId": to_filter_amount(pool_id)}})

    def at_index(self, root_index: int) -> "MerkleRootQueryBuilder":
        return self.where({"rootIndex": _root_index(root_index)})

    def by_root(self, root: Amount) -> "MerkleRootQueryBuilder":
        return self.where({"root": to_filter_amount(root)})

    def with_min_index(self, root_index: int) -> "MerkleRootQueryBuilder":
        return self.where({"rootIndex_gte": _root_index(root_index)})

    def with_max_index(self, root_index: int) -> "MerkleRootQueryBuilder":
        return self.where({"rootIndex_lte": _root_index(root_index)})

    def created_after(self, timestamp: Amount) -> "MerkleRootQueryBuilder":
        return self.where({"createdAtTimestamp_gte": to_filter_amount(timestamp)})

    def created_before(self, timestamp: Amount) -> "MerkleRootQueryBuilder":
        return self.where({"createdAtTimestamp_lte": to_filter_amount(timestamp)})

    def at_block(self, block_number: Amount) -> "MerkleRootQueryBuilder":
        return self.where({"createdAtBlock": to_filter_amount(block_number)})

    def in_transaction(self, transaction_hash: str) -> "MerkleRootQueryBuilder":
        return self.where({"createdAtTransaction": transaction_hash})

    def order_by_index(self, direction: str = "desc") -> "MerkleRootQueryBuilder":
        return self.order_by("rootIndex", direction)

    def order_by_creation(self, direction: str = "desc") -> "MerkleRootQueryBuilder":
        return self.order_by("createdAtTimestamp", direction)

    def order_by_block(self, direction: str = "desc") -> "MerkleRootQueryBuilder":
        return self.order_by("createdAtBlock", direction)

    # pool root history

    def _for_pool(self, pool_id: Amount, network: Optional[str]) -> "MerkleRootQueryBuilder":
        query = self.clone().by_pool(pool_id)
        return query.by_network(network) if network else query

    async def pool_root_history(self, pool_id: Amount, network: Optional[str] = None) -> List[MerkleRoot]:
        """One page of a pool's roots, oldest index first"""
        return await self._for_pool(pool_id, network).order_by_index("asc").execute()

    async def find_root(self, pool_id: Amount, root: Amount,
                        network: Optional[str] = None) -> Optional[MerkleRoot]:
        """History entry of a root value, or None if the pool never had it"""
        return await self._for_pool(pool_id, network).by_root(root).first()

    async def is_valid_root(self, pool_id: Amount, root: Amount, network: Optional[str] = None) -> bool:
        return await self.find_root(pool_id, root, network) is not None

    async def latest_root(self, pool_id: Amount, network: Optional[str] = None) -> Optional[MerkleRoot]:
        return await self._for_pool(pool_id, network).order_by_index("desc").first()

    async def root_at_index(self, pool_id: Amount, root_index: int,
                            network: Optional[str] = None) -> Optional[MerkleRoot]:
        return await self._for_pool(pool_id, network).at_index(root_index).first()

    async def root_range(self, pool_id: Amount, start_index: int, end_index: int,
                         network: Optional[str] = None) -> List[MerkleRoot]:
        """
        Roots with start_index <= rootIndex <= end_index, in index order.

        Raises:
            ValidationError: start_index is greater than end_index
        """
        if _root_index(start_index) > _root_index(end_index):
            raise ValidationError(f"Empty root range {start_index}..{end_index}")
        query = self._for_pool(pool_id, network).with_min_index(start_index).with_max_index(end_index)
        return await query.order_by_index("asc").execute()

    async def root_statistics(self, pool_id: Amount, network: Optional[str] = None) -> RootStatistics:
        """
        Count, latest index and creation cadence of a pool's roots.

        The average gap is taken between consecutive roots that both carry a
        timestamp. The creation rate is roots per day over the span from the
        oldest to the newest root, 0 when the span is empty.
        """
        roots = await self._for_pool(pool_id, network).order_by_creation("asc").execute()
        if not roots:
            return RootStatistics()

        timestamps = [root.created_at_timestamp for root in roots]
        gaps = [
            later - earlier
            for earlier, later in zip(timestamps, timestamps[1:])
            if earlier is not None and later is not None
        ]
        average_gap = sum(gaps) / (len(roots) - 1) if len(roots) > 1 else 0

        oldest, newest = roots[0], roots[-1]
        span = 0
        if oldest.created_at_timestamp is not None and newest.created_at_timestamp is not None:
            span = newest.created_at_timestamp - oldest.created_at_timestamp
        rate = len(roots) / span * 86400 if span > 0 else 0.0

        return RootStatistics(
            total_roots=len(roots),
            latest_index=max(root.root_index or 0 for root in roots),
            oldest_root=oldest,
            newest_root=newest,
            average_time_between_roots=round(average_gap),
            root_creation_rate=round(rate, 2),
        )
