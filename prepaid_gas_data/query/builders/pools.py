"""
Pool query builder

    pools = await (
        query.pools()
        .with_min_members(10)
        .order_by_popularity()
        .limit(5)
        .execute()
    )
"""

from typing import List, Optional, Sequence, Union

from ...data.queries import GET_POOL_DETAILS, GET_VALID_ROOT_INDICES
from ...data.types import MerkleRoot, Pool
from ...transformers.wire import to_filter_amount
from ..base import QueryBuilder
from ..types import EntityDescriptor

Amount = Union[int, str]

POOL_FIELDS = (
    "id",
    "poolId",
    "joiningFee",
    "totalDeposits",
    "memberCount",
    "currentMerkleRoot",
    "currentRootIndex",
    "rootHistoryCount",
    "createdAtBlock",
    "createdAtTransaction",
    "createdAtTimestamp",
    "lastUpdatedBlock",
    "lastUpdatedTimestamp",
    "paymaster { id contractType address }",
)

POOL_DESCRIPTOR = EntityDescriptor(
    root_key="pools",
    entity_type=Pool,
    default_fields=POOL_FIELDS,
    default_order_by="createdAtTimestamp",
    default_order_direction="desc",
)

MEMBER_FIELDS_IN_POOL = (
    "id",
    "memberIndex",
    "identityCommitment",
    "merkleRootWhenAdded",
    "rootIndexWhenAdded",
    "addedAtBlock",
    "addedAtTransaction",
    "addedAtTimestamp",
    "gasUsed",
    "nullifierUsed",
    "nullifier",
)

ROOT_FIELDS_IN_POOL = (
    "id",
    "root",
    "rootIndex",
    "createdAtBlock",
    "createdAtTransaction",
    "createdAtTimestamp",
)


class PoolQueryBuilder(QueryBuilder[Pool]):
    """Pools, newest first by default"""

    DESCRIPTOR = POOL_DESCRIPTOR

    # filters

    def by_id(self, pool_id: str) -> "PoolQueryBuilder":
        return self.where({"id": pool_id})

    def by_pool_id(self, pool_id: Amount) -> "PoolQueryBuilder":
        """Filter by the numeric on-chain pool id"""
        return self.where({"poolId": to_filter_amount(pool_id)})

    def by_network(self, network: str) -> "PoolQueryBuilder":
        return self.where({"network": network})

    def by_paymaster(self, paymaster_address: str) -> "PoolQueryBuilder":
        return self.where({"paymaster_": {"address": paymaster_address}})

    def by_paymasters(self, paymaster_addresses: Sequence[str]) -> "PoolQueryBuilder":
        return self.where({"paymaster_": {"address_in": list(paymaster_addresses)}})

    def by_paymaster_type(self, contract_type: str) -> "PoolQueryBuilder":
        """GasLimited or OneTimeUse"""
        return self.where({"paymaster_": {"contractType": contract_type}})

    def joining_fee_between(self, min_fee: Amount, max_fee: Amount) -> "PoolQueryBuilder":
        """Joining fee range in wei, inclusive"""
        return self.where({
            "joiningFee_gte": to_filter_amount(min_fee),
            "joiningFee_lte": to_filter_amount(max_fee),
        })

    def min_joining_fee(self, min_fee: Amount) -> "PoolQueryBuilder":
        return self.where({"joiningFee_gte": to_filter_amount(min_fee)})

    def max_joining_fee(self, max_fee: Amount) -> "PoolQueryBuilder":
        return self.where({"joiningFee_lte": to_filter_amount(max_fee)})

    def with_min_members(self, count: Amount) -> "PoolQueryBuilder":
        return self.where({"memberCount_gte": to_filter_amount(count)})

    def with_max_members(self, count: Amount) -> "PoolQueryBuilder":
        return self.where({"memberCount_lte": to_filter_amount(count)})

    def member_count_between(self, min_count: Amount, max_count: Amount) -> "PoolQueryBuilder":
        return self.where({
            "memberCount_gte": to_filter_amount(min_count),
            "memberCount_lte": to_filter_amount(max_count),
        })

    def has_members(self) -> "PoolQueryBuilder":
        return self.where({"memberCount_gt": to_filter_amount(0)})

    def total_deposits_between(self, min_deposits: Amount, max_deposits: Amount) -> "PoolQueryBuilder":
        return self.where({
            "totalDeposits_gte": to_filter_amount(min_deposits),
            "totalDeposits_lte": to_filter_amount(max_deposits),
        })

    def with_min_deposits(self, min_deposits: Amount) -> "PoolQueryBuilder":
        return self.where({"totalDeposits_gte": to_filter_amount(min_deposits)})

    def created_after(self, timestamp: Amount) -> "PoolQueryBuilder":
        """Created at or after a unix timestamp (seconds)"""
        return self.where({"createdAtTimestamp_gte": to_filter_amount(timestamp)})

    def created_before(self, timestamp: Amount) -> "PoolQueryBuilder":
        return self.where({"createdAtTimestamp_lte": to_filter_amount(timestamp)})

    # ordering

    def order_by_newest(self) -> "PoolQueryBuilder":
        return self.order_by("createdAtTimestamp", "desc")

    def order_by_oldest(self) -> "PoolQueryBuilder":
        return self.order_by("createdAtTimestamp", "asc")

    def order_by_popularity(self) -> "PoolQueryBuilder":
        """Most members first"""
        return self.order_by("memberCount", "desc")

    def order_by_affordability(self) -> "PoolQueryBuilder":
        """Lowest joining fee first"""
        return self.order_by("joiningFee", "asc")

    def order_by_total_deposits(self, direction: str = "desc") -> "PoolQueryBuilder":
        return self.order_by("totalDeposits", direction)

    # relations

    def with_members(self, limit: int = 100) -> "PoolQueryBuilder":
        """Embed up to `limit` members per pool, newest first"""
        return self.include(
            "members",
            fields=MEMBER_FIELDS_IN_POOL,
            first=limit,
            order_by="addedAtTimestamp",
            order_direction="desc",
        )

    def with_merkle_roots(self, limit: int = 100) -> "PoolQueryBuilder":
        return self.include(
            "merkleRoots",
            fields=ROOT_FIELDS_IN_POOL,
            first=limit,
            order_by="rootIndex",
            order_direction="desc",
        )

    def with_paymaster(self) -> "PoolQueryBuilder":
        return self.include("paymaster", fields=("id", "contractType", "address", "network", "chainId"))

    # lookups

    async def get_by_id(self, pool_id: str, include_members: bool = False,
                        member_limit: int = 100) -> Optional[Pool]:
        """Single pool by entity id, optionally with its members"""
        lookup = self.clone().reset().by_id(pool_id)
        if include_members:
            lookup.with_members(member_limit)
        return await lookup.first()

    async def pool_exists(self, pool_id: str) -> bool:
        return await self.clone().reset().by_id(pool_id).exists()

    async def details(self, pool_id: str, members_first: int = 10, roots_first: int = 10) -> Optional[Pool]:
        """Point lookup of a pool with its paymaster, recent members and roots"""
        data = await self._request(
            "GetPoolDetails",
            GET_POOL_DETAILS,
            {"id": pool_id, "membersFirst": members_first, "rootsFirst": roots_first},
            "pool",
        )
        return Pool.from_dict(data) if data else None

    async def valid_root_indices(self, pool_id: str) -> List[MerkleRoot]:
        """
        Root history of a pool in index order.

        Returns:
            MerkleRoot records, empty if the pool does not exist
        """
        pool = await self._request(
            "GetValidRootIndices", GET_VALID_ROOT_INDICES, {"id": pool_id}, "pool"
        )
        if not pool:
            return []
        return list(Pool.from_dict(pool).merkle_roots or ())
