"""Pool member query builder"""

from typing import Optional, Sequence, Union

from ...data.types import PoolMember
from ...transformers.wire import to_filter_amount
from ..base import QueryBuilder
from ..types import EntityDescriptor

Amount = Union[int, str]

MEMBER_FIELDS = (
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

MEMBER_DESCRIPTOR = EntityDescriptor(
    root_key="poolMembers",
    entity_type=PoolMember,
    default_fields=MEMBER_FIELDS,
    default_order_by="addedAtTimestamp",
    default_order_direction="desc",
)

POOL_FIELDS_IN_MEMBER = (
    "id",
    "poolId",
    "joiningFee",
    "memberCount",
    "totalDeposits",
    "currentMerkleRoot",
    "currentRootIndex",
    "createdAtTimestamp",
    "paymaster { id contractType address }",
)


class PoolMemberQueryBuilder(QueryBuilder[PoolMember]):
    """Pool members, most recently joined first by default"""

    DESCRIPTOR = MEMBER_DESCRIPTOR

    def in_pool(self, pool_id: Amount) -> "PoolMemberQueryBuilder":
        """Members of one pool, by numeric pool id"""
        return self.where({"pool_": {"poolId": to_filter_amount(pool_id)}})

    def by_paymaster(self, paymaster_address: str) -> "PoolMemberQueryBuilder":
        return self.where({"pool_": {"paymaster_": {"address": paymaster_address}}})

    def by_identity(self, identity_commitment: Amount) -> "PoolMemberQueryBuilder":
        return self.where({"identityCommitment": _commitment(identity_commitment)})

    def by_identities(self, identity_commitments: Sequence[Amount]) -> "PoolMemberQueryBuilder":
        return self.where({"identityCommitment_in": [_commitment(c) for c in identity_commitments]})

    def member_index_between(self, min_index: Amount, max_index: Amount) -> "PoolMemberQueryBuilder":
        return self.where({
            "memberIndex_gte": to_filter_amount(min_index),
            "memberIndex_lte": to_filter_amount(max_index),
        })

    def joined_after(self, timestamp: Amount) -> "PoolMemberQueryBuilder":
        return self.where({"addedAtTimestamp_gte": to_filter_amount(timestamp)})

    def joined_before(self, timestamp: Amount) -> "PoolMemberQueryBuilder":
        return self.where({"addedAtTimestamp_lte": to_filter_amount(timestamp)})

    def with_min_gas_used(self, gas: Amount) -> "PoolMemberQueryBuilder":
        """GasLimited pools only"""
        return self.where({"gasUsed_gte": to_filter_amount(gas)})

    def nullifier_used(self) -> "PoolMemberQueryBuilder":
        """OneTimeUse members whose card has been spent"""
        return self.where({"nullifierUsed": True})

    def nullifier_unused(self) -> "PoolMemberQueryBuilder":
        return self.where({"nullifierUsed": False})

    def order_by_newest_joined(self) -> "PoolMemberQueryBuilder":
        return self.order_by("addedAtTimestamp", "desc")

    def order_by_oldest_joined(self) -> "PoolMemberQueryBuilder":
        return self.order_by("addedAtTimestamp", "asc")

    def order_by_member_index(self, direction: str = "asc") -> "PoolMemberQueryBuilder":
        return self.order_by("memberIndex", direction)

    def order_by_gas_used(self, direction: str = "desc") -> "PoolMemberQueryBuilder":
        return self.order_by("gasUsed", direction)

    def with_pool(self, fields: Optional[Sequence[str]] = None) -> "PoolMemberQueryBuilder":
        """Embed the member's pool in each result"""
        return self.include("pool", fields=tuple(fields) if fields else POOL_FIELDS_IN_MEMBER)


def _commitment(value: Amount) -> str:
    # commitments are field elements; accept decimal or 0x-prefixed hex
    if isinstance(value, str) and value.lower().startswith("0x"):
        return value
    return to_filter_amount(value)
