"""Nullifier usage query builder"""

from typing import Sequence, Union

from ...data.types import NullifierUsage
from ...transformers.wire import to_filter_amount
from ..base import QueryBuilder
from ..types import EntityDescriptor

Amount = Union[int, str]

NULLIFIER_USAGE_FIELDS = (
    "id",
    "nullifier",
    "isUsed",
    "gasUsed",
    "firstUsedAtBlock",
    "firstUsedAtTransaction",
    "firstUsedAtTimestamp",
    "lastUpdatedBlock",
    "lastUpdatedTimestamp",
)

NULLIFIER_USAGE_DESCRIPTOR = EntityDescriptor(
    root_key="nullifierUsages",
    entity_type=NullifierUsage,
    default_fields=NULLIFIER_USAGE_FIELDS,
    default_order_by="lastUpdatedTimestamp",
    default_order_direction="desc",
)


class NullifierUsageQueryBuilder(QueryBuilder[NullifierUsage]):
    """Nullifier usage, most recently updated first by default

    GasLimited pools accumulate gas_used per nullifier; OneTimeUse pools flip
    is_used once.
    """

    DESCRIPTOR = NULLIFIER_USAGE_DESCRIPTOR

    def by_paymaster(self, paymaster_address: str) -> "NullifierUsageQueryBuilder":
        return self.where({"paymaster_": {"address": paymaster_address}})

    def by_paymasters(self, paymaster_addresses: Sequence[str]) -> "NullifierUsageQueryBuilder":
        return self.where({"paymaster_": {"address_in": list(paymaster_addresses)}})

    def by_pool(self, pool_id: Amount) -> "NullifierUsageQueryBuilder":
        return self.where({"pool_": {"poolId": to_filter_amount(pool_id)}})

    def by_nullifier(self, nullifier: Amount) -> "NullifierUsageQueryBuilder":
        return self.where({"nullifier": to_filter_amount(nullifier)})

    def by_nullifiers(self, nullifiers: Sequence[Amount]) -> "NullifierUsageQueryBuilder":
        return self.where({"nullifier_in": [to_filter_amount(n) for n in nullifiers]})

    def by_usage_status(self, is_used: bool) -> "NullifierUsageQueryBuilder":
        return self.where({"isUsed": bool(is_used)})

    def used_only(self) -> "NullifierUsageQueryBuilder":
        return self.by_usage_status(True)

    def unused_only(self) -> "NullifierUsageQueryBuilder":
        return self.by_usage_status(False)

    def gas_used_between(self, min_gas: Amount, max_gas: Amount) -> "NullifierUsageQueryBuilder":
        return self.where({
            "gasUsed_gte": to_filter_amount(min_gas),
            "gasUsed_lte": to_filter_amount(max_gas),
        })

    def with_min_gas_used(self, gas: Amount) -> "NullifierUsageQueryBuilder":
        return self.where({"gasUsed_gte": to_filter_amount(gas)})

    def with_max_gas_used(self, gas: Amount) -> "NullifierUsageQueryBuilder":
        return self.where({"gasUsed_lte": to_filter_amount(gas)})

    def first_used_after(self, timestamp: Amount) -> "NullifierUsageQueryBuilder":
        return self.where({"firstUsedAtTimestamp_gte": to_filter_amount(timestamp)})

    def first_used_before(self, timestamp: Amount) -> "NullifierUsageQueryBuilder":
        return self.where({"firstUsedAtTimestamp_lte": to_filter_amount(timestamp)})

    def last_updated_after(self, timestamp: Amount) -> "NullifierUsageQueryBuilder":
        return self.where({"lastUpdatedTimestamp_gte": to_filter_amount(timestamp)})

    def has_user_operation(self) -> "NullifierUsageQueryBuilder":
        """Usages linked to a sponsored user operation"""
        return self.where({"userOperation_not": None})

    def order_by_newest_updated(self) -> "NullifierUsageQueryBuilder":
        return self.order_by("lastUpdatedTimestamp", "desc")

    def order_by_newest_used(self) -> "NullifierUsageQueryBuilder":
        return self.order_by("firstUsedAtTimestamp", "desc")

    def order_by_gas_used(self, direction: str = "desc") -> "NullifierUsageQueryBuilder":
        return self.order_by("gasUsed", direction)

    def with_related(self) -> "NullifierUsageQueryBuilder":
        """Embed paymaster, pool and the consuming user operation"""
        return (
            self.include("paymaster", fields=("id", "address", "contractType"))
            .include("pool", fields=("id", "poolId"))
            .include("userOperation", fields=("id", "userOpHash", "sender", "actualGasCost"))
        )

    async def total_gas_used(self) -> int:
        """Sum of gas_used over one page of the current query"""
        return sum(usage.gas_used or 0 for usage in await self.execute())
