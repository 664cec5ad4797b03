"""Network info query builder"""

from typing import Sequence, Union

from ...data.types import NetworkInfo
from ...transformers.wire import to_filter_amount
from ..base import QueryBuilder
from ..types import EntityDescriptor, NetworkStatistics

Amount = Union[int, str]

NETWORK_INFO_FIELDS = (
    "id",
    "name",
    "chainId",
    "rpcUrl",
    "explorerUrl",
    "totalPaymasters",
    "totalPools",
    "totalMembers",
    "totalUserOperations",
    "totalGasSpent",
    "totalRevenue",
    "firstDeploymentTimestamp",
    "lastActivityTimestamp",
)

NETWORK_INFO_DESCRIPTOR = EntityDescriptor(
    root_key="networkInfos",
    entity_type=NetworkInfo,
    default_fields=NETWORK_INFO_FIELDS,
    default_order_by="name",
    default_order_direction="asc",
)


def summarize_networks(networks: Sequence[NetworkInfo]) -> NetworkStatistics:
    """Sums across networks; most active by user operations, most profitable by revenue"""
    if not networks:
        return NetworkStatistics()

    most_active = max(networks, key=lambda n: n.total_user_operations or 0)
    most_profitable = max(networks, key=lambda n: n.total_revenue or 0)

    return NetworkStatistics(
        total_networks=len(networks),
        total_paymasters=sum(n.total_paymasters or 0 for n in networks),
        total_pools=sum(n.total_pools or 0 for n in networks),
        total_members=sum(n.total_members or 0 for n in networks),
        total_user_operations=sum(n.total_user_operations or 0 for n in networks),
        total_gas_spent=sum(n.total_gas_spent or 0 for n in networks),
        total_revenue=sum(n.total_revenue or 0 for n in networks),
        most_active_network=most_active.name or "N/A",
        most_profitable_network=most_profitable.name or "N/A",
    )


class NetworkInfoQueryBuilder(QueryBuilder[NetworkInfo]):
    """Network totals, by name ascending by default"""

    DESCRIPTOR = NETWORK_INFO_DESCRIPTOR

    def by_network(self, network: str) -> "NetworkInfoQueryBuilder":
        return self.where({"name": network})

    def with_min_paymasters(self, count: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalPaymasters_gte": to_filter_amount(count)})

    def with_max_paymasters(self, count: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalPaymasters_lte": to_filter_amount(count)})

    def with_min_pools(self, count: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalPools_gte": to_filter_amount(count)})

    def with_max_pools(self, count: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalPools_lte": to_filter_amount(count)})

    def with_min_members(self, count: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalMembers_gte": to_filter_amount(count)})

    def with_max_members(self, count: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalMembers_lte": to_filter_amount(count)})

    def with_min_user_operations(self, count: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalUserOperations_gte": to_filter_amount(count)})

    def with_max_user_operations(self, count: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalUserOperations_lte": to_filter_amount(count)})

    def with_min_gas_spent(self, amount: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalGasSpent_gte": to_filter_amount(amount)})

    def with_max_gas_spent(self, amount: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalGasSpent_lte": to_filter_amount(amount)})

    def with_min_revenue(self, amount: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalRevenue_gte": to_filter_amount(amount)})

    def with_max_revenue(self, amount: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"totalRevenue_lte": to_filter_amount(amount)})

    def deployed_after(self, timestamp: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"firstDeploymentTimestamp_gte": to_filter_amount(timestamp)})

    def deployed_before(self, timestamp: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"firstDeploymentTimestamp_lte": to_filter_amount(timestamp)})

    def active_after(self, timestamp: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"lastActivityTimestamp_gte": to_filter_amount(timestamp)})

    def active_before(self, timestamp: Amount) -> "NetworkInfoQueryBuilder":
        return self.where({"lastActivityTimestamp_lte": to_filter_amount(timestamp)})

    def order_by_paymasters(self, direction: str = "desc") -> "NetworkInfoQueryBuilder":
        return self.order_by("totalPaymasters", direction)

    def order_by_pools(self, direction: str = "desc") -> "NetworkInfoQueryBuilder":
        return self.order_by("totalPools", direction)

    def order_by_members(self, direction: str = "desc") -> "NetworkInfoQueryBuilder":
        return self.order_by("totalMembers", direction)

    def order_by_user_operations(self, direction: str = "desc") -> "NetworkInfoQueryBuilder":
        return self.order_by("totalUserOperations", direction)

    def order_by_gas_spent(self, direction: str = "desc") -> "NetworkInfoQueryBuilder":
        return self.order_by("totalGasSpent", direction)

    def order_by_revenue(self, direction: str = "desc") -> "NetworkInfoQueryBuilder":
        return self.order_by("totalRevenue", direction)

    def order_by_deployment(self, direction: str = "desc") -> "NetworkInfoQueryBuilder":
        return self.order_by("firstDeploymentTimestamp", direction)

    def order_by_activity(self, direction: str = "desc") -> "NetworkInfoQueryBuilder":
        return self.order_by("lastActivityTimestamp", direction)

    def order_by_chain_id(self, direction: str = "asc") -> "NetworkInfoQueryBuilder":
        return self.order_by("chainId", direction)

    async def statistics(self) -> NetworkStatistics:
        """Aggregate the networks matched by the current query"""
        return summarize_networks(await self.execute())
