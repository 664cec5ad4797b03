"""
Query façade

Single entry point to every entity builder, plus convenience reads and
cross-entity aggregations.

    query = SubgraphQuery(client)
    pools = await query.pools().by_network("base-sepolia").limit(10).execute()
    overview = await query.get_network_overview("base-sepolia")

Aggregations run their queries concurrently with asyncio.gather and fail
as a whole if any one query fails.
"""

import asyncio
from typing import List, Optional, TypeVar, Union

from ..constants import DEFAULT_LIMIT, MAX_SAFE_LIMIT
from ..data.types import MemberPool, Pool
from ..errors import ValidationError
from .base import QueryBuilder
from .builders import (
    DailyGlobalStatsQueryBuilder,
    DailyPoolStatsQueryBuilder,
    MerkleRootQueryBuilder,
    NetworkInfoQueryBuilder,
    NullifierUsageQueryBuilder,
    PaymasterContractQueryBuilder,
    PoolMemberQueryBuilder,
    PoolQueryBuilder,
    RevenueWithdrawalQueryBuilder,
    TransactionQueryBuilder,
    summarize_pool_days,
)
from .types import NetworkOverview, PaymasterMetrics, PoolOverview, PoolStats, Transport

B = TypeVar("B", bound=QueryBuilder)
Amount = Union[int, str]

ONE_ETH_WEI = 10 ** 18

_POOL_ORDERINGS = {
    "newest": PoolQueryBuilder.order_by_newest,
    "oldest": PoolQueryBuilder.order_by_oldest,
    "popularity": PoolQueryBuilder.order_by_popularity,
    "affordability": PoolQueryBuilder.order_by_affordability,
}


class SubgraphQuery:
    """Builder factory and aggregations over one transport

    Every builder method returns a fresh builder with an empty configuration.
    """

    def __init__(
        self,
        client: Transport,
        network: Optional[str] = None,
        max_limit: int = MAX_SAFE_LIMIT,
        default_limit: int = DEFAULT_LIMIT
    ):
        """
        Args:
            client: Transport with ``async execute(query, variables)``
            network: Default network name for aggregations (e.g. "base-sepolia")
            max_limit: Ceiling enforced by builders' ``limit()``
            default_limit: ``first`` sent when a builder sets no limit
        """
        self.client = client
        self.network = network
        self.max_limit = max_limit
        self.default_limit = default_limit

    def _builder(self, builder_type: type) -> B:
        return builder_type(self.client, max_limit=self.max_limit, default_limit=self.default_limit)

    def get_client(self) -> Transport:
        return self.client

    # ------------------------------------------------------------------
    # builders

    def pools(self) -> PoolQueryBuilder:
        return self._builder(PoolQueryBuilder)

    def members(self) -> PoolMemberQueryBuilder:
        return self._builder(PoolMemberQueryBuilder)

    def paymasters(self) -> PaymasterContractQueryBuilder:
        return self._builder(PaymasterContractQueryBuilder)

    def transactions(self) -> TransactionQueryBuilder:
        return self._builder(TransactionQueryBuilder)

    def revenue_withdrawals(self) -> RevenueWithdrawalQueryBuilder:
        return self._builder(RevenueWithdrawalQueryBuilder)

    def nullifier_usages(self) -> NullifierUsageQueryBuilder:
        return self._builder(NullifierUsageQueryBuilder)

    def daily_pool_stats(self) -> DailyPoolStatsQueryBuilder:
        return self._builder(DailyPoolStatsQueryBuilder)

    def daily_global_stats(self) -> DailyGlobalStatsQueryBuilder:
        return self._builder(DailyGlobalStatsQueryBuilder)

    def network_info(self) -> NetworkInfoQueryBuilder:
        return self._builder(NetworkInfoQueryBuilder)

    def merkle_roots(self) -> MerkleRootQueryBuilder:
        return self._builder(MerkleRootQueryBuilder)

    # ------------------------------------------------------------------
    # convenience reads

    async def get_all_pools(self, limit: int = 100) -> List[Pool]:
        return await self.pools().limit(limit).order_by_newest().execute()

    async def get_popular_pools(self, min_members: Amount = 10, limit: int = 20) -> List[Pool]:
        """Pools with at least min_members members, most members first"""
        return await (
            self.pools()
            .with_min_members(min_members)
            .order_by_popularity()
            .limit(limit)
            .execute()
        )

    async def get_affordable_pools(self, max_fee: Amount = ONE_ETH_WEI, limit: int = 20) -> List[Pool]:
        """Pools with joining fee <= max_fee (wei), cheapest first"""
        return await (
            self.pools()
            .max_joining_fee(max_fee)
            .order_by_affordability()
            .limit(limit)
            .execute()
        )

    async def get_recent_pools(self, limit: int = 10) -> List[Pool]:
        return await self.pools().order_by_newest().limit(limit).execute()

    async def get_pool_by_id(self, pool_id: str, include_members: bool = False,
                             member_limit: int = 100) -> Optional[Pool]:
        return await self.pools().get_by_id(pool_id, include_members, member_limit)

    async def pool_exists(self, pool_id: str) -> bool:
        return await self.pools().pool_exists(pool_id)

    async def get_pool_details(self, pool_id: str, members_first: int = 10,
                               roots_first: int = 10) -> Optional[Pool]:
        return await self.pools().details(pool_id, members_first, roots_first)

    async def find_pools_by_identity(self, identity_commitment: Amount,
                                     limit: int = 100) -> List[MemberPool]:
        """
        Pools an identity commitment is a member of.

        Args:
            identity_commitment: Semaphore identity commitment
            limit: Maximum memberships to return

        Returns:
            MemberPool(member, pool) pairs, most recently joined first
        """
        members = await (
            self.members()
            .by_identity(identity_commitment)
            .order_by_newest_joined()
            .limit(limit)
            .with_pool()
            .execute()
        )
        return [MemberPool(member=member, pool=member.pool) for member in members if member.pool is not None]

    async def get_pool_stats(self, limit: Optional[int] = None) -> PoolStats:
        """
        Aggregate over one page of pools.

        Counts are client-side over at most `limit` pools (default page size),
        not network totals.
        """
        query = self.pools()
        if limit is not None:
            query.limit(limit)
        pools = await query.execute()
        if not pools:
            return PoolStats()

        total_members = sum(pool.member_count or 0 for pool in pools)
        return PoolStats(
            total_pools=len(pools),
            total_members=total_members,
            average_members=round(total_members / len(pools)),
            total_deposits=sum(pool.total_deposits or 0 for pool in pools),
            most_popular_pool=max(pools, key=lambda pool: pool.member_count or 0),
            newest_pool=max(pools, key=lambda pool: pool.created_at_timestamp or 0),
        )

    async def search_pools(
        self,
        min_joining_fee: Optional[Amount] = None,
        max_joining_fee: Optional[Amount] = None,
        min_members: Optional[Amount] = None,
        max_members: Optional[Amount] = None,
        min_deposits: Optional[Amount] = None,
        created_after: Optional[Amount] = None,
        created_before: Optional[Amount] = None,
        order: str = "newest",
        limit: Optional[int] = None
    ) -> List[Pool]:
        """
        Pool discovery with optional criteria.

        Args:
            order: "newest", "oldest", "popularity" or "affordability"
            limit: Page size, default page size if None
        """
        if order not in _POOL_ORDERINGS:
            raise ValidationError(
                f"Unknown pool order: {order}. Expected one of: {', '.join(_POOL_ORDERINGS)}"
            )

        query = self.pools()
        if min_joining_fee is not None:
            query.min_joining_fee(min_joining_fee)
        if max_joining_fee is not None:
            query.max_joining_fee(max_joining_fee)
        if min_members is not None:
            query.with_min_members(min_members)
        if max_members is not None:
            query.with_max_members(max_members)
        if min_deposits is not None:
            query.with_min_deposits(min_deposits)
        if created_after is not None:
            query.created_after(created_after)
        if created_before is not None:
            query.created_before(created_before)

        _POOL_ORDERINGS[order](query)
        if limit is not None:
            query.limit(limit)
        return await query.execute()

    # ------------------------------------------------------------------
    # aggregations

    async def get_network_overview(self, network: Optional[str] = None,
                                   recent_limit: int = 10) -> NetworkOverview:
        """Network totals, latest daily stats, paymasters, recent pools and operations"""
        network = network or self.network

        info_query = self.network_info()
        global_query = self.daily_global_stats()
        paymaster_query = self.paymasters()
        pool_query = self.pools().order_by_newest().limit(recent_limit)
        transaction_query = self.transactions().order_by_timestamp().limit(recent_limit)
        if network:
            info_query.by_network(network)
            global_query.by_network(network)
            paymaster_query.by_network(network)
            pool_query.by_network(network)
            transaction_query.by_network(network)

        info, latest, paymasters, pools, transactions = await asyncio.gather(
            info_query.first(),
            global_query.latest(),
            paymaster_query.execute(),
            pool_query.execute(),
            transaction_query.execute(),
        )
        return NetworkOverview(
            network=network,
            info=info,
            latest_daily_stats=latest,
            paymasters=paymasters,
            recent_pools=pools,
            recent_transactions=transactions,
        )

    async def get_pool_overview(self, pool_id: Amount, days: int = 30,
                                recent_limit: int = 10) -> PoolOverview:
        """
        One pool with recent members, operations and daily performance.

        Args:
            pool_id: Numeric on-chain pool id
            days: Number of most recent daily records to summarize
            recent_limit: Members and operations to return
        """
        pool, members, transactions, daily = await asyncio.gather(
            self.pools().by_pool_id(pool_id).first(),
            self.members().in_pool(pool_id).order_by_newest_joined().limit(recent_limit).execute(),
            self.transactions().by_pool(pool_id).order_by_timestamp().limit(recent_limit).execute(),
            self.daily_pool_stats().by_pool(pool_id).order_by_date("desc").limit(days).execute(),
        )
        # summarize oldest to newest
        performance = summarize_pool_days(list(reversed(daily)))
        return PoolOverview(
            pool=pool,
            recent_members=members,
            recent_transactions=transactions,
            daily_stats=daily,
            performance=performance,
        )

    async def get_paymaster_metrics(self, paymaster_address: str,
                                    recent_limit: int = 10) -> PaymasterMetrics:
        """Paymaster state with its pools, recent operations and withdrawals"""
        paymaster, pools, transactions, withdrawals = await asyncio.gather(
            self.paymasters().by_address(paymaster_address).first(),
            self.pools().by_paymaster(paymaster_address).execute(),
            self.transactions().by_paymaster(paymaster_address).order_by_timestamp().limit(recent_limit).execute(),
            self.revenue_withdrawals().by_paymaster(paymaster_address).execute(),
        )
        return PaymasterMetrics(
            paymaster=paymaster,
            pools=pools,
            recent_transactions=transactions,
            revenue_withdrawals=withdrawals,
            total_withdrawn=sum(w.amount or 0 for w in withdrawals),
            total_gas_spent=sum(t.actual_gas_cost or 0 for t in transactions),
        )
