"""
Daily statistics query builders

DailyPoolStats: one record per pool per day
DailyGlobalStats: one record per network per day

Dates are YYYY-MM-DD strings and compare lexicographically on the server.
"""

from typing import Optional, Sequence, Union

from ...data.types import DailyGlobalStats, DailyPoolStats
from ...transformers.wire import to_filter_amount
from ..base import QueryBuilder
from ..filters import check_date
from ..types import EntityDescriptor, GrowthRate, PeakDay, PoolPerformanceStats

Amount = Union[int, str]

DAILY_POOL_STATS_FIELDS = (
    "id",
    "date",
    "poolId",
    "network",
    "newMembers",
    "userOperations",
    "gasSpent",
    "revenueGenerated",
    "totalMembers",
    "totalDeposits",
    "createdAtBlock",
    "createdAtTimestamp",
)

DAILY_POOL_STATS_DESCRIPTOR = EntityDescriptor(
    root_key="dailyPoolStats",
    entity_type=DailyPoolStats,
    default_fields=DAILY_POOL_STATS_FIELDS,
    default_order_by="date",
    default_order_direction="desc",
)

DAILY_GLOBAL_STATS_FIELDS = (
    "id",
    "date",
    "network",
    "newPools",
    "totalNewMembers",
    "totalUserOperations",
    "totalGasSpent",
    "totalRevenueGenerated",
    "totalActivePools",
    "totalMembers",
)

DAILY_GLOBAL_STATS_DESCRIPTOR = EntityDescriptor(
    root_key="dailyGlobalStats",
    entity_type=DailyGlobalStats,
    default_fields=DAILY_GLOBAL_STATS_FIELDS,
    default_order_by="date",
    default_order_direction="desc",
)


def summarize_pool_days(days: Sequence[DailyPoolStats]) -> PoolPerformanceStats:
    """
    Totals, averages, peak day and growth over daily pool records.

    Growth is a linear approximation: member growth is the change in
    total_members between the first and last record divided by the number
    of days, operation and revenue growth are per-day means. All growth
    rates are 0 for fewer than two days.
    """
    total_days = len(days)
    if total_days == 0:
        return PoolPerformanceStats()

    total_new_members = sum(day.new_members or 0 for day in days)
    total_user_operations = sum(day.user_operations or 0 for day in days)
    total_gas_spent = sum(day.gas_spent or 0 for day in days)
    total_revenue = sum(day.revenue_generated or 0 for day in days)

    peak = max(days, key=lambda day: day.user_operations or 0)

    growth = GrowthRate()
    if total_days > 1:
        first, last = days[0], days[-1]
        growth = GrowthRate(
            members=((last.total_members or 0) - (first.total_members or 0)) / total_days,
            operations=total_user_operations / total_days,
            revenue=total_revenue / total_days,
        )

    return PoolPerformanceStats(
        total_days=total_days,
        total_new_members=total_new_members,
        total_user_operations=total_user_operations,
        total_gas_spent=total_gas_spent,
        total_revenue=total_revenue,
        average_new_members=round(total_new_members / total_days, 2),
        average_user_operations=round(total_user_operations / total_days, 2),
        average_gas_spent=total_gas_spent // total_days,
        average_revenue=total_revenue // total_days,
        peak_day=PeakDay(
            date=peak.date or "",
            new_members=peak.new_members or 0,
            user_operations=peak.user_operations or 0,
            gas_spent=peak.gas_spent or 0,
            revenue=peak.revenue_generated or 0,
        ),
        growth_rate=growth,
    )


class DailyPoolStatsQueryBuilder(QueryBuilder[DailyPoolStats]):
    """Per-pool daily statistics, newest day first by default"""

    DESCRIPTOR = DAILY_POOL_STATS_DESCRIPTOR

    def by_network(self, network: str) -> "DailyPoolStatsQueryBuilder":
        return self.where({"network": network})

    def by_pool(self, pool_id: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"poolId": to_filter_amount(pool_id)})

    def by_pools(self, pool_ids: Sequence[Amount]) -> "DailyPoolStatsQueryBuilder":
        return self.where({"poolId_in": [to_filter_amount(p) for p in pool_ids]})

    def for_date(self, date: str) -> "DailyPoolStatsQueryBuilder":
        return self.where({"date": check_date(date)})

    def for_date_range(self, start_date: str, end_date: str) -> "DailyPoolStatsQueryBuilder":
        """Inclusive range of YYYY-MM-DD dates"""
        return self.where({"date_gte": check_date(start_date), "date_lte": check_date(end_date)})

    def with_min_new_members(self, count: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"newMembers_gte": to_filter_amount(count)})

    def with_max_new_members(self, count: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"newMembers_lte": to_filter_amount(count)})

    def with_min_user_operations(self, count: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"userOperations_gte": to_filter_amount(count)})

    def with_max_user_operations(self, count: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"userOperations_lte": to_filter_amount(count)})

    def with_min_gas_spent(self, amount: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"gasSpent_gte": to_filter_amount(amount)})

    def with_max_gas_spent(self, amount: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"gasSpent_lte": to_filter_amount(amount)})

    def with_min_revenue(self, amount: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"revenueGenerated_gte": to_filter_amount(amount)})

    def with_max_revenue(self, amount: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"revenueGenerated_lte": to_filter_amount(amount)})

    def with_min_total_members(self, count: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"totalMembers_gte": to_filter_amount(count)})

    def with_max_total_members(self, count: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"totalMembers_lte": to_filter_amount(count)})

    def with_min_total_deposits(self, amount: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"totalDeposits_gte": to_filter_amount(amount)})

    def with_max_total_deposits(self, amount: Amount) -> "DailyPoolStatsQueryBuilder":
        return self.where({"totalDeposits_lte": to_filter_amount(amount)})

    def order_by_date(self, direction: str = "desc") -> "DailyPoolStatsQueryBuilder":
        return self.order_by("date", direction)

    def order_by_new_members(self, direction: str = "desc") -> "DailyPoolStatsQueryBuilder":
        return self.order_by("newMembers", direction)

    def order_by_user_operations(self, direction: str = "desc") -> "DailyPoolStatsQueryBuilder":
        return self.order_by("userOperations", direction)

    def order_by_gas_spent(self, direction: str = "desc") -> "DailyPoolStatsQueryBuilder":
        return self.order_by("gasSpent", direction)

    def order_by_revenue(self, direction: str = "desc") -> "DailyPoolStatsQueryBuilder":
        return self.order_by("revenueGenerated", direction)

    def order_by_total_members(self, direction: str = "desc") -> "DailyPoolStatsQueryBuilder":
        return self.order_by("totalMembers", direction)

    def order_by_total_deposits(self, direction: str = "desc") -> "DailyPoolStatsQueryBuilder":
        return self.order_by("totalDeposits", direction)

    def order_by_newest(self) -> "DailyPoolStatsQueryBuilder":
        return self.order_by_date("desc")

    def order_by_oldest(self) -> "DailyPoolStatsQueryBuilder":
        return self.order_by_date("asc")

    def order_by_most_active(self) -> "DailyPoolStatsQueryBuilder":
        return self.order_by_user_operations("desc")

    def order_by_highest_growth(self) -> "DailyPoolStatsQueryBuilder":
        return self.order_by_new_members("desc")

    def order_by_most_profitable(self) -> "DailyPoolStatsQueryBuilder":
        return self.order_by_revenue("desc")

    def with_pool(self) -> "DailyPoolStatsQueryBuilder":
        return self.include("pool", fields=("id", "poolId", "joiningFee", "memberCount", "totalDeposits"))

    async def performance_stats(self) -> PoolPerformanceStats:
        """Summarize the days matched by the current query (one page), oldest first"""
        days = sorted(await self.execute(), key=lambda day: day.date or "")
        return summarize_pool_days(days)


class DailyGlobalStatsQueryBuilder(QueryBuilder[DailyGlobalStats]):
    """Network-wide daily statistics, newest day first by default"""

    DESCRIPTOR = DAILY_GLOBAL_STATS_DESCRIPTOR

    def by_network(self, network: str) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"network": network})

    def by_networks(self, networks: Sequence[str]) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"network_in": list(networks)})

    def for_date(self, date: str) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"date": check_date(date)})

    def for_date_range(self, start_date: str, end_date: str) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"date_gte": check_date(start_date), "date_lte": check_date(end_date)})

    def with_min_new_pools(self, count: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"newPools_gte": to_filter_amount(count)})

    def with_max_new_pools(self, count: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"newPools_lte": to_filter_amount(count)})

    def with_min_new_members(self, count: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalNewMembers_gte": to_filter_amount(count)})

    def with_max_new_members(self, count: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalNewMembers_lte": to_filter_amount(count)})

    def with_min_user_operations(self, count: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalUserOperations_gte": to_filter_amount(count)})

    def with_max_user_operations(self, count: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalUserOperations_lte": to_filter_amount(count)})

    def with_min_gas_spent(self, amount: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalGasSpent_gte": to_filter_amount(amount)})

    def with_max_gas_spent(self, amount: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalGasSpent_lte": to_filter_amount(amount)})

    def with_min_revenue(self, amount: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalRevenueGenerated_gte": to_filter_amount(amount)})

    def with_max_revenue(self, amount: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalRevenueGenerated_lte": to_filter_amount(amount)})

    def with_min_active_pools(self, count: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalActivePools_gte": to_filter_amount(count)})

    def with_max_active_pools(self, count: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalActivePools_lte": to_filter_amount(count)})

    def with_min_total_members(self, count: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalMembers_gte": to_filter_amount(count)})

    def with_max_total_members(self, count: Amount) -> "DailyGlobalStatsQueryBuilder":
        return self.where({"totalMembers_lte": to_filter_amount(count)})

    def order_by_date(self, direction: str = "desc") -> "DailyGlobalStatsQueryBuilder":
        return self.order_by("date", direction)

    def order_by_new_pools(self, direction: str = "desc") -> "DailyGlobalStatsQueryBuilder":
        return self.order_by("newPools", direction)

    def order_by_new_members(self, direction: str = "desc") -> "DailyGlobalStatsQueryBuilder":
        return self.order_by("totalNewMembers", direction)

    def order_by_user_operations(self, direction: str = "desc") -> "DailyGlobalStatsQueryBuilder":
        return self.order_by("totalUserOperations", direction)

    def order_by_gas_spent(self, direction: str = "desc") -> "DailyGlobalStatsQueryBuilder":
        return self.order_by("totalGasSpent", direction)

    def order_by_revenue(self, direction: str = "desc") -> "DailyGlobalStatsQueryBuilder":
        return self.order_by("totalRevenueGenerated", direction)

    def order_by_active_pools(self, direction: str = "desc") -> "DailyGlobalStatsQueryBuilder":
        return self.order_by("totalActivePools", direction)

    def order_by_total_members(self, direction: str = "desc") -> "DailyGlobalStatsQueryBuilder":
        return self.order_by("totalMembers", direction)

    def order_by_newest(self) -> "DailyGlobalStatsQueryBuilder":
        return self.order_by_date("desc")

    def order_by_oldest(self) -> "DailyGlobalStatsQueryBuilder":
        return self.order_by_date("asc")

    def order_by_most_active(self) -> "DailyGlobalStatsQueryBuilder":
        return self.order_by_user_operations("desc")

    def order_by_highest_growth(self) -> "DailyGlobalStatsQueryBuilder":
        return self.order_by_new_members("desc")

    def order_by_most_profitable(self) -> "DailyGlobalStatsQueryBuilder":
        return self.order_by_revenue("desc")

    async def latest(self) -> Optional[DailyGlobalStats]:
        """Most recent day matching the current filters"""
        return await self.clone().order_by_date("desc").first()
