"""
Query builder DSL

    query = SubgraphQuery(client)
    pools = await query.pools().with_min_members(10).order_by_popularity().execute()
"""

from .types import (
    QueryConfig,
    EntityDescriptor,
    RelationSelection,
    Transport,
    PoolStats,
    PeakDay,
    GrowthRate,
    PoolPerformanceStats,
    NetworkStatistics,
    NetworkOverview,
    PoolOverview,
    PaymasterMetrics,
    RootStatistics,
    GasStatistics,
    TimelineDay,
    SenderStats,
)
from .filters import FilterOp, Filter, RelationFilter, parse_filter_key, to_filters, merge_where
from .compiler import CompiledQuery, compile_query
from .base import QueryBuilder
from .builders import (
    PoolQueryBuilder,
    PoolMemberQueryBuilder,
    PaymasterContractQueryBuilder,
    TransactionQueryBuilder,
    RevenueWithdrawalQueryBuilder,
    NullifierUsageQueryBuilder,
    DailyPoolStatsQueryBuilder,
    DailyGlobalStatsQueryBuilder,
    NetworkInfoQueryBuilder,
    MerkleRootQueryBuilder,
    summarize_pool_days,
    summarize_networks,
)
from .facade import SubgraphQuery
