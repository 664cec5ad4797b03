"""
Entity query builders

Each builder fixes an entity's root key, default fields and default order,
and adds named filters on top of the generic QueryBuilder.
"""

from .pools import PoolQueryBuilder, POOL_DESCRIPTOR
from .members import PoolMemberQueryBuilder, MEMBER_DESCRIPTOR
from .paymasters import PaymasterContractQueryBuilder, PAYMASTER_DESCRIPTOR
from .transactions import TransactionQueryBuilder, TRANSACTION_DESCRIPTOR
from .revenue import RevenueWithdrawalQueryBuilder, REVENUE_WITHDRAWAL_DESCRIPTOR
from .nullifiers import NullifierUsageQueryBuilder, NULLIFIER_USAGE_DESCRIPTOR
from .daily_stats import (
    DailyPoolStatsQueryBuilder,
    DailyGlobalStatsQueryBuilder,
    DAILY_POOL_STATS_DESCRIPTOR,
    DAILY_GLOBAL_STATS_DESCRIPTOR,
    summarize_pool_days,
)
from .network_info import NetworkInfoQueryBuilder, NETWORK_INFO_DESCRIPTOR, summarize_networks
from .merkle_roots import MerkleRootQueryBuilder, MERKLE_ROOT_DESCRIPTOR
