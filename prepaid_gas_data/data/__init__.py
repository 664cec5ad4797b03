"""
Data layer for the prepaid gas subgraph

- types: entity dataclasses
- graph_client: async GraphQL transport
- queries: fixed documents for point lookups
"""

from .types import (
    ENTITY_TYPES,
    SubgraphEntity,
    PaymasterContract,
    Pool,
    PoolMember,
    MerkleRoot,
    Transaction,
    UserOperation,
    RevenueWithdrawal,
    NullifierUsage,
    DailyPoolStats,
    DailyGlobalStats,
    NetworkInfo,
    MemberPool,
)
from .graph_client import SubgraphClient
from .queries import GET_PAYMASTER_WITH_RELATED, GET_POOL_DETAILS, GET_VALID_ROOT_INDICES
