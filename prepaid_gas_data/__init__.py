"""
Prepaid Gas Data

Typed async query builders for the prepaid gas paymaster subgraph:
pools, members, paymasters, sponsored user operations, revenue,
nullifier usage, merkle roots and daily statistics.
"""

__version__ = "0.1.0"
__author__ = "Prepaid Gas Team"

from .errors import SubgraphError, ValidationError, UnsupportedFilterError, QueryError, ParseError
from .constants import CHAIN_IDS, NETWORK_PRESETS, PAYMASTER_TYPES
# transformers must load before data: entity types depend on the wire helpers
from .transformers import WireInt, to_wire_int, parse_wire_int, serialize, deserialize
from .data import (
    SubgraphClient,
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
from .query import SubgraphQuery, QueryBuilder, QueryConfig, EntityDescriptor, compile_query
from .config import settings
from .utils import configure_logging, get_logger
