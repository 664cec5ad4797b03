"""
Query builder types

QueryConfig: mutable per-builder accumulator
EntityDescriptor: what a builder needs to know about its entity
RelationSelection: nested relation included in the selection block
Analytics result records returned by builder and façade aggregations
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, Type

from ..data.types import (
    SubgraphEntity,
    Pool,
    PoolMember,
    PaymasterContract,
    Transaction,
    RevenueWithdrawal,
    DailyPoolStats,
    DailyGlobalStats,
    NetworkInfo,
    MerkleRoot,
)


class Transport(Protocol):
    """Anything that can run a GraphQL document and return its ``data`` member"""

    async def execute(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass
class QueryConfig:
    """Configuration accumulated by builder calls"""
    selected_fields: Optional[List[str]] = None  # None -> entity defaults
    where: Dict[str, Any] = field(default_factory=dict)
    first: Optional[int] = None  # None -> default limit at compile time
    skip: Optional[int] = None  # None -> 0
    order_by: Optional[str] = None
    order_direction: Optional[str] = None

    def copy(self) -> "QueryConfig":
        return copy.deepcopy(self)


# entity type -> descriptor, used to resolve default fields of relations
DESCRIPTORS: Dict[Type[SubgraphEntity], "EntityDescriptor"] = {}


@dataclass(frozen=True)
class EntityDescriptor:
    """Root key, default selection and intrinsic order of an entity"""
    root_key: str
    entity_type: Type[SubgraphEntity]
    default_fields: Tuple[str, ...]
    default_order_by: Optional[str] = None
    default_order_direction: str = "desc"

    def __post_init__(self):
        DESCRIPTORS.setdefault(self.entity_type, self)

    @property
    def query_name(self) -> str:
        """GetPools, GetPoolMembers, ..."""
        return "Get" + self.root_key[0].upper() + self.root_key[1:]

    @property
    def scalar_fields(self) -> Tuple[str, ...]:
        """Default fields without nested selections"""
        return tuple(name for name in self.default_fields if "{" not in name)


@dataclass(frozen=True)
class RelationSelection:
    """Nested selection such as ``members(first: 10) { id }``"""
    name: str
    fields: Tuple[str, ...]
    first: Optional[int] = None
    order_by: Optional[str] = None
    order_direction: Optional[str] = None


@dataclass
class PoolStats:
    """Aggregate over one page of pools"""
    total_pools: int = 0
    total_members: int = 0
    average_members: int = 0
    total_deposits: int = 0
    most_popular_pool: Optional[Pool] = None
    newest_pool: Optional[Pool] = None


@dataclass
class PeakDay:
    date: str
    new_members: int
    user_operations: int
    gas_spent: int
    revenue: int


@dataclass
class GrowthRate:
    members: float = 0.0
    operations: float = 0.0
    revenue: float = 0.0


@dataclass
class PoolPerformanceStats:
    """Totals and averages over a range of daily pool stats"""
    total_days: int = 0
    total_new_members: int = 0
    total_user_operations: int = 0
    total_gas_spent: int = 0
    total_revenue: int = 0
    average_new_members: float = 0.0
    average_user_operations: float = 0.0
    average_gas_spent: int = 0  # integer division, wei
    average_revenue: int = 0
    peak_day: Optional[PeakDay] = None  # by user operations
    growth_rate: GrowthRate = field(default_factory=GrowthRate)


@dataclass
class NetworkStatistics:
    """Sums over network info records"""
    total_networks: int = 0
    total_paymasters: int = 0
    total_pools: int = 0
    total_members: int = 0
    total_user_operations: int = 0
    total_gas_spent: int = 0
    total_revenue: int = 0
    most_active_network: str = "N/A"
    most_profitable_network: str = "N/A"


@dataclass
class NetworkOverview:
    network: Optional[str]
    info: Optional[NetworkInfo]
    latest_daily_stats: Optional[DailyGlobalStats]
    paymasters: List[PaymasterContract]
    recent_pools: List[Pool]
    recent_transactions: List[Transaction]


@dataclass
class PoolOverview:
    pool: Optional[Pool]
    recent_members: List[PoolMember]
    recent_transactions: List[Transaction]
    daily_stats: List[DailyPoolStats]
    performance: PoolPerformanceStats


@dataclass
class PaymasterMetrics:
    paymaster: Optional[PaymasterContract]
    pools: List[Pool]
    recent_transactions: List[Transaction]
    revenue_withdrawals: List[RevenueWithdrawal]
    total_withdrawn: int = 0
    total_gas_spent: int = 0  # sum of actual_gas_cost over recent_transactions


@dataclass
class RootStatistics:
    """Root history of one pool"""
    total_roots: int = 0
    latest_index: int = 0
    oldest_root: Optional[MerkleRoot] = None
    newest_root: Optional[MerkleRoot] = None
    average_time_between_roots: int = 0  # seconds, rounded
    root_creation_rate: float = 0.0  # roots per day, 2 decimals


@dataclass
class GasStatistics:
    """Gas totals over one page of user operations, integer division for averages"""
    total_operations: int = 0
    total_gas_cost: int = 0
    total_gas_used: int = 0
    average_gas_cost: int = 0
    average_gas_used: int = 0
    average_gas_price: int = 0
    min_gas_cost: int = 0
    max_gas_cost: int = 0
    median_gas_cost: int = 0  # upper median


@dataclass
class TimelineDay:
    date: str  # YYYY-MM-DD, UTC
    operations: int = 0
    total_gas_cost: int = 0
    average_gas_cost: int = 0
    unique_senders: int = 0


@dataclass
class SenderStats:
    sender: str
    operation_count: int = 0
    total_gas_cost: int = 0
    average_gas_cost: int = 0
    first_operation: int = 0  # unix seconds, 0 if unknown
    last_operation: int = 0
