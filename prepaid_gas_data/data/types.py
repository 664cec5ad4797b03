"""
Prepaid gas subgraph data types

Entities returned by the subgraph, as immutable dataclasses.
BigInt fields are native ints here and decimal strings on the wire.
Every field is optional because a query may select any subset of them.
"""

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, FrozenSet, Optional, Tuple, Type

from ..errors import ParseError
from ..transformers.wire import parse_wire_int, to_wire_int

# entity class name -> class, filled as entities are defined
ENTITY_TYPES: Dict[str, Type["SubgraphEntity"]] = {}


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class SubgraphEntity:
    """Base for subgraph entities

    Subclasses declare wire names of their numeric fields and relations:
    - BIG_INT_FIELDS: GraphQL BigInt (decimal string on the wire)
    - INT_FIELDS: GraphQL Int (JSON number on the wire)
    - RELATIONS: wire name -> (entity class name, is_list)
    """
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset()
    INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset()
    RELATIONS: ClassVar[Dict[str, Tuple[str, bool]]] = {}

    id: Optional[str] = None

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        ENTITY_TYPES[cls.__name__] = cls

    @classmethod
    def related_type(cls, wire_name: str) -> Optional[Type["SubgraphEntity"]]:
        """Entity class behind a relation field, or None"""
        relation = cls.RELATIONS.get(wire_name)
        return ENTITY_TYPES[relation[0]] if relation else None

    @classmethod
    def scalar_type(cls, wire_name: str) -> str:
        """GraphQL scalar name of a field, by convention"""
        if wire_name == "id":
            return "ID"
        if wire_name in cls.BIG_INT_FIELDS:
            return "BigInt"
        if wire_name in cls.INT_FIELDS:
            return "Int"
        return "String"

    @classmethod
    def from_dict(cls, data: dict):
        """Parse a wire dict. Unknown keys are ignored, absent keys become None."""
        values: Dict[str, Any] = {}
        for f in fields(cls):
            wire = snake_to_camel(f.name)
            if wire not in data or data[wire] is None:
                continue
            raw = data[wire]
            if wire in cls.RELATIONS:
                related = cls.related_type(wire)
                if cls.RELATIONS[wire][1]:
                    values[f.name] = tuple(related.from_dict(item) for item in raw)
                else:
                    values[f.name] = related.from_dict(raw)
            elif wire in cls.BIG_INT_FIELDS:
                values[f.name] = parse_wire_int(raw, field=wire)
            elif wire in cls.INT_FIELDS:
                try:
                    values[f.name] = int(raw)
                except (TypeError, ValueError) as e:
                    raise ParseError(f"Invalid Int for field '{wire}': {raw!r}", field=wire, value=raw) from e
            else:
                values[f.name] = raw
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Wire dict with BigInt fields as decimal strings. None fields are omitted."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            wire = snake_to_camel(f.name)
            if wire in self.RELATIONS:
                if self.RELATIONS[wire][1]:
                    result[wire] = [item.to_dict() for item in value]
                else:
                    result[wire] = value.to_dict()
            elif wire in self.BIG_INT_FIELDS:
                result[wire] = to_wire_int(value)
            else:
                result[wire] = value
        return result


@dataclass(frozen=True)
class PaymasterContract(SubgraphEntity):
    """Deployed paymaster contract (GasLimited or OneTimeUse)

    revenue = current_deposit - total_users_deposit
    """
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "totalUsersDeposit", "currentDeposit", "revenue",
        "deployedAtBlock", "deployedAtTimestamp",
        "lastUpdatedBlock", "lastUpdatedTimestamp",
    })
    INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"chainId"})
    RELATIONS: ClassVar[Dict[str, Tuple[str, bool]]] = {
        "pools": ("Pool", True),
        "userOperations": ("Transaction", True),
        "revenueWithdrawals": ("RevenueWithdrawal", True),
    }

    contract_type: Optional[str] = None
    address: Optional[str] = None
    network: Optional[str] = None
    chain_id: Optional[int] = None
    total_users_deposit: Optional[int] = None
    current_deposit: Optional[int] = None  # EntryPoint deposit
    revenue: Optional[int] = None
    deployed_at_block: Optional[int] = None
    deployed_at_transaction: Optional[str] = None
    deployed_at_timestamp: Optional[int] = None
    last_updated_block: Optional[int] = None
    last_updated_timestamp: Optional[int] = None
    pools: Optional[Tuple["Pool", ...]] = None
    user_operations: Optional[Tuple["Transaction", ...]] = None
    revenue_withdrawals: Optional[Tuple["RevenueWithdrawal", ...]] = None


@dataclass(frozen=True)
class Pool(SubgraphEntity):
    """Gas payment pool managed by a paymaster"""
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "poolId", "joiningFee", "totalDeposits", "memberCount", "currentMerkleRoot",
        "createdAtBlock", "createdAtTimestamp",
        "lastUpdatedBlock", "lastUpdatedTimestamp",
    })
    INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "chainId", "currentRootIndex", "rootHistoryCount",
    })
    RELATIONS: ClassVar[Dict[str, Tuple[str, bool]]] = {
        "paymaster": ("PaymasterContract", False),
        "members": ("PoolMember", True),
        "merkleRoots": ("MerkleRoot", True),
        "userOperations": ("Transaction", True),
    }

    pool_id: Optional[int] = None
    network: Optional[str] = None
    chain_id: Optional[int] = None
    paymaster: Optional[PaymasterContract] = None
    joining_fee: Optional[int] = None  # wei
    total_deposits: Optional[int] = None  # wei
    member_count: Optional[int] = None
    current_merkle_root: Optional[int] = None
    current_root_index: Optional[int] = None
    root_history_count: Optional[int] = None
    created_at_block: Optional[int] = None
    created_at_transaction: Optional[str] = None
    created_at_timestamp: Optional[int] = None
    last_updated_block: Optional[int] = None
    last_updated_timestamp: Optional[int] = None
    members: Optional[Tuple["PoolMember", ...]] = None
    merkle_roots: Optional[Tuple["MerkleRoot", ...]] = None
    user_operations: Optional[Tuple["Transaction", ...]] = None


@dataclass(frozen=True)
class PoolMember(SubgraphEntity):
    """Identity commitment registered in a pool

    gas_used applies to GasLimited pools, nullifier_used to OneTimeUse pools.
    """
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "memberIndex", "identityCommitment", "merkleRootWhenAdded",
        "addedAtBlock", "addedAtTimestamp", "gasUsed", "nullifier",
    })
    INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"rootIndexWhenAdded"})
    RELATIONS: ClassVar[Dict[str, Tuple[str, bool]]] = {
        "pool": ("Pool", False),
    }

    pool: Optional[Pool] = None
    member_index: Optional[int] = None
    identity_commitment: Optional[int] = None
    merkle_root_when_added: Optional[int] = None
    root_index_when_added: Optional[int] = None
    added_at_block: Optional[int] = None
    added_at_transaction: Optional[str] = None
    added_at_timestamp: Optional[int] = None
    gas_used: Optional[int] = None
    nullifier_used: Optional[bool] = None
    nullifier: Optional[int] = None


@dataclass(frozen=True)
class MerkleRoot(SubgraphEntity):
    """Entry in a pool's Merkle root history"""
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "root", "createdAtBlock", "createdAtTimestamp",
    })
    INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"rootIndex"})
    RELATIONS: ClassVar[Dict[str, Tuple[str, bool]]] = {
        "pool": ("Pool", False),
    }

    pool: Optional[Pool] = None
    root: Optional[int] = None
    root_index: Optional[int] = None
    created_at_block: Optional[int] = None
    created_at_transaction: Optional[str] = None
    created_at_timestamp: Optional[int] = None


@dataclass(frozen=True)
class Transaction(SubgraphEntity):
    """Sponsored user operation"""
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "actualGasCost", "nullifier", "executedAtBlock", "executedAtTimestamp",
        "gasPrice", "totalGasUsed",
    })
    INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"chainId"})
    RELATIONS: ClassVar[Dict[str, Tuple[str, bool]]] = {
        "paymaster": ("PaymasterContract", False),
        "pool": ("Pool", False),
    }

    user_op_hash: Optional[str] = None
    network: Optional[str] = None
    chain_id: Optional[int] = None
    paymaster: Optional[PaymasterContract] = None
    pool: Optional[Pool] = None
    sender: Optional[str] = None
    actual_gas_cost: Optional[int] = None
    nullifier: Optional[int] = None
    executed_at_block: Optional[int] = None
    executed_at_transaction: Optional[str] = None
    executed_at_timestamp: Optional[int] = None
    gas_price: Optional[int] = None
    total_gas_used: Optional[int] = None  # includes postOp


UserOperation = Transaction


@dataclass(frozen=True)
class RevenueWithdrawal(SubgraphEntity):
    """Revenue withdrawn from a paymaster"""
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "amount", "withdrawnAtBlock", "withdrawnAtTimestamp",
    })
    RELATIONS: ClassVar[Dict[str, Tuple[str, bool]]] = {
        "paymaster": ("PaymasterContract", False),
    }

    paymaster: Optional[PaymasterContract] = None
    recipient: Optional[str] = None
    amount: Optional[int] = None
    withdrawn_at_block: Optional[int] = None
    withdrawn_at_transaction: Optional[str] = None
    withdrawn_at_timestamp: Optional[int] = None


@dataclass(frozen=True)
class NullifierUsage(SubgraphEntity):
    """Nullifier consumption (gas used for GasLimited, is_used for OneTimeUse)"""
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "nullifier", "gasUsed", "firstUsedAtBlock", "firstUsedAtTimestamp",
        "lastUpdatedBlock", "lastUpdatedTimestamp",
    })
    RELATIONS: ClassVar[Dict[str, Tuple[str, bool]]] = {
        "paymaster": ("PaymasterContract", False),
        "pool": ("Pool", False),
        "userOperation": ("Transaction", False),
    }

    nullifier: Optional[int] = None
    paymaster: Optional[PaymasterContract] = None
    pool: Optional[Pool] = None
    is_used: Optional[bool] = None
    gas_used: Optional[int] = None
    user_operation: Optional[Transaction] = None
    first_used_at_block: Optional[int] = None
    first_used_at_transaction: Optional[str] = None
    first_used_at_timestamp: Optional[int] = None
    last_updated_block: Optional[int] = None
    last_updated_timestamp: Optional[int] = None


@dataclass(frozen=True)
class DailyPoolStats(SubgraphEntity):
    """Per-pool daily aggregates. date is YYYY-MM-DD."""
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "poolId", "newMembers", "userOperations", "gasSpent", "revenueGenerated",
        "totalMembers", "totalDeposits", "createdAtBlock", "createdAtTimestamp",
    })
    RELATIONS: ClassVar[Dict[str, Tuple[str, bool]]] = {
        "pool": ("Pool", False),
    }

    date: Optional[str] = None
    pool_id: Optional[int] = None
    network: Optional[str] = None
    pool: Optional[Pool] = None
    new_members: Optional[int] = None
    user_operations: Optional[int] = None
    gas_spent: Optional[int] = None
    revenue_generated: Optional[int] = None
    total_members: Optional[int] = None  # end of day
    total_deposits: Optional[int] = None  # end of day
    created_at_block: Optional[int] = None
    created_at_timestamp: Optional[int] = None


@dataclass(frozen=True)
class DailyGlobalStats(SubgraphEntity):
    """Daily aggregates across all pools and paymasters of a network"""
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "newPools", "totalNewMembers", "totalUserOperations", "totalGasSpent",
        "totalRevenueGenerated", "totalActivePools", "totalMembers",
    })

    date: Optional[str] = None
    network: Optional[str] = None
    new_pools: Optional[int] = None
    total_new_members: Optional[int] = None
    total_user_operations: Optional[int] = None
    total_gas_spent: Optional[int] = None
    total_revenue_generated: Optional[int] = None
    total_active_pools: Optional[int] = None
    total_members: Optional[int] = None


@dataclass(frozen=True)
class NetworkInfo(SubgraphEntity):
    """Network-wide totals"""
    BIG_INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({
        "totalPaymasters", "totalPools", "totalMembers", "totalUserOperations",
        "totalGasSpent", "totalRevenue",
        "firstDeploymentTimestamp", "lastActivityTimestamp",
    })
    INT_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"chainId"})

    name: Optional[str] = None
    chain_id: Optional[int] = None
    rpc_url: Optional[str] = None
    explorer_url: Optional[str] = None
    total_paymasters: Optional[int] = None
    total_pools: Optional[int] = None
    total_members: Optional[int] = None
    total_user_operations: Optional[int] = None
    total_gas_spent: Optional[int] = None
    total_revenue: Optional[int] = None
    first_deployment_timestamp: Optional[int] = None
    last_activity_timestamp: Optional[int] = None


@dataclass(frozen=True)
class MemberPool:
    """A pool membership: the member record and the pool it belongs to"""
    member: PoolMember
    pool: Pool
