"""
Entity serialization

serialize: entity -> wire dict (BigInt fields as decimal strings)
deserialize: wire dict -> entity (raises ParseError on malformed integers)

deserialize(serialize(x)) == x for every entity, and
serialize(deserialize(s)) == s for canonical wire dicts.
"""

from typing import Any, Dict, Type, TypeVar

from ..data.types import (
    SubgraphEntity,
    PaymasterContract,
    Pool,
    PoolMember,
    MerkleRoot,
    Transaction,
    RevenueWithdrawal,
    NullifierUsage,
    DailyPoolStats,
    DailyGlobalStats,
    NetworkInfo,
)

E = TypeVar("E", bound=SubgraphEntity)


def serialize(entity: SubgraphEntity) -> Dict[str, Any]:
    """Entity -> wire dict. Absent fields are omitted."""
    return entity.to_dict()


def deserialize(entity_type: Type[E], data: Dict[str, Any]) -> E:
    """Wire dict -> entity of the given type"""
    return entity_type.from_dict(data)


def _serializer(entity_type: Type[SubgraphEntity]):
    def _serialize(entity):
        if not isinstance(entity, entity_type):
            raise TypeError(f"expected {entity_type.__name__}, got {type(entity).__name__}")
        return entity.to_dict()
    _serialize.__name__ = f"serialize_{entity_type.__name__}"
    return _serialize


def _deserializer(entity_type: Type[E]):
    def _deserialize(data: Dict[str, Any]) -> E:
        return entity_type.from_dict(data)
    _deserialize.__name__ = f"deserialize_{entity_type.__name__}"
    return _deserialize


serialize_paymaster_contract = _serializer(PaymasterContract)
serialize_pool = _serializer(Pool)
serialize_pool_member = _serializer(PoolMember)
serialize_merkle_root = _serializer(MerkleRoot)
serialize_transaction = _serializer(Transaction)
serialize_revenue_withdrawal = _serializer(RevenueWithdrawal)
serialize_nullifier_usage = _serializer(NullifierUsage)
serialize_daily_pool_stats = _serializer(DailyPoolStats)
serialize_daily_global_stats = _serializer(DailyGlobalStats)
serialize_network_info = _serializer(NetworkInfo)

deserialize_paymaster_contract = _deserializer(PaymasterContract)
deserialize_pool = _deserializer(Pool)
deserialize_pool_member = _deserializer(PoolMember)
deserialize_merkle_root = _deserializer(MerkleRoot)
deserialize_transaction = _deserializer(Transaction)
deserialize_revenue_withdrawal = _deserializer(RevenueWithdrawal)
deserialize_nullifier_usage = _deserializer(NullifierUsage)
deserialize_daily_pool_stats = _deserializer(DailyPoolStats)
deserialize_daily_global_stats = _deserializer(DailyGlobalStats)
deserialize_network_info = _deserializer(NetworkInfo)
