"""
Transaction (sponsored user operation) query builder

The subgraph stores sponsored operations as ``UserOperation`` entities;
this builder reads them from the ``userOperations`` root.
"""

import time
from typing import Dict, List, Optional, Sequence, Union

from ...constants import PAYMASTER_TYPES
from ...data.types import Transaction
from ...errors import ValidationError
from ...transformers.formatting import format_timestamp
from ...transformers.wire import to_filter_amount
from ..base import QueryBuilder
from ..types import EntityDescriptor, GasStatistics, SenderStats, TimelineDay

Amount = Union[int, str]

TRANSACTION_FIELDS = (
    "id",
    "userOpHash",
    "network",
    "chainId",
    "sender",
    "actualGasCost",
    "nullifier",
    "executedAtBlock",
    "executedAtTransaction",
    "executedAtTimestamp",
    "gasPrice",
    "totalGasUsed",
    "paymaster { id address contractType }",
    "pool { id poolId }",
)

TRANSACTION_DESCRIPTOR = EntityDescriptor(
    root_key="userOperations",
    entity_type=Transaction,
    default_fields=TRANSACTION_FIELDS,
    default_order_by="executedAtTimestamp",
    default_order_direction="desc",
)


class TransactionQueryBuilder(QueryBuilder[Transaction]):
    """Sponsored user operations, most recent first by default"""

    DESCRIPTOR = TRANSACTION_DESCRIPTOR

    def by_network(self, network: str) -> "TransactionQueryBuilder":
        return self.where({"network": network})

    def by_hash(self, user_op_hash: str) -> "TransactionQueryBuilder":
        return self.where({"userOpHash": user_op_hash})

    def by_id(self, network: str, user_op_hash: str) -> "TransactionQueryBuilder":
        return self.by_network(network).by_hash(user_op_hash)

    def by_paymaster(self, paymaster_address: str) -> "TransactionQueryBuilder":
        return self.where({"paymaster_": {"address": paymaster_address}})

    def by_paymaster_type(self, contract_type: str) -> "TransactionQueryBuilder":
        if contract_type not in PAYMASTER_TYPES:
            raise ValidationError(f"Unknown paymaster type: {contract_type}")
        return self.where({"paymaster_": {"contractType": contract_type}})

    def by_pool(self, pool_id: Amount) -> "TransactionQueryBuilder":
        return self.where({"pool_": {"poolId": to_filter_amount(pool_id)}})

    def by_sender(self, sender: str) -> "TransactionQueryBuilder":
        return self.where({"sender": sender})

    def by_senders(self, senders: Sequence[str]) -> "TransactionQueryBuilder":
        return self.where({"sender_in": list(senders)})

    def by_nullifier(self, nullifier: Amount) -> "TransactionQueryBuilder":
        return self.where({"nullifier": to_filter_amount(nullifier)})

    def with_min_gas_cost(self, gas_cost: Amount) -> "TransactionQueryBuilder":
        """actualGasCost >= gas_cost (wei)"""
        return self.where({"actualGasCost_gte": to_filter_amount(gas_cost)})

    def with_max_gas_cost(self, gas_cost: Amount) -> "TransactionQueryBuilder":
        return self.where({"actualGasCost_lte": to_filter_amount(gas_cost)})

    def with_min_gas_price(self, gas_price: Amount) -> "TransactionQueryBuilder":
        return self.where({"gasPrice_gte": to_filter_amount(gas_price)})

    def with_max_gas_price(self, gas_price: Amount) -> "TransactionQueryBuilder":
        return self.where({"gasPrice_lte": to_filter_amount(gas_price)})

    def executed_after(self, timestamp: Amount) -> "TransactionQueryBuilder":
        return self.where({"executedAtTimestamp_gte": to_filter_amount(timestamp)})

    def executed_before(self, timestamp: Amount) -> "TransactionQueryBuilder":
        return self.where({"executedAtTimestamp_lte": to_filter_amount(timestamp)})

    def executed_between(self, start: Amount, end: Amount) -> "TransactionQueryBuilder":
        return self.executed_after(start).executed_before(end)

    def at_block(self, block_number: Amount) -> "TransactionQueryBuilder":
        return self.where({"executedAtBlock": to_filter_amount(block_number)})

    def in_transaction(self, transaction_hash: str) -> "TransactionQueryBuilder":
        """Operations bundled in one on-chain transaction"""
        return self.where({"executedAtTransaction": transaction_hash})

    def order_by_timestamp(self, direction: str = "desc") -> "TransactionQueryBuilder":
        return self.order_by("executedAtTimestamp", direction)

    def order_by_gas_cost(self, direction: str = "desc") -> "TransactionQueryBuilder":
        return self.order_by("actualGasCost", direction)

    def order_by_gas_price(self, direction: str = "desc") -> "TransactionQueryBuilder":
        return self.order_by("gasPrice", direction)

    def order_by_gas_used(self, direction: str = "desc") -> "TransactionQueryBuilder":
        return self.order_by("totalGasUsed", direction)

    def order_by_block(self, direction: str = "desc") -> "TransactionQueryBuilder":
        return self.order_by("executedAtBlock", direction)

    def order_by_sender(self, direction: str = "asc") -> "TransactionQueryBuilder":
        return self.order_by("sender", direction)

    def with_paymaster(self) -> "TransactionQueryBuilder":
        return self.include("paymaster", fields=("id", "address", "contractType", "network"))

    def with_pool(self) -> "TransactionQueryBuilder":
        return self.include("pool", fields=("id", "poolId", "joiningFee", "memberCount"))

    # lookups and analytics

    async def get_by_hash(self, user_op_hash: str, network: Optional[str] = None) -> Optional[Transaction]:
        """Single operation by user operation hash"""
        lookup = self.clone().reset().by_hash(user_op_hash)
        if network:
            lookup.by_network(network)
        return await lookup.first()

    async def gas_statistics(self) -> GasStatistics:
        """Gas totals, averages and spread over one page of the current query"""
        operations = await self.execute()
        count = len(operations)
        if count == 0:
            return GasStatistics()

        costs = sorted(op.actual_gas_cost or 0 for op in operations)
        total_cost = sum(costs)
        total_used = sum(op.total_gas_used or 0 for op in operations)
        total_price = sum(op.gas_price or 0 for op in operations)
        return GasStatistics(
            total_operations=count,
            total_gas_cost=total_cost,
            total_gas_used=total_used,
            average_gas_cost=total_cost // count,
            average_gas_used=total_used // count,
            average_gas_price=total_price // count,
            min_gas_cost=costs[0],
            max_gas_cost=costs[-1],
            median_gas_cost=costs[count // 2],
        )

    async def operation_timeline(self, days: int = 30, now: Optional[int] = None) -> List[TimelineDay]:
        """
        Operations of the last ``days`` days grouped by UTC date, oldest first.

        Args:
            days: Window length
            now: Window end in unix seconds, defaults to the current time
        """
        if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
            raise ValidationError(f"days must be a positive integer, got {days!r}")
        end = int(time.time()) if now is None else now
        start = max(end - days * 86400, 0)
        operations = await self.clone().executed_after(start).order_by_timestamp("asc").execute()

        timeline: Dict[str, TimelineDay] = {}
        senders: Dict[str, set] = {}
        for op in operations:
            if op.executed_at_timestamp is None:
                continue
            date = format_timestamp(op.executed_at_timestamp)
            day = timeline.setdefault(date, TimelineDay(date=date))
            day.operations += 1
            day.total_gas_cost += op.actual_gas_cost or 0
            senders.setdefault(date, set()).add(op.sender)

        for date, day in timeline.items():
            day.average_gas_cost = day.total_gas_cost // day.operations
            day.unique_senders = len(senders[date])
        return list(timeline.values())

    async def sender_analysis(self) -> List[SenderStats]:
        """Per-sender totals over one page of the current query, busiest sender first"""
        by_sender: Dict[str, SenderStats] = {}
        timestamps: Dict[str, List[int]] = {}
        for op in await self.execute():
            sender = op.sender or ""
            stats = by_sender.setdefault(sender, SenderStats(sender=sender))
            stats.operation_count += 1
            stats.total_gas_cost += op.actual_gas_cost or 0
            if op.executed_at_timestamp is not None:
                timestamps.setdefault(sender, []).append(op.executed_at_timestamp)

        for sender, stats in by_sender.items():
            stats.average_gas_cost = stats.total_gas_cost // stats.operation_count
            seen = timestamps.get(sender)
            if seen:
                stats.first_operation = min(seen)
                stats.last_operation = max(seen)
        return sorted(by_sender.values(), key=lambda stats: stats.operation_count, reverse=True)
