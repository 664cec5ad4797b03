"""Revenue withdrawal query builder"""

from typing import Optional, Sequence, Union

from ...data.types import RevenueWithdrawal
from ...transformers.wire import to_filter_amount
from ..base import QueryBuilder
from ..types import EntityDescriptor

Amount = Union[int, str]

REVENUE_WITHDRAWAL_FIELDS = (
    "id",
    "recipient",
    "amount",
    "withdrawnAtBlock",
    "withdrawnAtTransaction",
    "withdrawnAtTimestamp",
)

REVENUE_WITHDRAWAL_DESCRIPTOR = EntityDescriptor(
    root_key="revenueWithdrawals",
    entity_type=RevenueWithdrawal,
    default_fields=REVENUE_WITHDRAWAL_FIELDS,
    default_order_by="withdrawnAtTimestamp",
    default_order_direction="desc",
)


class RevenueWithdrawalQueryBuilder(QueryBuilder[RevenueWithdrawal]):
    """Revenue withdrawals, most recent first by default"""

    DESCRIPTOR = REVENUE_WITHDRAWAL_DESCRIPTOR

    def by_paymaster(self, paymaster_address: str) -> "RevenueWithdrawalQueryBuilder":
        return self.where({"paymaster_": {"address": paymaster_address}})

    def by_paymasters(self, paymaster_addresses: Sequence[str]) -> "RevenueWithdrawalQueryBuilder":
        return self.where({"paymaster_": {"address_in": list(paymaster_addresses)}})

    def by_recipient(self, recipient: str) -> "RevenueWithdrawalQueryBuilder":
        return self.where({"recipient": recipient})

    def by_recipients(self, recipients: Sequence[str]) -> "RevenueWithdrawalQueryBuilder":
        return self.where({"recipient_in": list(recipients)})

    def recipient_contains(self, pattern: str) -> "RevenueWithdrawalQueryBuilder":
        return self.where({"recipient_contains": pattern})

    def amount_between(self, min_amount: Amount, max_amount: Amount) -> "RevenueWithdrawalQueryBuilder":
        return self.where({
            "amount_gte": to_filter_amount(min_amount),
            "amount_lte": to_filter_amount(max_amount),
        })

    def with_min_amount(self, amount: Amount) -> "RevenueWithdrawalQueryBuilder":
        return self.where({"amount_gte": to_filter_amount(amount)})

    def with_max_amount(self, amount: Amount) -> "RevenueWithdrawalQueryBuilder":
        return self.where({"amount_lte": to_filter_amount(amount)})

    def withdrawn_after(self, timestamp: Amount) -> "RevenueWithdrawalQueryBuilder":
        return self.where({"withdrawnAtTimestamp_gte": to_filter_amount(timestamp)})

    def withdrawn_before(self, timestamp: Amount) -> "RevenueWithdrawalQueryBuilder":
        return self.where({"withdrawnAtTimestamp_lte": to_filter_amount(timestamp)})

    def withdrawn_between(self, start: Amount, end: Amount) -> "RevenueWithdrawalQueryBuilder":
        return self.withdrawn_after(start).withdrawn_before(end)

    def withdrawn_at_block(self, block_number: Amount) -> "RevenueWithdrawalQueryBuilder":
        return self.where({"withdrawnAtBlock": to_filter_amount(block_number)})

    def order_by_newest_withdrawn(self) -> "RevenueWithdrawalQueryBuilder":
        return self.order_by("withdrawnAtTimestamp", "desc")

    def order_by_oldest_withdrawn(self) -> "RevenueWithdrawalQueryBuilder":
        return self.order_by("withdrawnAtTimestamp", "asc")

    def order_by_amount(self, direction: str = "desc") -> "RevenueWithdrawalQueryBuilder":
        return self.order_by("amount", direction)

    def with_paymaster(self) -> "RevenueWithdrawalQueryBuilder":
        return self.include("paymaster", fields=("id", "address", "contractType", "network"))

    async def total_withdrawn(self, recipient: Optional[str] = None) -> int:
        """Sum of withdrawn amounts over one page of the current query, in wei"""
        query = self.clone().by_recipient(recipient) if recipient else self
        return sum(w.amount or 0 for w in await query.execute())
