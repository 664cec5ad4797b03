"""Paymaster contract query builder"""

from typing import Optional, Union

from ...constants import PAYMASTER_TYPES
from ...data.queries import GET_PAYMASTER_WITH_RELATED
from ...data.types import PaymasterContract
from ...errors import ValidationError
from ...transformers.wire import to_filter_amount
from ..base import QueryBuilder
from ..types import EntityDescriptor

Amount = Union[int, str]

PAYMASTER_FIELDS = (
    "id",
    "contractType",
    "address",
    "network",
    "chainId",
    "totalUsersDeposit",
    "currentDeposit",
    "revenue",
    "deployedAtBlock",
    "deployedAtTransaction",
    "deployedAtTimestamp",
    "lastUpdatedBlock",
    "lastUpdatedTimestamp",
)

PAYMASTER_DESCRIPTOR = EntityDescriptor(
    root_key="paymasterContracts",
    entity_type=PaymasterContract,
    default_fields=PAYMASTER_FIELDS,
    default_order_by="deployedAtTimestamp",
    default_order_direction="desc",
)


class PaymasterContractQueryBuilder(QueryBuilder[PaymasterContract]):
    """Paymaster contracts, most recently deployed first by default"""

    DESCRIPTOR = PAYMASTER_DESCRIPTOR

    def by_network(self, network: str) -> "PaymasterContractQueryBuilder":
        return self.where({"network": network})

    def by_type(self, contract_type: str) -> "PaymasterContractQueryBuilder":
        if contract_type not in PAYMASTER_TYPES:
            raise ValidationError(
                f"Unknown paymaster type: {contract_type}. "
                f"Expected one of: {', '.join(PAYMASTER_TYPES)}"
            )
        return self.where({"contractType": contract_type})

    def by_address(self, address: str) -> "PaymasterContractQueryBuilder":
        return self.where({"address": address})

    def by_id(self, network: str, address: str) -> "PaymasterContractQueryBuilder":
        return self.by_network(network).by_address(address)

    def with_min_revenue(self, amount: Amount) -> "PaymasterContractQueryBuilder":
        return self.where({"revenue_gte": to_filter_amount(amount)})

    def with_max_revenue(self, amount: Amount) -> "PaymasterContractQueryBuilder":
        return self.where({"revenue_lte": to_filter_amount(amount)})

    def with_min_deposit(self, amount: Amount) -> "PaymasterContractQueryBuilder":
        return self.where({"currentDeposit_gte": to_filter_amount(amount)})

    def with_max_deposit(self, amount: Amount) -> "PaymasterContractQueryBuilder":
        return self.where({"currentDeposit_lte": to_filter_amount(amount)})

    def deployed_after(self, timestamp: Amount) -> "PaymasterContractQueryBuilder":
        return self.where({"deployedAtTimestamp_gte": to_filter_amount(timestamp)})

    def deployed_before(self, timestamp: Amount) -> "PaymasterContractQueryBuilder":
        return self.where({"deployedAtTimestamp_lte": to_filter_amount(timestamp)})

    def only_active(self) -> "PaymasterContractQueryBuilder":
        """Paymasters that have earned revenue"""
        return self.where({"revenue_gt": to_filter_amount(0)})

    def order_by_revenue(self, direction: str = "desc") -> "PaymasterContractQueryBuilder":
        return self.order_by("revenue", direction)

    def order_by_deposit(self, direction: str = "desc") -> "PaymasterContractQueryBuilder":
        return self.order_by("currentDeposit", direction)

    def order_by_deployment(self, direction: str = "desc") -> "PaymasterContractQueryBuilder":
        return self.order_by("deployedAtTimestamp", direction)

    def order_by_activity(self, direction: str = "desc") -> "PaymasterContractQueryBuilder":
        return self.order_by("lastUpdatedTimestamp", direction)

    def with_pools(self, limit: int = 10) -> "PaymasterContractQueryBuilder":
        return self.include(
            "pools",
            fields=("id", "poolId", "joiningFee", "memberCount", "totalDeposits", "createdAtTimestamp"),
            first=limit,
            order_by="createdAtTimestamp",
            order_direction="desc",
        )

    def with_transactions(self, limit: int = 10) -> "PaymasterContractQueryBuilder":
        return self.include(
            "userOperations",
            fields=("id", "userOpHash", "sender", "actualGasCost", "executedAtTimestamp"),
            first=limit,
            order_by="executedAtTimestamp",
            order_direction="desc",
        )

    def with_revenue_withdrawals(self, limit: int = 10) -> "PaymasterContractQueryBuilder":
        return self.include(
            "revenueWithdrawals",
            fields=("id", "recipient", "amount", "withdrawnAtTimestamp"),
            first=limit,
            order_by="withdrawnAtTimestamp",
            order_direction="desc",
        )

    async def with_related(
        self,
        paymaster_id: str,
        pools_first: int = 10,
        transactions_first: int = 10,
        withdrawals_first: int = 10
    ) -> Optional[PaymasterContract]:
        """
        Point lookup of one paymaster with its recent pools, user operations
        and withdrawals.

        Args:
            paymaster_id: Entity id of the paymaster
            pools_first: Pools to embed
            transactions_first: User operations to embed
            withdrawals_first: Withdrawals to embed

        Returns:
            PaymasterContract, or None if it does not exist
        """
        variables = {
            "id": paymaster_id,
            "poolsFirst": pools_first,
            "transactionsFirst": transactions_first,
            "withdrawalsFirst": withdrawals_first,
        }
        data = await self._request(
            "GetPaymasterWithRelated", GET_PAYMASTER_WITH_RELATED, variables, "paymasterContract"
        )
        return PaymasterContract.from_dict(data) if data else None
