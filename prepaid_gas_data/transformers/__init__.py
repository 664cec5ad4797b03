"""
Transformers for the data layer

- wire: wire-safe integers (WireInt) and filter value normalization
- formatting: display helpers for wei, gas and timestamps
- serialization: entity <-> wire dict conversion
"""

from .wire import (
    WireInt,
    to_wire_int,
    parse_wire_int,
    is_valid_big_int_string,
    to_filter_amount,
    convert_big_ints_to_strings,
)
from .formatting import (
    format_big_int_value,
    format_gas_value,
    format_currency_value,
    calculate_percentage_change,
    format_timestamp,
    format_timestamp_with_time,
)
from .serialization import (
    serialize,
    deserialize,
    serialize_paymaster_contract,
    serialize_pool,
    serialize_pool_member,
    serialize_merkle_root,
    serialize_transaction,
    serialize_revenue_withdrawal,
    serialize_nullifier_usage,
    serialize_daily_pool_stats,
    serialize_daily_global_stats,
    serialize_network_info,
    deserialize_paymaster_contract,
    deserialize_pool,
    deserialize_pool_member,
    deserialize_merkle_root,
    deserialize_transaction,
    deserialize_revenue_withdrawal,
    deserialize_nullifier_usage,
    deserialize_daily_pool_stats,
    deserialize_daily_global_stats,
    deserialize_network_info,
)
