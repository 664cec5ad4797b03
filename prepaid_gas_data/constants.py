"""
Prepaid gas subgraph constants

Query limits, network presets and paymaster contract types.
"""

from typing import Dict, List

# Pagination
DEFAULT_LIMIT: int = 100
MAX_SAFE_LIMIT: int = 1000

ORDER_DIRECTIONS = ("asc", "desc")

# Paymaster contract types
PAYMASTER_TYPE_GAS_LIMITED = "GasLimited"
PAYMASTER_TYPE_ONE_TIME_USE = "OneTimeUse"
PAYMASTER_TYPES: List[str] = [PAYMASTER_TYPE_GAS_LIMITED, PAYMASTER_TYPE_ONE_TIME_USE]

# Chain IDs
CHAIN_IDS: Dict[str, int] = {
    'base-sepolia': 84532,
}

DEFAULT_CHAIN_ID: int = CHAIN_IDS['base-sepolia']

# Network presets (chain_id -> deployment)
NETWORK_PRESETS: Dict[int, dict] = {
    84532: {
        'chain_id': 84532,
        'chain_name': 'Base Sepolia',
        'network_name': 'base-sepolia',
        'subgraph_url': 'https://api.studio.thegraph.com/query/113435/prepaid-gas-paymaster-v2/version/latest',
        'rpc_url': 'https://sepolia.base.org',
        'block_explorer_url': 'https://sepolia.basescan.org',
        'native_currency': {'name': 'Ether', 'symbol': 'ETH', 'decimals': 18},
        'contracts': {
            'paymasters': {
                'gas_limited': {
                    'address': '0x3BEeC075aC5A77fFE0F9ee4bbb3DCBd07fA93fbf',
                    'start_block': 27904637,
                },
                'one_time_use': {
                    'address': '0x243A735115F34BD5c0F23a33a444a8d26e31E2E7',
                    'start_block': 27904638,
                },
            },
        },
    },
}

# Native token decimals for display formatting
ETH_DECIMALS: int = 18
