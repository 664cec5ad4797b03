"""Shared fixtures"""

import pytest

from .fakes import FakeTransport

POOL_ROW = {
    "id": "84532-1",
    "poolId": "1",
    "network": "base-sepolia",
    "chainId": 84532,
    "joiningFee": "1000000000000000",
    "totalDeposits": "5000000000000000",
    "memberCount": "5",
    "createdAtTimestamp": "1700000000",
    "paymaster": {"id": "84532-0xpm", "contractType": "GasLimited", "address": "0xpm"},
}


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def pool_row():
    return dict(POOL_ROW)
