"""
Query façade tests

Convenience reads and concurrent aggregations against a fake transport.
"""

import pytest

from ..data.types import MemberPool, Pool
from ..errors import QueryError, ValidationError
from ..query.builders import PoolQueryBuilder
from ..query.facade import SubgraphQuery
from .fakes import FakeTransport


class TestBuilders:
    """Builder factories"""

    def test_fresh_builder_each_call(self, transport):
        """Each factory call returns a new builder"""
        query = SubgraphQuery(transport)
        query.pools().where({"network": "x"})
        assert query.pools().config.where == {}
        assert isinstance(query.pools(), PoolQueryBuilder)

    def test_limits_passed_through(self, transport):
        """Façade limits reach the builders"""
        query = SubgraphQuery(transport, max_limit=10, default_limit=5)
        with pytest.raises(ValidationError):
            query.members().limit(11)
        assert query.transactions().build().variables["first"] == 5

    def test_get_client(self, transport):
        """The bound transport is exposed"""
        assert SubgraphQuery(transport).get_client() is transport


class TestConvenienceReads:
    @pytest.mark.asyncio
    async def test_popular_pools(self):
        """Popular pools filter on member count, busiest first"""
        transport = FakeTransport()
        await SubgraphQuery(transport).get_popular_pools(min_members=10, limit=5)
        document, variables = transport.calls[0]
        assert "orderBy: memberCount, orderDirection: desc" in document
        assert variables == {"first": 5, "skip": 0, "memberCount_gte": "10"}

    @pytest.mark.asyncio
    async def test_affordable_pools(self):
        """Affordable pools cap the fee at one ether, cheapest first"""
        transport = FakeTransport()
        await SubgraphQuery(transport).get_affordable_pools()
        document, variables = transport.calls[0]
        assert "orderBy: joiningFee, orderDirection: asc" in document
        assert variables["joiningFee_lte"] == "1000000000000000000"
        assert variables["first"] == 20

    @pytest.mark.asyncio
    async def test_find_pools_by_identity(self, pool_row):
        """Memberships without a pool are skipped"""
        rows = [
            {"id": "m1", "identityCommitment": "42", "pool": pool_row},
            {"id": "m2", "identityCommitment": "42"},
        ]
        transport = FakeTransport({"poolMembers": rows})

        memberships = await SubgraphQuery(transport).find_pools_by_identity(42, limit=10)

        assert len(transport.calls) == 1
        assert transport.last_variables["identityCommitment"] == "42"
        assert "orderBy: addedAtTimestamp, orderDirection: desc" in transport.last_query
        assert len(memberships) == 1
        assert isinstance(memberships[0], MemberPool)
        assert memberships[0].member.id == "m1"
        assert memberships[0].pool == Pool.from_dict(pool_row)

    @pytest.mark.asyncio
    async def test_pool_stats(self):
        """Totals, rounded average and leaders over one page"""
        rows = [
            {"id": "a", "memberCount": "3", "totalDeposits": "30", "createdAtTimestamp": "100"},
            {"id": "b", "memberCount": "8", "totalDeposits": "80", "createdAtTimestamp": "50"},
        ]
        stats = await SubgraphQuery(FakeTransport({"pools": rows})).get_pool_stats()
        assert stats.total_pools == 2
        assert stats.total_members == 11
        assert stats.average_members == 6
        assert stats.total_deposits == 110
        assert stats.most_popular_pool.id == "b"
        assert stats.newest_pool.id == "a"

    @pytest.mark.asyncio
    async def test_pool_stats_empty(self, transport):
        """No pools gives empty stats"""
        stats = await SubgraphQuery(transport).get_pool_stats()
        assert stats.total_pools == 0
        assert stats.most_popular_pool is None

    @pytest.mark.asyncio
    async def test_search_pools(self):
        """Search combines filters with a named order"""
        transport = FakeTransport()
        await SubgraphQuery(transport).search_pools(min_members=2, max_joining_fee=100, order="oldest", limit=3)
        document, variables = transport.calls[0]
        assert "orderBy: createdAtTimestamp, orderDirection: asc" in document
        assert variables == {"first": 3, "skip": 0, "joiningFee_lte": "100", "memberCount_gte": "2"}

    @pytest.mark.asyncio
    async def test_search_pools_bad_order(self, transport):
        """An unknown order fails before any request"""
        with pytest.raises(ValidationError):
            await SubgraphQuery(transport).search_pools(order="cheapest")
        assert transport.calls == []


class TestAggregations:
    """Concurrent multi-query reads"""

    @pytest.mark.asyncio
    async def test_network_overview(self, pool_row):
        """Five concurrent reads scoped to the façade's network"""
        transport = FakeTransport({
            "networkInfos": [{"id": "base-sepolia", "name": "base-sepolia", "totalPools": "1"}],
            "dailyGlobalStats": [{"id": "g", "date": "2024-01-02"}],
            "paymasterContracts": [{"id": "pm"}],
            "pools": [pool_row],
            "userOperations": [{"id": "op"}],
        })

        overview = await SubgraphQuery(transport, network="base-sepolia").get_network_overview(recent_limit=3)

        assert len(transport.calls) == 5
        assert all(variables.get("network", variables.get("name")) == "base-sepolia"
                   for _, variables in transport.calls)
        assert overview.network == "base-sepolia"
        assert overview.info.total_pools == 1
        assert overview.latest_daily_stats.date == "2024-01-02"
        assert [p.id for p in overview.paymasters] == ["pm"]
        assert overview.recent_pools[0].pool_id == 1
        assert transport.calls_for("pools")[0][1]["first"] == 3

    @pytest.mark.asyncio
    async def test_pool_overview(self):
        """Daily stats are returned newest first and summarized oldest first"""
        transport = FakeTransport({
            "pools": [{"id": "84532-1", "poolId": "1"}],
            "poolMembers": [{"id": "m"}],
            "userOperations": [],
            "dailyPoolStats": [
                {"id": "d2", "date": "2024-01-02", "userOperations": "6", "totalMembers": "9"},
                {"id": "d1", "date": "2024-01-01", "userOperations": "2", "totalMembers": "5"},
            ],
        })

        overview = await SubgraphQuery(transport).get_pool_overview(1, days=7)

        assert overview.pool.pool_id == 1
        assert [d.id for d in overview.daily_stats] == ["d2", "d1"]
        assert overview.performance.total_days == 2
        assert overview.performance.growth_rate.members == 2.0
        assert transport.calls_for("dailyPoolStats")[0][1]["first"] == 7

    @pytest.mark.asyncio
    async def test_paymaster_metrics(self):
        """Withdrawn and gas totals over the fetched records"""
        transport = FakeTransport({
            "paymasterContracts": [{"id": "pm", "address": "0xpm", "revenue": "100"}],
            "pools": [{"id": "p"}],
            "userOperations": [{"id": "a", "actualGasCost": "3"}, {"id": "b", "actualGasCost": "4"}],
            "revenueWithdrawals": [{"id": "w", "amount": "50"}],
        })

        metrics = await SubgraphQuery(transport).get_paymaster_metrics("0xpm")

        assert metrics.paymaster.revenue == 100
        assert metrics.total_withdrawn == 50
        assert metrics.total_gas_spent == 7
        assert len(metrics.pools) == 1

    @pytest.mark.asyncio
    async def test_aggregation_fails_as_a_whole(self):
        """One failing read fails the aggregation"""
        transport = FakeTransport({"revenueWithdrawals": RuntimeError("indexer down")})
        with pytest.raises(QueryError):
            await SubgraphQuery(transport).get_paymaster_metrics("0xpm")
