"""
Subgraph client tests

HTTP behaviour is exercised through httpx.MockTransport.
"""

import asyncio
import json

import httpx
import pytest

from ..errors import QueryError, ValidationError
from ..data.graph_client import SubgraphClient, request_key
from ..query.facade import SubgraphQuery

URL = "https://subgraph.test/graphql"


def _client(handler, **kwargs):
    return SubgraphClient(URL, transport=httpx.MockTransport(handler), **kwargs)


class TestExecute:
    """Response handling"""

    @pytest.mark.asyncio
    async def test_returns_data(self):
        """The data member is returned and the body carries query and variables"""
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"pools": []}})

        async with _client(handler) as client:
            data = await client.execute("query { pools { id } }", {"first": 1})

        assert data == {"pools": []}
        assert seen["body"] == {"query": "query { pools { id } }", "variables": {"first": 1}}

    @pytest.mark.asyncio
    async def test_graphql_errors(self):
        """A GraphQL errors array becomes a QueryError"""
        def handler(request):
            return httpx.Response(200, json={"data": None, "errors": [{"message": "bad field"}]})

        async with _client(handler) as client:
            with pytest.raises(QueryError) as exc_info:
                await client.execute("query { x }")

        assert exc_info.value.errors == [{"message": "bad field"}]
        assert "bad field" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_http_status(self):
        """Non-2xx responses keep their status code"""
        def handler(request):
            return httpx.Response(503, text="unavailable")

        async with _client(handler) as client:
            with pytest.raises(QueryError) as exc_info:
                await client.execute("query { x }")

        assert exc_info.value.status_code == 503
        assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Connection failures are chained"""
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(QueryError) as exc_info:
                await client.execute("query { x }")

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Timeouts are reported as timeouts"""
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with _client(handler, timeout=1.0) as client:
            with pytest.raises(QueryError) as exc_info:
                await client.execute("query { x }")

        assert "timed out" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        """A non-JSON body is a QueryError"""
        def handler(request):
            return httpx.Response(200, text="<html>")

        async with _client(handler) as client:
            with pytest.raises(QueryError):
                await client.execute("query { x }")

    @pytest.mark.asyncio
    async def test_missing_data(self):
        """A response without data is a QueryError"""
        def handler(request):
            return httpx.Response(200, json={})

        async with _client(handler) as client:
            with pytest.raises(QueryError):
                await client.execute("query { x }")


class TestDeduplication:
    """Identical concurrent requests share one round trip"""

    @pytest.mark.asyncio
    async def test_identical_requests_share_one_call(self):
        """Concurrent equal requests make one HTTP call"""
        calls = []

        async def handler(request):
            calls.append(request)
            await asyncio.sleep(0.01)
            return httpx.Response(200, json={"data": {"pools": [{"id": "1"}]}})

        async with _client(handler) as client:
            first, second = await asyncio.gather(
                client.execute("query {\n  pools { id }\n}", {"a": 1, "b": 2}),
                client.execute("query { pools { id } }", {"b": 2, "a": 1}),
            )

        assert len(calls) == 1
        assert first == second == {"pools": [{"id": "1"}]}
        assert client._in_flight == {}

    @pytest.mark.asyncio
    async def test_different_variables_not_shared(self):
        """Different variables are different requests"""
        calls = []

        async def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"data": {}})

        async with _client(handler) as client:
            await asyncio.gather(
                client.execute("query { x }", {"a": 1}),
                client.execute("query { x }", {"a": 2}),
            )

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_sequential_requests_not_cached(self):
        """Completed requests are not cached"""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"data": {}})

        async with _client(handler) as client:
            await client.execute("query { x }")
            await client.execute("query { x }")

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_dedupe_disabled(self):
        """dedupe=False sends every request"""
        calls = []

        async def handler(request):
            calls.append(request)
            await asyncio.sleep(0.01)
            return httpx.Response(200, json={"data": {}})

        async with _client(handler, dedupe=False) as client:
            await asyncio.gather(client.execute("query { x }"), client.execute("query { x }"))

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_in_flight_table_bounded(self):
        """The in-flight table is evicted past max_in_flight"""
        async def handler(request):
            await asyncio.sleep(0.01)
            return httpx.Response(200, json={"data": {}})

        async with _client(handler, max_in_flight=4) as client:
            pending = [asyncio.ensure_future(client.execute("query { x }", {"n": n})) for n in range(10)]
            await asyncio.sleep(0)
            assert len(client._in_flight) <= 4
            await asyncio.gather(*pending)

        assert client._in_flight == {}

    @pytest.mark.asyncio
    async def test_shared_failure(self):
        """Every waiter sees the shared failure"""
        async def handler(request):
            await asyncio.sleep(0.01)
            return httpx.Response(500)

        async with _client(handler) as client:
            results = await asyncio.gather(
                client.execute("query { x }"),
                client.execute("query { x }"),
                return_exceptions=True,
            )

        assert all(isinstance(result, QueryError) for result in results)

    def test_request_key_normalizes_whitespace(self):
        """Keys ignore whitespace and variable order"""
        assert request_key("query {\n  x\n}", {"b": 1, "a": 2}) == request_key("query { x }", {"a": 2, "b": 1})


class TestNetworks:
    def test_for_network(self):
        """An explicit URL overrides the preset"""
        client = SubgraphClient.for_network(84532, subgraph_url=URL)
        assert client.url == URL

    def test_unsupported_network(self, monkeypatch):
        """A chain without a preset or URL is rejected"""
        from ..config import settings

        monkeypatch.setattr(settings, "SUBGRAPH_URL", "")
        with pytest.raises(ValidationError):
            SubgraphClient.for_network(1)

    def test_preset_url(self, monkeypatch):
        """Preset networks resolve their subgraph URL"""
        from ..config import settings
        from ..constants import NETWORK_PRESETS

        monkeypatch.setattr(settings, "SUBGRAPH_URL", "")
        client = SubgraphClient.for_network(84532)
        assert client.url == NETWORK_PRESETS[84532]["subgraph_url"]

    def test_supported_networks(self):
        """Supported chains come from the presets"""
        assert 84532 in SubgraphClient.supported_networks()
        assert SubgraphClient.is_network_supported(84532)
        assert not SubgraphClient.is_network_supported(1)

    def test_url_required(self):
        """An empty URL is rejected"""
        with pytest.raises(ValidationError):
            SubgraphClient("")

    def test_query_facade(self):
        """query() binds a façade to the client"""
        client = SubgraphClient(URL)
        query = client.query("base-sepolia")
        assert isinstance(query, SubgraphQuery)
        assert query.get_client() is client
        assert query.network == "base-sepolia"


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_builder_over_http(self):
        """A façade read goes through httpx end to end"""
        def handler(request):
            body = json.loads(request.content)
            assert body["variables"]["memberCount_gte"] == "10"
            return httpx.Response(200, json={"data": {"pools": [{"id": "1", "joiningFee": "1000000000000000000"}]}})

        async with _client(handler) as client:
            pools = await client.query().get_popular_pools(min_members=10)

        assert pools[0].joining_fee == 10 ** 18
