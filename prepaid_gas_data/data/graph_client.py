"""
Subgraph GraphQL client

Posts GraphQL documents to a prepaid gas subgraph over httpx and returns the
``data`` member of the response. Identical concurrent requests share one
HTTP round trip.
"""
import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..constants import NETWORK_PRESETS
from ..errors import QueryError, ValidationError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def request_key(query: str, variables: Optional[Dict[str, Any]] = None) -> str:
    """Deduplication key: whitespace-normalized document plus sorted variables"""
    normalized = _WHITESPACE.sub(" ", query).strip()
    return normalized + "|" + json.dumps(variables or {}, sort_keys=True, default=str)


def _error_message(errors: List[Any]) -> str:
    messages = []
    for error in errors:
        if isinstance(error, dict) and "message" in error:
            messages.append(str(error["message"]))
        else:
            messages.append(str(error))
    return "; ".join(messages) or "unknown error"


class SubgraphClient:
    """Async GraphQL client for one subgraph endpoint

    Usage:
        async with SubgraphClient.for_network(84532) as client:
            pools = await client.query().pools().limit(5).execute()
    """

    def __init__(
        self,
        url: str,
        timeout: float = settings.SUBGRAPH_TIMEOUT,
        headers: Optional[Dict[str, str]] = None,
        dedupe: bool = settings.SUBGRAPH_DEDUPE_REQUESTS,
        max_in_flight: int = settings.SUBGRAPH_MAX_IN_FLIGHT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Args:
            url: Subgraph GraphQL endpoint
            timeout: Request timeout in seconds
            headers: Extra HTTP headers (e.g. an API key)
            dedupe: Share one request between identical concurrent calls
            max_in_flight: Size of the in-flight table before eviction
            transport: Optional httpx transport, mainly for tests
        """
        if not url:
            raise ValidationError("Subgraph URL is required")

        self.url = url
        self.timeout = timeout
        self.dedupe = dedupe
        self.max_in_flight = max_in_flight
        self._in_flight: Dict[str, "asyncio.Task[Dict[str, Any]]"] = {}
        self._http = httpx.AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json", **(headers or {})},
            transport=transport,
        )

    @classmethod
    def for_network(
        cls,
        chain_id: Optional[int] = None,
        subgraph_url: Optional[str] = None,
        **kwargs
    ) -> "SubgraphClient":
        """
        Client for a preset network.

        Args:
            chain_id: Chain id, defaults to settings.SUBGRAPH_CHAIN_ID
            subgraph_url: Override for the preset endpoint

        Raises:
            ValidationError: The chain id has no preset and no URL was given
        """
        chain_id = chain_id or settings.SUBGRAPH_CHAIN_ID
        url = subgraph_url or settings.get_subgraph_url(chain_id)
        if not url:
            raise ValidationError(
                f"Unsupported chain id {chain_id}. Supported: {cls.supported_networks()}"
            )
        return cls(url, **kwargs)

    @staticmethod
    def supported_networks() -> List[int]:
        return sorted(NETWORK_PRESETS)

    @staticmethod
    def is_network_supported(chain_id: int) -> bool:
        return chain_id in NETWORK_PRESETS

    def query(self, network: Optional[str] = None):
        """Query façade bound to this client"""
        from ..query.facade import SubgraphQuery

        return SubgraphQuery(
            self,
            network=network,
            max_limit=settings.QUERY_MAX_LIMIT,
            default_limit=settings.QUERY_DEFAULT_LIMIT,
        )

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a GraphQL document.

        Args:
            query: GraphQL document
            variables: Variables object

        Returns:
            The response ``data`` member

        Raises:
            QueryError: Transport failure, non-2xx status, GraphQL errors or
                a response without data
        """
        variables = variables or {}
        if not self.dedupe:
            return await self._post(query, variables)

        key = request_key(query, variables)
        task = self._in_flight.get(key)
        if task is not None:
            logger.debug("Joining in-flight subgraph request")
            return await asyncio.shield(task)

        task = asyncio.ensure_future(self._post(query, variables))
        self._in_flight[key] = task
        task.add_done_callback(lambda done: self._forget(key, done))
        if len(self._in_flight) > self.max_in_flight:
            self._evict()
        return await asyncio.shield(task)

    def _forget(self, key: str, task: "asyncio.Task") -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # mark the result retrieved when every waiter was cancelled
        if not task.cancelled():
            task.exception()

    def _evict(self) -> None:
        """Drop the oldest half of the in-flight table; the requests keep running"""
        stale = list(self._in_flight)[: len(self._in_flight) // 2]
        for key in stale:
            del self._in_flight[key]
        logger.debug("Evicted %d in-flight subgraph requests", len(stale))

    async def _post(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._http.post(self.url, json={"query": query, "variables": variables})
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise QueryError(f"Subgraph request timed out after {self.timeout}s", cause=e) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise QueryError(f"Subgraph returned HTTP {status}", cause=e, status_code=status) from e
        except httpx.HTTPError as e:
            raise QueryError(f"Subgraph request failed: {e}", cause=e) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise QueryError("Subgraph returned malformed JSON", cause=e) from e

        if not isinstance(payload, dict):
            raise QueryError(f"Unexpected subgraph response: {payload!r}")

        errors = payload.get("errors")
        if errors:
            raise QueryError(f"GraphQL errors: {_error_message(errors)}", errors=errors)

        data = payload.get("data")
        if data is None:
            raise QueryError("Subgraph response has no data")
        return data

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "SubgraphClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
