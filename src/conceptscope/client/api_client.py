"""Async client for the concept graph backend.

Endpoints:
- GET  /suggest?q=            -> ["completion", ...]
- GET  /search?keyword=&threshold= (POST /search as fallback)
- GET  /node-details?clickedLabel=&searchedLabel=
- GET  /node-relations?nodeId=
- POST /expand-node {nodeId, relationType}

Every failure (transport, timeout, malformed JSON, non-2xx) is raised as
APIError with a single human-readable message.
"""

import asyncio
import logging
from typing import Any

import httpx

from conceptscope.config import settings
from conceptscope.models import GraphEdge, GraphNode, NodeDetails, SearchResults

logger = logging.getLogger(__name__)

DEFAULT_ERROR = "Failed to fetch results"


class APIError(Exception):
    """Backend request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response, default: str) -> str:
    """Extract the ``error`` field of a failure payload, if any."""
    try:
        data = response.json()
    except ValueError:
        return default
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return default


class ConceptGraphClient:
    """Async client for the concept graph API using httpx."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_concurrent: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.api_timeout
        self.max_concurrent = max_concurrent or settings.api_max_concurrent

        self._transport = transport
        self._semaphore = asyncio.Semaphore(self.max_concurrent)
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request; transport failures become APIError."""
        client = self._get_client()
        async with self._semaphore:
            try:
                return await client.request(method, path, **kwargs)
            except httpx.TimeoutException as e:
                logger.warning(f"{method} {path} timed out: {e}")
                raise APIError(f"Request timed out: {path}") from e
            except httpx.HTTPError as e:
                logger.warning(f"{method} {path} failed: {e}")
                raise APIError(f"Request failed: {e}") from e

    @staticmethod
    def _json(response: httpx.Response, default_error: str = DEFAULT_ERROR) -> Any:
        """Decode a response body, raising APIError for non-2xx or bad JSON."""
        if not response.is_success:
            message = _error_message(response, default_error)
            logger.warning(
                f"{response.request.method} {response.request.url.path} "
                f"returned {response.status_code}: {message}"
            )
            raise APIError(message, status_code=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise APIError("Malformed response from server", response.status_code) from e

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._send(method, path, **kwargs)
        return self._json(response)

    async def suggest(self, prefix: str) -> list[str]:
        """Completion strings for a partial query."""
        data = await self._request("GET", "/suggest", params={"q": prefix})
        if not isinstance(data, list):
            raise APIError("Malformed suggestion response")
        return [str(item) for item in data if item is not None]

    async def search(self, keyword: str, threshold: float | None = None) -> SearchResults:
        """Search concepts; falls back to POST when the GET form is rejected."""
        threshold = settings.search_threshold if threshold is None else threshold

        response = await self._send(
            "GET", "/search", params={"keyword": keyword, "threshold": threshold}
        )
        if not response.is_success:
            logger.debug(f"GET /search returned {response.status_code}, retrying as POST")
            response = await self._send(
                "POST", "/search", json={"keyword": keyword, "threshold": threshold}
            )

        data = self._json(response)
        if not isinstance(data, dict):
            raise APIError("Malformed search response")
        try:
            return SearchResults.from_dict(data)
        except (AttributeError, TypeError, ValueError) as e:
            raise APIError("Malformed search response") from e

    async def node_details(self, clicked_label: str, searched_label: str) -> NodeDetails:
        """Metadata and initial graph for a concept."""
        data = await self._request(
            "GET",
            "/node-details",
            params={"clickedLabel": clicked_label, "searchedLabel": searched_label},
        )
        try:
            return NodeDetails.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise APIError("Malformed node details response") from e

    async def node_relations(self, node_id: str) -> list[str]:
        """Relation type labels available at a node, including reserved ones."""
        data = await self._request("GET", "/node-relations", params={"nodeId": node_id})
        relations = data.get("relations") if isinstance(data, dict) else None
        if not isinstance(relations, list):
            raise APIError("Malformed node relations response")
        return [str(r) for r in relations if r]

    async def expand_node(
        self,
        node_id: str,
        relation_type: str,
    ) -> tuple[list[GraphNode], list[GraphEdge]]:
        """Nodes and edges reachable from ``node_id`` via ``relation_type``."""
        data = await self._request(
            "POST",
            "/expand-node",
            json={"nodeId": node_id, "relationType": relation_type},
        )
        try:
            nodes = [GraphNode.from_dict(n) for n in data.get("newNodes") or []]
            edges = [GraphEdge.from_dict(e) for e in data.get("newEdges") or []]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise APIError("Malformed expansion response") from e
        return nodes, edges


# Global client instance
_client: ConceptGraphClient | None = None


def get_client() -> ConceptGraphClient:
    """Get or create the global API client."""
    global _client
    if _client is None:
        _client = ConceptGraphClient()
    return _client


async def close_client() -> None:
    """Close the global API client."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None
