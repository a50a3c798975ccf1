"""Pytest configuration and fixtures."""

import inspect
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from conceptscope.client import ConceptGraphClient
from conceptscope.config import Settings, get_test_settings
from conceptscope.exploration import SessionStore
from conceptscope.models import GraphEdge, GraphNode, GraphPath, NodeDetails, SearchResults


class FakeBackend:
    """Routable handler for httpx.MockTransport.

    Handlers take the request and return an httpx.Response (or a coroutine
    resolving to one), so tests can hold responses back with asyncio events.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], Any]] = {}

    def route(self, method: str, path: str, handler: Callable[[httpx.Request], Any]) -> None:
        self.routes[(method, path)] = handler

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": f"No route for {request.url.path}"})
        response = handler(request)
        if inspect.isawaitable(response):
            response = await response
        return response


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with short debounce delays."""
    return get_test_settings()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def http_client(backend: FakeBackend) -> ConceptGraphClient:
    """Real client talking to the fake backend."""
    return ConceptGraphClient(
        base_url="http://testserver",
        transport=httpx.MockTransport(backend),
    )


@pytest.fixture
def mock_client() -> ConceptGraphClient:
    """Mock API client for testing components without HTTP."""
    client = MagicMock(spec=ConceptGraphClient)
    client.suggest = AsyncMock(return_value=[])
    client.search = AsyncMock(return_value=SearchResults())
    client.node_details = AsyncMock(return_value=NodeDetails())
    client.node_relations = AsyncMock(return_value=[])
    client.expand_node = AsyncMock(return_value=([], []))
    client.close = AsyncMock()
    return client


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def sample_search_payload() -> dict:
    """Search payload with list-wrapped labels, as the backend sends them."""
    return {
        "exact_match": {
            "label": ["Neural network"],
            "definition": ["A network of artificial neurons."],
            "similarity": 100,
        },
        "similar_nodes": [
            {"label": "Deep learning", "definition": "Learning with deep networks.", "similarity": 91.5},
            {"label": ["Perceptron"], "definition": [], "similarity": 80.25},
        ],
    }


@pytest.fixture
def sample_details_payload() -> dict:
    """Node details payload for 'Neural network'."""
    return {
        "metadata": {
            "label": "Neural network",
            "seeAlso": ["https://en.wikipedia.org/wiki/Perceptron", "Deep learning"],
        },
        "wikipedia_uri": "https://en.wikipedia.org/wiki/Neural_network",
        "graph_paths": [
            {
                "nodes": [
                    {"id": "n1", "label": "Neural network", "properties": {"kind": "concept"}},
                    {"id": "n2", "label": "Machine learning", "properties": {}},
                ],
                "edges": [
                    {"source": "n1", "target": "n2", "type": "subClassOf"},
                ],
            },
            {
                "nodes": [{"id": "n9", "label": "Biology", "properties": {}}],
                "edges": [],
            },
        ],
    }


@pytest.fixture
def sample_details(sample_details_payload: dict) -> NodeDetails:
    return NodeDetails.from_dict(sample_details_payload)


@pytest.fixture
def sample_path() -> GraphPath:
    return GraphPath(
        nodes=(
            GraphNode(id="n1", label="Neural network", properties={"kind": "concept"}),
            GraphNode(id="n2", label="Machine learning"),
        ),
        edges=(GraphEdge(source="n1", target="n2", type="subClassOf"),),
    )
