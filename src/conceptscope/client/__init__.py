"""HTTP client for the concept graph backend."""

from conceptscope.client.api_client import (
    APIError,
    ConceptGraphClient,
    close_client,
    get_client,
)

__all__ = [
    "APIError",
    "ConceptGraphClient",
    "get_client",
    "close_client",
]
