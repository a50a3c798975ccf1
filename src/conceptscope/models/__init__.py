"""conceptscope data models."""

from conceptscope.models.concept import ConceptMatch, SearchResults, first_value
from conceptscope.models.graph import GraphEdge, GraphNode, GraphPath, NodeDetails
from conceptscope.models.session import (
    ELLIPSIS,
    DetailState,
    Pagination,
    SearchState,
    SelectionPhase,
    SelectionState,
    SessionState,
    page_window,
    total_pages,
)

__all__ = [
    "ConceptMatch",
    "SearchResults",
    "first_value",
    "GraphNode",
    "GraphEdge",
    "GraphPath",
    "NodeDetails",
    "ELLIPSIS",
    "Pagination",
    "SelectionPhase",
    "SelectionState",
    "SearchState",
    "DetailState",
    "SessionState",
    "page_window",
    "total_pages",
]
