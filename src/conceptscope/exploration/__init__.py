"""Incremental graph exploration engine.

Provides:
- Debounced suggestions and search with last-request-wins ordering
- Node detail loading (anchor concept replacement)
- Relation lookup for the selected node
- Idempotent expansion merges into the anchor graph
"""

from conceptscope.exploration.concurrency import Debouncer, RequestSlot
from conceptscope.exploration.details import NodeDetailLoader
from conceptscope.exploration.expansion import ExpansionError, GraphExpansionMerger
from conceptscope.exploration.relations import RelationDirectory
from conceptscope.exploration.search import SearchSession
from conceptscope.exploration.session import ExplorationSession
from conceptscope.exploration.store import SessionStore
from conceptscope.exploration.suggestions import SuggestionFetcher

__all__ = [
    # Primitives
    "Debouncer",
    "RequestSlot",
    "SessionStore",
    # Components
    "SuggestionFetcher",
    "SearchSession",
    "NodeDetailLoader",
    "RelationDirectory",
    "GraphExpansionMerger",
    "ExpansionError",
    # Coordinator
    "ExplorationSession",
]
