"""Exploration session - wires search, details, relations and expansion together.

Data flow:
    typing      -> suggestions (+ search-as-you-type)
    submit      -> search results (paged)
    open result -> node details (new anchor, selection reset)
    tap node    -> relation list
    relation    -> highlight + expansion merge
"""

import logging
from dataclasses import replace
from typing import Callable

from conceptscope.client import ConceptGraphClient, get_client
from conceptscope.config import Settings, settings as default_settings
from conceptscope.exploration.details import NodeDetailLoader
from conceptscope.exploration.expansion import ExpansionError, GraphExpansionMerger
from conceptscope.exploration.relations import RelationDirectory
from conceptscope.exploration.search import SearchSession
from conceptscope.exploration.selection import (
    clear_selection,
    highlight_relation,
    highlighted_edges,
    select_node,
)
from conceptscope.exploration.store import SessionStore
from conceptscope.exploration.suggestions import SuggestionFetcher
from conceptscope.models import GraphEdge, NodeDetails, Pagination, SearchResults, SessionState

logger = logging.getLogger(__name__)


class ExplorationSession:
    """
    One user's exploration of the concept graph.

    All UI events go through this object; the resulting SessionState is
    available as ``state`` and pushed to subscribers on every change.
    """

    def __init__(
        self,
        client: ConceptGraphClient | None = None,
        store: SessionStore | None = None,
        config: Settings | None = None,
    ) -> None:
        config = config or default_settings
        self.client = client or get_client()
        self.store = store or SessionStore()

        self.suggestions = SuggestionFetcher(
            self.client,
            self.store,
            delay=config.suggest_debounce,
            limit=config.suggest_limit,
        )
        self.search_session = SearchSession(
            self.client,
            self.store,
            delay=config.search_debounce,
            page_size=config.page_size,
            page_window=config.page_window,
            threshold=config.search_threshold,
        )
        self.details = NodeDetailLoader(self.client, self.store)
        self.relations = RelationDirectory(
            self.client, self.store, reserved_relation=config.reference_relation
        )
        self.expansion = GraphExpansionMerger(self.client, self.store, self.details)

    @property
    def state(self) -> SessionState:
        return self.store.state

    def subscribe(self, listener: Callable[[SessionState], None]) -> Callable[[], None]:
        return self.store.subscribe(listener)

    # Search

    def type_text(self, text: str) -> None:
        """Keystroke in the search box: debounced suggestions and search."""
        self.suggestions.schedule(text)
        self.search_session.schedule(text)

    async def submit_search(self, term: str) -> SearchResults | None:
        self.suggestions.cancel()
        return await self.search_session.search(term)

    def clear_search(self) -> None:
        self.suggestions.cancel()
        self.store.update(lambda s: s if not s.suggestions else replace(s, suggestions=()))
        self.search_session.clear()

    def go_to_page(self, page: int) -> Pagination:
        return self.search_session.go_to_page(page)

    # Node details

    async def open_concept(self, label: str) -> NodeDetails | None:
        """Open the detail view for a search result label."""
        return await self.details.load(label, self.state.search.term)

    def close_details(self) -> None:
        self.details.close()

    # Graph interaction

    async def tap_node(self, node_id: str) -> tuple[str, ...]:
        """Select a graph node and list its expandable relations."""
        node_details = self.state.details.node_details
        anchor_path = node_details.anchor_path if node_details else None
        if anchor_path is None or anchor_path.get_node(node_id) is None:
            logger.debug(f"Ignoring tap on unknown node {node_id!r}")
            return ()

        previous = self.state.selection
        selection = self.store.update(
            lambda s: replace(s, selection=select_node(s.selection, node_id))
        ).selection
        if selection is previous and not selection.loading_relations:
            return selection.available_relations
        return await self.relations.load(node_id)

    def tap_canvas(self) -> None:
        """Tap on empty canvas: deselect."""
        self.store.update(
            lambda s: replace(s, selection=clear_selection(s.selection))
        )

    async def choose_relation(self, relation: str) -> NodeDetails | None:
        """Highlight ``relation`` on the selected node and expand along it.

        The highlight is applied before the request and kept whatever the
        outcome; a failed expansion is left in ``details.expansion_error``.
        """
        node_id = self.state.selection.selected_node_id
        if node_id is None:
            logger.debug(f"No node selected, ignoring relation {relation!r}")
            return None

        self.store.update(
            lambda s: replace(s, selection=highlight_relation(s.selection, relation))
        )
        try:
            return await self.expansion.expand(node_id, relation)
        except ExpansionError as e:
            logger.warning(f"Expansion failed: {e.message}")
            return None

    def highlighted_edges(self) -> tuple[GraphEdge, ...]:
        node_details = self.state.details.node_details
        path = node_details.anchor_path if node_details else None
        return highlighted_edges(path, self.state.selection)

    # Lifecycle

    async def wait_idle(self) -> None:
        """Wait for pending debounced requests."""
        await self.suggestions.wait()
        await self.search_session.wait()

    async def close(self) -> None:
        """Cancel pending work; the client is owned by the caller."""
        self.suggestions.cancel()
        self.search_session.clear()
        self.details.close()
