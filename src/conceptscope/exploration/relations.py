"""Relation directory: expandable relation types of a graph node."""

import asyncio
import logging
from dataclasses import replace

from conceptscope.client import APIError, ConceptGraphClient
from conceptscope.config import settings
from conceptscope.exploration.selection import relations_loaded
from conceptscope.exploration.store import SessionStore

logger = logging.getLogger(__name__)


class RelationDirectory:
    """Looks up relation labels for the selected node.

    The reserved reference relation links concepts to external pages; it is
    hidden from the user-facing list.
    """

    def __init__(
        self,
        client: ConceptGraphClient,
        store: SessionStore,
        reserved_relation: str | None = None,
    ) -> None:
        self.client = client
        self.store = store
        self.reserved_relation = reserved_relation or settings.reference_relation

    async def relations_for(
        self,
        node_id: str,
        include_reserved: bool = False,
    ) -> tuple[str, ...]:
        """Distinct relation labels at ``node_id``; empty on any failure."""
        try:
            raw = await self.client.node_relations(node_id)
        except APIError as e:
            logger.debug(f"Relations for {node_id!r} unavailable: {e}")
            return ()

        relations: list[str] = []
        for relation in raw:
            if relation in relations:
                continue
            if relation == self.reserved_relation and not include_reserved:
                continue
            relations.append(relation)
        return tuple(relations)

    def _commit(self, anchor: int, node_id: str, relations: tuple[str, ...]) -> None:
        def transition(s):
            if s.details.anchor != anchor:
                return s
            selection = relations_loaded(s.selection, node_id, relations)
            if selection is s.selection:
                return s
            return replace(s, selection=selection)

        if self.store.update(transition).selection.selected_node_id != node_id:
            logger.debug(f"Selection moved away from {node_id!r}, relations dropped")

    async def load(self, node_id: str) -> tuple[str, ...]:
        """Fetch relations and attach them to the selection if still relevant."""
        anchor = self.store.state.details.anchor
        try:
            relations = await self.relations_for(node_id)
        except asyncio.CancelledError:
            self._commit(anchor, node_id, ())
            raise
        self._commit(anchor, node_id, relations)
        return relations
