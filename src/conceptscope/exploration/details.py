"""Node detail loader: metadata and initial graph of the anchor concept.

Each load takes a new anchor generation. Starting a load invalidates any
in-flight load and any in-flight expansion of the previous anchor, and resets
the selection.
"""

import asyncio
import logging
from dataclasses import replace

from conceptscope.client import APIError, ConceptGraphClient
from conceptscope.exploration.concurrency import RequestSlot
from conceptscope.exploration.store import SessionStore
from conceptscope.models import DetailState, NodeDetails, SelectionState

logger = logging.getLogger(__name__)


class NodeDetailLoader:
    """Loads NodeDetails and owns the anchor generation."""

    def __init__(self, client: ConceptGraphClient, store: SessionStore) -> None:
        self.client = client
        self.store = store
        self._slot = RequestSlot("node-details")

    def is_current_anchor(self, anchor: int) -> bool:
        """True while ``anchor`` still owns the detail view."""
        details = self.store.state.details
        return (
            anchor != 0
            and self._slot.is_current(anchor)
            and details.anchor == anchor
            and details.node_details is not None
        )

    def _commit(self, token: int, **changes) -> None:
        if self._slot.discard(token):
            return
        self.store.update(
            lambda s: replace(
                s,
                details=replace(s.details, **changes),
                selection=SelectionState(),
            )
        )

    async def load(self, clicked_label: str, searched_label: str) -> NodeDetails | None:
        """Fetch details for ``clicked_label`` and make it the anchor concept."""
        token = self._slot.begin()
        pending = DetailState(
            anchor=token,
            clicked_label=clicked_label,
            searched_label=searched_label,
            loading=True,
        )
        self.store.update(
            lambda s: replace(s, details=pending, selection=SelectionState())
        )

        logger.info(f"Loading details for {clicked_label!r} (search: {searched_label!r})")
        try:
            details = await self.client.node_details(clicked_label, searched_label)
        except APIError as e:
            logger.warning(f"Node details for {clicked_label!r} failed: {e.message}")
            self._commit(token, error=e.message, loading=False)
            return None
        except asyncio.CancelledError:
            self._commit(token, loading=False)
            raise

        if self._slot.discard(token):
            return None

        anchor = details.anchor_path
        logger.info(
            f"Loaded {clicked_label!r}: {len(details.metadata)} metadata fields, "
            f"{anchor.summary if anchor else 'no graph'}"
        )
        self._commit(token, node_details=details, error=None, loading=False)
        return details

    def close(self) -> None:
        """Close the detail view and drop in-flight loads and expansions."""
        self._slot.begin()
        self.store.update(
            lambda s: replace(s, details=DetailState(), selection=SelectionState())
        )
