"""Graph expansion: fetch neighbours of a node and merge them into the anchor graph.

Merge rules (see GraphPath.merged):
1. Nodes whose id is already in the anchor path are dropped, never overwritten.
2. Edges whose (source, target, type) is already present are dropped.
3. Nothing new -> the NodeDetails value is left untouched (same object).
4. Otherwise the anchor path is replaced by ``old + new`` in server order;
   trailing graph paths are kept unchanged.

Expansions are keyed by (anchor, node_id, relation_type). The same key may be
in flight more than once; it stays pending until its last request settles.
A response that arrives after the anchor concept was replaced is discarded.
The merge is applied to the NodeDetails current at arrival time, so
overlapping expansions never lose each other's additions.
"""

import asyncio
import logging
from dataclasses import replace

from conceptscope.client import APIError, ConceptGraphClient
from conceptscope.exploration.details import NodeDetailLoader
from conceptscope.exploration.store import SessionStore
from conceptscope.models import GraphEdge, GraphNode, NodeDetails

logger = logging.getLogger(__name__)


def _without_one(pending: tuple, key: tuple[str, str]) -> tuple:
    """Drop a single occurrence of ``key``; re-clicks of one relation stack up."""
    index = pending.index(key)
    return pending[:index] + pending[index + 1:]


class ExpansionError(Exception):
    """Backend rejected an expansion; the anchor graph is unchanged."""

    def __init__(self, message: str, node_id: str, relation_type: str) -> None:
        super().__init__(message)
        self.message = message
        self.node_id = node_id
        self.relation_type = relation_type


class GraphExpansionMerger:
    """Expands the anchor graph one (node, relation) at a time."""

    def __init__(
        self,
        client: ConceptGraphClient,
        store: SessionStore,
        loader: NodeDetailLoader,
    ) -> None:
        self.client = client
        self.store = store
        self.loader = loader

    def _finish(
        self,
        anchor: int,
        key: tuple[str, str],
        nodes: list[GraphNode] | None = None,
        edges: list[GraphEdge] | None = None,
        error: str | None = None,
    ) -> NodeDetails | None:
        """Settle one pending request and merge or record the error, atomically.

        Successes never clear ``expansion_error``; only starting a new
        expansion does.
        """
        if not self.loader.is_current_anchor(anchor):
            logger.debug(f"Anchor replaced, discarding expansion {key}")
            return None

        def transition(s):
            details = s.details
            node_details = details.node_details
            if nodes or edges:
                node_details = node_details.with_expansion(nodes or [], edges or [])

            changes = {}
            if key in details.pending_expansions:
                changes["pending_expansions"] = _without_one(details.pending_expansions, key)
            if node_details is not details.node_details:
                changes["node_details"] = node_details
            if error is not None and error != details.expansion_error:
                changes["expansion_error"] = error
            if not changes:
                return s
            return replace(s, details=replace(details, **changes))

        return self.store.update(transition).details.node_details

    async def expand(self, node_id: str, relation_type: str) -> NodeDetails | None:
        """Fetch and merge expansion results for ``node_id`` via ``relation_type``.

        Returns the current NodeDetails after the merge, or None when there
        is no base graph or the anchor changed meanwhile.

        Raises:
            ExpansionError: The backend call failed; nothing was merged.
        """
        details = self.store.state.details
        anchor = details.anchor
        node_details = details.node_details
        anchor_path = node_details.anchor_path if node_details else None
        if anchor_path is None or anchor_path.is_empty:
            logger.info(f"No base graph, skipping expansion of {node_id!r} via {relation_type!r}")
            return None

        key = (node_id, relation_type)
        self.store.update(
            lambda s: replace(
                s,
                details=replace(
                    s.details,
                    pending_expansions=s.details.pending_expansions + (key,),
                    expansion_error=None,
                ),
            )
        )

        logger.info(f"Expanding {node_id!r} via {relation_type!r}")
        try:
            new_nodes, new_edges = await self.client.expand_node(node_id, relation_type)
        except APIError as e:
            logger.warning(f"Expansion of {node_id!r} via {relation_type!r} failed: {e.message}")
            if self._finish(anchor, key, error=e.message) is None:
                return None
            raise ExpansionError(e.message, node_id, relation_type) from e
        except asyncio.CancelledError:
            self._finish(anchor, key)
            raise

        before = self.store.state.details.node_details
        result = self._finish(anchor, key, nodes=new_nodes, edges=new_edges)
        if result is None:
            return None
        if result is before:
            logger.info(f"Expansion of {node_id!r} via {relation_type!r}: nothing new")
        else:
            logger.info(
                f"Expansion of {node_id!r} via {relation_type!r}: "
                f"graph now {result.anchor_path.summary}"
            )
        return result
