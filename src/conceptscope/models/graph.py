"""Graph models - nodes, edges and paths shown in the node detail view.

Identity rules:
- GraphNode: ``id``
- GraphEdge: ``(source, target, type)``

A GraphPath never holds two nodes with the same id or two edges with the same
key. Paths are immutable; merging returns a new path, or the same object when
nothing new was added.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

from conceptscope.models.concept import first_value

EdgeKey = tuple[str, str, str]


@dataclass(frozen=True)
class GraphNode:
    """A concept node in the displayed graph."""

    id: str  # Opaque, unique within a session
    label: str
    properties: dict[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "properties": dict(self.properties)}

    @classmethod
    def from_dict(cls, data: dict) -> "GraphNode":
        return cls(
            id=str(data["id"]),
            label=first_value(data.get("label")),
            properties=dict(data.get("properties") or {}),
        )


@dataclass(frozen=True)
class GraphEdge:
    """
    A directed, typed relation between two graph nodes.

    Example: n1 --subClassOf--> n2
    """

    source: str
    target: str
    type: str  # Relation label

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target, self.type)

    def touches(self, node_id: str) -> bool:
        return node_id in (self.source, self.target)

    def to_dict(self) -> dict:
        return {"source": self.source, "target": self.target, "type": self.type}

    @classmethod
    def from_dict(cls, data: dict) -> "GraphEdge":
        return cls(
            source=str(data["source"]),
            target=str(data["target"]),
            type=first_value(data.get("type")),
        )


@dataclass(frozen=True)
class GraphPath:
    """Append-only node and edge sequences; insertion order = discovery order."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()

    @property
    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    @property
    def edge_keys(self) -> set[EdgeKey]:
        return {edge.key for edge in self.edges}

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def summary(self) -> str:
        return f"{len(self.nodes)} nodes, {len(self.edges)} edges"

    def get_node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def merged(
        self,
        new_nodes: Iterable[GraphNode],
        new_edges: Iterable[GraphEdge],
    ) -> "GraphPath":
        """Append nodes and edges not already present.

        Nodes already present are dropped, never overwritten (first-seen
        properties win). Duplicates inside the incoming batch are dropped as
        well. Returns ``self`` when nothing new remains.
        """
        seen_ids = self.node_ids
        unique_nodes: list[GraphNode] = []
        for node in new_nodes:
            if node.id not in seen_ids:
                seen_ids.add(node.id)
                unique_nodes.append(node)

        seen_keys = self.edge_keys
        unique_edges: list[GraphEdge] = []
        for edge in new_edges:
            if edge.key not in seen_keys:
                seen_keys.add(edge.key)
                unique_edges.append(edge)

        if not unique_nodes and not unique_edges:
            return self

        return GraphPath(
            nodes=self.nodes + tuple(unique_nodes),
            edges=self.edges + tuple(unique_edges),
        )

    def to_elements(self) -> list[dict]:
        """Export renderer-neutral elements: nodes first, then edges."""
        elements: list[dict] = [
            {"data": {"id": node.id, "label": node.label, **node.properties}}
            for node in self.nodes
        ]
        elements.extend(
            {"data": {"source": edge.source, "target": edge.target, "label": edge.type}}
            for edge in self.edges
        )
        return elements

    def to_dict(self) -> dict:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GraphPath":
        """Create from an API payload; duplicates in the payload are dropped."""
        return cls().merged(
            (GraphNode.from_dict(n) for n in data.get("nodes") or []),
            (GraphEdge.from_dict(e) for e in data.get("edges") or []),
        )


@dataclass(frozen=True)
class NodeDetails:
    """Metadata and local graph of the anchor concept."""

    metadata: dict[str, Any] = field(default_factory=dict, hash=False)
    external_reference: str | None = None  # wikipedia_uri
    graph_paths: tuple[GraphPath, ...] = ()

    @property
    def anchor_path(self) -> GraphPath | None:
        """First graph path; the only one expansion ever touches."""
        return self.graph_paths[0] if self.graph_paths else None

    def with_expansion(
        self,
        new_nodes: Iterable[GraphNode],
        new_edges: Iterable[GraphEdge],
    ) -> "NodeDetails":
        """Merge expansion results into the anchor path.

        Only ``graph_paths[0]`` is replaced; trailing paths are kept as they
        are. Returns ``self`` if there is no anchor path or nothing new.
        """
        anchor = self.anchor_path
        if anchor is None:
            return self

        merged = anchor.merged(new_nodes, new_edges)
        if merged is anchor:
            return self

        return NodeDetails(
            metadata=self.metadata,
            external_reference=self.external_reference,
            graph_paths=(merged, *self.graph_paths[1:]),
        )

    def to_dict(self) -> dict:
        return {
            "metadata": dict(self.metadata),
            "wikipedia_uri": self.external_reference,
            "graph_paths": [path.to_dict() for path in self.graph_paths],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NodeDetails":
        """Create from the node-details endpoint payload."""
        return cls(
            metadata=dict(data.get("metadata") or {}),
            external_reference=data.get("wikipedia_uri") or None,
            graph_paths=tuple(
                GraphPath.from_dict(path) for path in data.get("graph_paths") or []
            ),
        )
