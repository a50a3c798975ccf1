"""Unit tests for data models."""

from conceptscope.models import (
    ConceptMatch,
    GraphEdge,
    GraphNode,
    GraphPath,
    NodeDetails,
    SearchResults,
    first_value,
)


class TestFirstValue:
    """Tests for string-or-list normalisation."""

    def test_plain_string(self) -> None:
        assert first_value("Perceptron") == "Perceptron"

    def test_list_takes_first(self) -> None:
        assert first_value(["Perceptron", "ignored"]) == "Perceptron"

    def test_empty_and_none(self) -> None:
        assert first_value([]) == ""
        assert first_value(None) == ""


class TestConceptMatch:
    """Tests for ConceptMatch and SearchResults parsing."""

    def test_from_dict_normalises_lists(self) -> None:
        match = ConceptMatch.from_dict(
            {"label": ["Graph"], "definition": ["A set of vertices."], "similarity": 77},
            "similar-0",
        )
        assert match.label == "Graph"
        assert match.definition == "A set of vertices."
        assert match.similarity == 77.0
        assert not match.is_exact

    def test_bad_similarity_defaults_to_zero(self) -> None:
        match = ConceptMatch.from_dict({"label": "x", "similarity": "n/a"}, "similar-0")
        assert match.similarity == 0.0

    def test_search_results_ids_and_order(self, sample_search_payload: dict) -> None:
        results = SearchResults.from_dict(sample_search_payload)

        assert results.exact_match is not None
        assert results.exact_match.id == "exact-match"
        assert results.exact_match.is_exact
        assert results.exact_match.label == "Neural network"
        assert [m.id for m in results.similar_matches] == ["similar-0", "similar-1"]
        assert [m.label for m in results.similar_matches] == ["Deep learning", "Perceptron"]
        assert results.similar_matches[1].definition == ""

    def test_search_results_empty(self) -> None:
        results = SearchResults.from_dict({"exact_match": None, "similar_nodes": []})
        assert results.is_empty


class TestGraphPath:
    """Tests for graph path merging."""

    def test_from_dict_drops_duplicates(self) -> None:
        path = GraphPath.from_dict({
            "nodes": [
                {"id": "a", "label": "A"},
                {"id": "a", "label": "A again"},
                {"id": "b", "label": "B"},
            ],
            "edges": [
                {"source": "a", "target": "b", "type": "rel"},
                {"source": "a", "target": "b", "type": "rel"},
                {"source": "b", "target": "a", "type": "rel"},
            ],
        })
        assert [n.id for n in path.nodes] == ["a", "b"]
        assert path.nodes[0].label == "A"
        assert len(path.edges) == 2

    def test_merge_appends_in_server_order(self, sample_path: GraphPath) -> None:
        merged = sample_path.merged(
            [GraphNode(id="n4", label="D"), GraphNode(id="n3", label="C")],
            [GraphEdge(source="n1", target="n4", type="related")],
        )
        assert [n.id for n in merged.nodes] == ["n1", "n2", "n4", "n3"]
        assert merged.edges[-1].key == ("n1", "n4", "related")
        # Original untouched
        assert len(sample_path.nodes) == 2

    def test_merge_keeps_first_seen_properties(self, sample_path: GraphPath) -> None:
        merged = sample_path.merged(
            [GraphNode(id="n1", label="Renamed", properties={"kind": "other"})],
            [GraphEdge(source="n2", target="n1", type="superClassOf")],
        )
        node = merged.get_node("n1")
        assert node.label == "Neural network"
        assert node.properties == {"kind": "concept"}

    def test_merge_nothing_new_returns_same_object(self, sample_path: GraphPath) -> None:
        merged = sample_path.merged(
            [GraphNode(id="n2", label="Machine learning")],
            [GraphEdge(source="n1", target="n2", type="subClassOf")],
        )
        assert merged is sample_path

    def test_merge_is_idempotent(self, sample_path: GraphPath) -> None:
        nodes = [GraphNode(id="n3", label="C")]
        edges = [GraphEdge(source="n2", target="n3", type="related")]

        once = sample_path.merged(nodes, edges)
        twice = once.merged(nodes, edges)

        assert twice is once
        assert twice == sample_path.merged(nodes, edges)

    def test_same_pair_different_type_is_new_edge(self, sample_path: GraphPath) -> None:
        merged = sample_path.merged([], [GraphEdge(source="n1", target="n2", type="related")])
        assert len(merged.edges) == 2

    def test_to_elements(self, sample_path: GraphPath) -> None:
        elements = sample_path.to_elements()
        assert elements[0] == {"data": {"id": "n1", "label": "Neural network", "kind": "concept"}}
        assert elements[-1] == {"data": {"source": "n1", "target": "n2", "label": "subClassOf"}}
        assert len(elements) == 3

    def test_summary(self, sample_path: GraphPath) -> None:
        assert sample_path.summary == "2 nodes, 1 edges"


class TestNodeDetails:
    """Tests for NodeDetails parsing and expansion."""

    def test_from_dict(self, sample_details: NodeDetails) -> None:
        assert sample_details.external_reference == "https://en.wikipedia.org/wiki/Neural_network"
        assert len(sample_details.graph_paths) == 2
        assert sample_details.anchor_path.get_node("n1").label == "Neural network"

    def test_with_expansion_replaces_only_anchor(self, sample_details: NodeDetails) -> None:
        expanded = sample_details.with_expansion(
            [GraphNode(id="n3", label="Perceptron")],
            [GraphEdge(source="n3", target="n1", type="subClassOf")],
        )
        assert expanded is not sample_details
        assert len(expanded.anchor_path.nodes) == 3
        assert expanded.graph_paths[1] is sample_details.graph_paths[1]
        assert expanded.metadata == sample_details.metadata

    def test_with_expansion_no_op(self, sample_details: NodeDetails) -> None:
        expanded = sample_details.with_expansion(
            [GraphNode(id="n1", label="Neural network")], []
        )
        assert expanded is sample_details

    def test_with_expansion_without_graph(self) -> None:
        details = NodeDetails(metadata={"label": "x"})
        assert details.anchor_path is None
        assert details.with_expansion([GraphNode(id="a", label="A")], []) is details

    def test_round_trip_dict(self, sample_details: NodeDetails) -> None:
        assert NodeDetails.from_dict(sample_details.to_dict()) == sample_details
