"""Unit tests for selection / highlight reducers."""

from conceptscope.exploration.selection import (
    clear_selection,
    highlight_relation,
    highlighted_edges,
    relations_loaded,
    select_node,
)
from conceptscope.models import GraphEdge, GraphNode, GraphPath, SelectionPhase, SelectionState


class TestSelectionReducers:
    """Tests for selection phase transitions."""

    def test_initial_state_is_idle(self) -> None:
        assert SelectionState().phase == SelectionPhase.IDLE

    def test_select_node(self) -> None:
        state = select_node(SelectionState(), "n1")
        assert state.phase == SelectionPhase.SELECTED
        assert state.loading_relations
        assert state.available_relations == ()

    def test_selecting_other_node_drops_highlight(self) -> None:
        state = SelectionState(
            selected_node_id="n1",
            available_relations=("subClassOf",),
            highlighted_relation="subClassOf",
        )
        state = select_node(state, "n2")
        assert state.selected_node_id == "n2"
        assert state.highlighted_relation is None
        assert state.available_relations == ()

    def test_reselecting_same_node_is_noop(self) -> None:
        state = SelectionState(selected_node_id="n1", available_relations=("a",))
        assert select_node(state, "n1") is state

    def test_relations_loaded(self) -> None:
        state = relations_loaded(select_node(SelectionState(), "n1"), "n1", ("a", "b"))
        assert state.available_relations == ("a", "b")
        assert not state.loading_relations

    def test_relations_for_other_node_ignored(self) -> None:
        state = select_node(SelectionState(), "n2")
        assert relations_loaded(state, "n1", ("a",)) is state

    def test_highlight(self) -> None:
        state = highlight_relation(SelectionState(selected_node_id="n1"), "subClassOf")
        assert state.phase == SelectionPhase.HIGHLIGHTED
        assert state.highlighted_relation == "subClassOf"

        switched = highlight_relation(state, "partOf")
        assert switched.highlighted_relation == "partOf"
        assert switched.selected_node_id == "n1"

    def test_highlight_requires_selection(self) -> None:
        state = SelectionState()
        assert highlight_relation(state, "subClassOf") is state

    def test_clear_selection(self) -> None:
        state = SelectionState(
            selected_node_id="n1",
            available_relations=("a",),
            highlighted_relation="a",
        )
        cleared = clear_selection(state)
        assert cleared == SelectionState()
        assert cleared.phase == SelectionPhase.IDLE

    def test_clear_idle_is_noop(self) -> None:
        state = SelectionState()
        assert clear_selection(state) is state


class TestHighlightedEdges:
    """Tests for highlighted edge lookup."""

    def test_edges_of_type_touching_selected_node(self) -> None:
        path = GraphPath(
            nodes=(GraphNode("n1", "A"), GraphNode("n2", "B"), GraphNode("n3", "C")),
            edges=(
                GraphEdge("n1", "n2", "partOf"),
                GraphEdge("n3", "n1", "partOf"),
                GraphEdge("n2", "n3", "partOf"),
                GraphEdge("n1", "n3", "subClassOf"),
            ),
        )
        selection = SelectionState(selected_node_id="n1", highlighted_relation="partOf")

        keys = [e.key for e in highlighted_edges(path, selection)]

        assert keys == [("n1", "n2", "partOf"), ("n3", "n1", "partOf")]

    def test_nothing_highlighted(self) -> None:
        path = GraphPath(nodes=(GraphNode("n1", "A"),))
        assert highlighted_edges(path, SelectionState(selected_node_id="n1")) == ()
        assert highlighted_edges(None, SelectionState()) == ()
