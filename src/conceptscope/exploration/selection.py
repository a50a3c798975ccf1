"""Selection / highlight reducers.

Phases: IDLE -> SELECTED (node tapped) -> HIGHLIGHTED (relation chosen).
Deselection or a new anchor concept returns to IDLE, clearing the selected
node, its relations and the highlight together.
"""

from dataclasses import replace

from conceptscope.models import GraphEdge, GraphPath, SelectionState


def select_node(state: SelectionState, node_id: str) -> SelectionState:
    """Select ``node_id``; its relation list starts loading."""
    if state.selected_node_id == node_id:
        return state
    return SelectionState(selected_node_id=node_id, loading_relations=True)


def relations_loaded(
    state: SelectionState,
    node_id: str,
    relations: tuple[str, ...],
) -> SelectionState:
    """Attach relations, unless another node has been selected meanwhile."""
    if state.selected_node_id != node_id:
        return state
    if state.available_relations == relations and not state.loading_relations:
        return state
    return replace(state, available_relations=relations, loading_relations=False)


def highlight_relation(state: SelectionState, relation: str) -> SelectionState:
    """Highlight ``relation`` on the selected node; ignored while IDLE."""
    if state.selected_node_id is None or state.highlighted_relation == relation:
        return state
    return replace(state, highlighted_relation=relation)


def clear_selection(state: SelectionState) -> SelectionState:
    """Back to IDLE."""
    if state == SelectionState():
        return state
    return SelectionState()


def highlighted_edges(path: GraphPath | None, state: SelectionState) -> tuple[GraphEdge, ...]:
    """Edges of the highlighted type that touch the selected node."""
    if path is None or state.selected_node_id is None or state.highlighted_relation is None:
        return ()
    return tuple(
        edge
        for edge in path.edges
        if edge.type == state.highlighted_relation and edge.touches(state.selected_node_id)
    )
