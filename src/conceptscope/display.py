"""Plain-text rendering of session state for terminal front ends."""

from typing import Any
from urllib.parse import urlparse

from conceptscope.exploration.selection import highlighted_edges
from conceptscope.models import (
    ELLIPSIS,
    ConceptMatch,
    GraphPath,
    NodeDetails,
    SearchState,
    SelectionState,
)


def is_valid_url(value: Any) -> bool:
    """True for absolute URLs (scheme and host)."""
    if not isinstance(value, str):
        return False
    parsed = urlparse(value.strip())
    return bool(parsed.scheme and parsed.netloc)


def similarity_badge(match: ConceptMatch) -> str:
    if match.is_exact:
        return "Exact Match"
    return f"Similarity: {match.similarity:.2f}%"


def format_match(match: ConceptMatch, index: int | None = None) -> str:
    prefix = f"{index:>3}. " if index is not None else "     "
    line = f"{prefix}{match.label} [{similarity_badge(match)}]"
    if match.definition:
        line += f"\n       {match.definition}"
    return line


def format_page_markers(search: SearchState) -> str:
    """Pagination bar, current page in brackets."""
    pagination = search.pagination
    if pagination.total_pages <= 1:
        return ""
    parts = []
    for marker in pagination.window:
        if marker == ELLIPSIS:
            parts.append(ELLIPSIS)
        elif marker == pagination.current_page:
            parts.append(f"[{marker}]")
        else:
            parts.append(str(marker))
    return "Pages: " + " ".join(parts)


def format_search(search: SearchState) -> str:
    """Render search results the way the results list shows them."""
    if not search.term:
        return "Enter a keyword to start searching"
    if search.loading:
        return f"Searching for {search.term!r}..."
    if search.error:
        return f"Error: {search.error}"
    if search.results.is_empty:
        return f"No results found for {search.term!r}"

    lines = []
    if search.exact_match:
        lines.append("Exact Match")
        lines.append(format_match(search.exact_match))

    if search.similar_matches:
        header = "Similar Results"
        if search.exact_match:
            header += f" ({len(search.similar_matches)})"
        lines.append(header)
        start = search.pagination.start_index
        for offset, match in enumerate(search.visible_matches, start=1):
            lines.append(format_match(match, start + offset))
        markers = format_page_markers(search)
        if markers:
            lines.append(markers)

    return "\n".join(lines)


def format_metadata_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(format_metadata_value(v) for v in value)
    if is_valid_url(value):
        return f"<{value}>"
    return str(value)


def format_metadata(details: NodeDetails) -> str:
    lines = [f"{key}: {format_metadata_value(value)}" for key, value in details.metadata.items()]
    if details.external_reference:
        lines.append(f"View on Wikipedia: {details.external_reference}")
    return "\n".join(lines) if lines else "(no metadata)"


def format_graph(path: GraphPath | None, selection: SelectionState | None = None) -> str:
    """Node list and edges; the selected node and highlighted edges are starred."""
    if path is None or path.is_empty:
        return "(no graph)"

    selection = selection or SelectionState()
    labels = {node.id: node.label for node in path.nodes}
    highlighted = {edge.key for edge in highlighted_edges(path, selection)}

    lines = [path.summary]
    for node in path.nodes:
        marker = "*" if node.id == selection.selected_node_id else " "
        lines.append(f" {marker} {node.id}  {node.label}")

    for edge in path.edges:
        marker = "*" if edge.key in highlighted else " "
        source = labels.get(edge.source, edge.source)
        target = labels.get(edge.target, edge.target)
        lines.append(f" {marker} {source} --[{edge.type}]--> {target}")

    return "\n".join(lines)
