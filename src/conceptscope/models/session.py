"""Exploration session state - one immutable value replaced per event."""

import math
from dataclasses import dataclass, field, replace
from enum import Enum

from conceptscope.models.concept import ConceptMatch, SearchResults
from conceptscope.models.graph import NodeDetails

ELLIPSIS = "..."

PageMarker = int | str


def total_pages(total_items: int, page_size: int) -> int:
    """Number of pages needed for ``total_items``."""
    if total_items <= 0 or page_size <= 0:
        return 0
    return math.ceil(total_items / page_size)


def page_window(current_page: int, pages: int, width: int = 5) -> list[PageMarker]:
    """
    Page markers for a pagination bar.

    Up to ``width`` contiguous pages centred on ``current_page``, clamped to
    ``[1, pages]``. Page 1 and the last page are always shown; ``ELLIPSIS``
    marks a gap between them and the window.

    Example: page_window(5, 10) -> [1, "...", 3, 4, 5, 6, 7, "...", 10]
    """
    if pages <= 0:
        return []

    width = max(1, min(width, pages))
    current_page = min(max(current_page, 1), pages)

    start = current_page - width // 2
    end = start + width - 1
    if start < 1:
        start, end = 1, width
    elif end > pages:
        start, end = pages - width + 1, pages

    markers: list[PageMarker] = []
    if start > 1:
        markers.append(1)
        if start > 2:
            markers.append(ELLIPSIS)
    markers.extend(range(start, end + 1))
    if end < pages:
        if end < pages - 1:
            markers.append(ELLIPSIS)
        markers.append(pages)
    return markers


@dataclass(frozen=True)
class Pagination:
    """Fixed-size pages over the similar-match list (1-based)."""

    page_size: int = 9
    current_page: int = 1
    total_items: int = 0
    window_width: int = 5

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_items, self.page_size)

    @property
    def window(self) -> list[PageMarker]:
        return page_window(self.current_page, self.total_pages, self.window_width)

    @property
    def start_index(self) -> int:
        return (self.current_page - 1) * self.page_size

    def page_slice(self, items: tuple) -> tuple:
        """Items visible on the current page."""
        return items[self.start_index:self.start_index + self.page_size]

    def go_to(self, page: int) -> "Pagination":
        """Move to ``page`` clamped to the valid range."""
        page = min(max(page, 1), max(self.total_pages, 1))
        if page == self.current_page:
            return self
        return replace(self, current_page=page)


class SelectionPhase(str, Enum):
    """Node selection / relation highlight phases."""

    IDLE = "idle"
    SELECTED = "selected"
    HIGHLIGHTED = "highlighted"


@dataclass(frozen=True)
class SelectionState:
    """Selected graph node, its expandable relations and the highlighted one."""

    selected_node_id: str | None = None
    available_relations: tuple[str, ...] = ()
    highlighted_relation: str | None = None
    loading_relations: bool = False

    @property
    def phase(self) -> SelectionPhase:
        if self.selected_node_id is None:
            return SelectionPhase.IDLE
        if self.highlighted_relation is None:
            return SelectionPhase.SELECTED
        return SelectionPhase.HIGHLIGHTED


@dataclass(frozen=True)
class SearchState:
    """Last committed search term and its results."""

    term: str = ""
    results: SearchResults = field(default_factory=SearchResults)
    error: str | None = None
    loading: bool = False
    pagination: Pagination = field(default_factory=Pagination)

    @property
    def exact_match(self) -> ConceptMatch | None:
        return self.results.exact_match

    @property
    def similar_matches(self) -> tuple[ConceptMatch, ...]:
        return self.results.similar_matches

    @property
    def visible_matches(self) -> tuple[ConceptMatch, ...]:
        return self.pagination.page_slice(self.results.similar_matches)


@dataclass(frozen=True)
class DetailState:
    """Node detail view; ``anchor`` is the load generation owning it (0 = none)."""

    anchor: int = 0
    clicked_label: str = ""
    searched_label: str = ""
    node_details: NodeDetails | None = None
    error: str | None = None
    loading: bool = False
    expansion_error: str | None = None
    pending_expansions: tuple[tuple[str, str], ...] = ()  # one entry per in-flight request

    @property
    def is_open(self) -> bool:
        return self.node_details is not None


@dataclass(frozen=True)
class SessionState:
    """Everything an exploration UI renders."""

    search: SearchState = field(default_factory=SearchState)
    suggestions: tuple[str, ...] = ()
    details: DetailState = field(default_factory=DetailState)
    selection: SelectionState = field(default_factory=SelectionState)
