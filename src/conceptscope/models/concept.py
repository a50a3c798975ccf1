"""Concept search results - exact and similar matches for a search term."""

from dataclasses import dataclass
from typing import Any

EXACT_MATCH_ID = "exact-match"


def first_value(value: Any) -> str:
    """Collapse a string-or-list payload value into a single string.

    The backend sometimes wraps labels and definitions in single-element
    lists; the first element wins.
    """
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return ""
    return str(value)


def _similarity(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True)
class ConceptMatch:
    """
    A concept returned by a search.

    Example: "Neural network" with similarity 87.5 (percent)
    """

    id: str
    label: str
    definition: str
    similarity: float = 0.0  # 0-100, server-defined

    @property
    def is_exact(self) -> bool:
        return self.id == EXACT_MATCH_ID

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "label": self.label,
            "definition": self.definition,
            "similarity": self.similarity,
        }

    @classmethod
    def from_dict(cls, data: dict, match_id: str) -> "ConceptMatch":
        """Create from an API payload item, normalising label and definition."""
        return cls(
            id=match_id,
            label=first_value(data.get("label")),
            definition=first_value(data.get("definition")),
            similarity=_similarity(data.get("similarity", 0)),
        )


@dataclass(frozen=True)
class SearchResults:
    """Exact match (optional) plus similar matches in server relevance order."""

    exact_match: ConceptMatch | None = None
    similar_matches: tuple[ConceptMatch, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.exact_match is None and not self.similar_matches

    @classmethod
    def from_dict(cls, data: dict) -> "SearchResults":
        """Create from the search endpoint payload."""
        exact = data.get("exact_match")
        similar = data.get("similar_nodes") or []
        return cls(
            exact_match=ConceptMatch.from_dict(exact, EXACT_MATCH_ID) if exact else None,
            similar_matches=tuple(
                ConceptMatch.from_dict(item, f"similar-{index}")
                for index, item in enumerate(similar)
            ),
        )
