"""Weighted composite score between two documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from docmatch.models import Document
from docmatch.similarity.metrics import (
    DEFAULT_MAX_TEXT_CHARS,
    size_similarity,
    string_similarity,
    text_similarity,
)


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    """Multipliers applied to the name, size and text similarities.

    Weights summing to 1 keep the composite score within ``[0, 1]``.
    """

    name: float = 0.3
    size: float = 0.2
    text: float = 0.5

    def __post_init__(self) -> None:
        for label, value in (("name", self.name), ("size", self.size), ("text", self.text)):
            if value < 0:
                raise ValueError(f"Weight '{label}' must be non-negative, got {value}")

    @property
    def uses_text(self) -> bool:
        return self.text > 0

    def as_dict(self) -> dict[str, float]:
        return {"name": self.name, "size": self.size, "text": self.text}


DEFAULT_WEIGHTS = ScoringWeights(name=0.3, size=0.2, text=0.5)
# Used when no content is available, so missing text does not cap every score.
METADATA_WEIGHTS = ScoringWeights(name=0.5, size=0.5, text=0.0)


def name_similarity(a: Document, b: Document) -> float:
    return string_similarity(a.name.lower(), b.name.lower())


def document_similarity(
    a: Document,
    b: Document,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    *,
    max_text_chars: int = DEFAULT_MAX_TEXT_CHARS,
) -> float:
    """Combine name, size and content similarity into a single score."""
    score = weights.name * name_similarity(a, b)
    score += weights.size * size_similarity(a.size, b.size)
    if weights.uses_text:
        score += weights.text * text_similarity(a.content, b.content, max_text_chars)
    return score


def select_weights(
    source: Sequence[Document],
    target: Sequence[Document],
    preferred: ScoringWeights = DEFAULT_WEIGHTS,
) -> ScoringWeights:
    """Pick ``preferred`` unless one collection carries no content at all.

    Without content the default weights fall back to ``METADATA_WEIGHTS``.
    Custom weights keep their name/size ratio, rescaled to the same total.
    """
    if not preferred.uses_text:
        return preferred
    source_has_text = any(doc.has_content for doc in source)
    target_has_text = any(doc.has_content for doc in target)
    if source_has_text and target_has_text:
        return preferred
    return metadata_weights(preferred)


def metadata_weights(preferred: ScoringWeights) -> ScoringWeights:
    """Drop the text weight from ``preferred``, spreading it over name and size."""
    if preferred == DEFAULT_WEIGHTS:
        return METADATA_WEIGHTS
    remaining = preferred.name + preferred.size
    if remaining <= 0:
        return METADATA_WEIGHTS
    scale = (remaining + preferred.text) / remaining
    return ScoringWeights(name=preferred.name * scale, size=preferred.size * scale, text=0.0)
