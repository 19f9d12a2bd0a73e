"""Core DocMatch data models."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Document:
    """A document of a collection, as produced by a source."""

    path: str
    name: str
    size: int
    content: str = ""

    @property
    def has_content(self) -> bool:
        return bool(self.content)

    def with_content(self, content: str) -> "Document":
        return replace(self, content=content)


@dataclass(frozen=True, slots=True)
class MatchCandidate:
    """Best counterpart found while scanning the target collection."""

    source: Document
    target: Document
    score: float


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Accepted pair whose score cleared the threshold."""

    source: Document
    target: Document
    score: float
