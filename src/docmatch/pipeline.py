"""Duplicate detection pipeline: enumerate, extract, match."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

from docmatch.config import AppConfig
from docmatch.matching.matcher import Matcher
from docmatch.matching.report import format_report
from docmatch.models import Document, MatchResult
from docmatch.similarity.metrics import DEFAULT_MAX_TEXT_CHARS
from docmatch.similarity.scorer import ScoringWeights, select_weights
from docmatch.sources.base import DocumentSource

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class MatchReport:
    weights: ScoringWeights
    source_count: int = 0
    target_count: int = 0
    results: List[MatchResult] = field(default_factory=list)

    @property
    def matched(self) -> int:
        return len(self.results)

    def format(self) -> str:
        return format_report(self.results)


def _read_document(
    source: DocumentSource, document: Document, max_text_chars: int
) -> Document:
    try:
        content = source.read_content(document, max_text_chars)
    except Exception as exc:  # pragma: no cover - sources already absorb failures
        LOGGER.error("Failed to read %s: %s", document.path, exc)
        return document
    if not content:
        LOGGER.debug("No text extracted from %s", document.path)
    return document.with_content(content)


def load_collection(
    source: DocumentSource,
    *,
    with_content: bool = True,
    max_text_chars: int = DEFAULT_MAX_TEXT_CHARS,
    workers: int = 4,
) -> List[Document]:
    """List ``source`` and, optionally, fill in each document's text.

    Extraction runs on a bounded thread pool; the returned list keeps the
    enumeration order.
    """
    documents = source.list_documents()
    if not with_content or not documents:
        return documents

    LOGGER.info("Extracting text from %d documents in %s", len(documents), source.location)
    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        return list(
            executor.map(lambda doc: _read_document(source, doc, max_text_chars), documents)
        )


def find_duplicates(
    first: DocumentSource,
    second: DocumentSource,
    config: Optional[AppConfig] = None,
) -> MatchReport:
    """Match every document of ``first`` with its best counterpart in ``second``."""
    config = config or AppConfig()
    source = load_collection(
        first,
        with_content=config.with_content,
        max_text_chars=config.max_text_chars,
        workers=config.extract_workers,
    )
    target = load_collection(
        second,
        with_content=config.with_content,
        max_text_chars=config.max_text_chars,
        workers=config.extract_workers,
    )

    weights = select_weights(source, target, config.weights)
    if weights != config.weights:
        LOGGER.info(
            "No content available, scoring on name and size only (name=%.3f, size=%.3f)",
            weights.name,
            weights.size,
        )

    matcher = Matcher(
        weights,
        threshold=config.threshold,
        max_text_chars=config.max_text_chars,
        workers=config.match_workers,
    )
    results = matcher.match(source, target)
    LOGGER.info(
        "Matched %d of %d documents against %d candidates",
        len(results),
        len(source),
        len(target),
    )
    return MatchReport(
        weights=weights,
        source_count=len(source),
        target_count=len(target),
        results=results,
    )


def compare(
    first: DocumentSource,
    second: DocumentSource,
    config: Optional[AppConfig] = None,
) -> str:
    """Run :func:`find_duplicates` and render the plain-text report."""
    return find_duplicates(first, second, config).format()
