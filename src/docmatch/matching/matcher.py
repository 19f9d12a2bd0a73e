"""Greedy best-match pairing between two document collections."""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import List, Optional, Sequence

from docmatch.models import Document, MatchCandidate, MatchResult
from docmatch.similarity.metrics import DEFAULT_MAX_TEXT_CHARS
from docmatch.similarity.scorer import DEFAULT_WEIGHTS, ScoringWeights, document_similarity

LOGGER = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.7


def best_match(
    document: Document,
    targets: Sequence[Document],
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    *,
    max_text_chars: int = DEFAULT_MAX_TEXT_CHARS,
) -> Optional[MatchCandidate]:
    """Return the highest-scoring target for ``document``.

    Ties keep the first target in iteration order. Targets scoring zero are
    never selected.
    """
    best_score = 0.0
    best_target: Optional[Document] = None
    for target in targets:
        score = document_similarity(document, target, weights, max_text_chars=max_text_chars)
        if score > best_score:
            best_score = score
            best_target = target
    if best_target is None:
        return None
    return MatchCandidate(source=document, target=best_target, score=best_score)


class Matcher:
    """Pairs each source document with its best target above a threshold.

    A target may be the best match of several source documents; nothing is
    removed from the target collection once matched.
    """

    def __init__(
        self,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        *,
        threshold: float = DEFAULT_THRESHOLD,
        max_text_chars: int = DEFAULT_MAX_TEXT_CHARS,
        workers: int = 1,
    ) -> None:
        self.weights = weights
        self.threshold = threshold
        self.max_text_chars = max_text_chars
        self.workers = max(1, workers)

    def candidates(
        self, source: Sequence[Document], target: Sequence[Document]
    ) -> List[Optional[MatchCandidate]]:
        """Best candidate per source document, in source order."""
        scan = partial(
            best_match,
            targets=target,
            weights=self.weights,
            max_text_chars=self.max_text_chars,
        )
        if self.workers == 1 or len(source) < 2:
            return [scan(document) for document in source]

        chunksize = max(1, len(source) // (self.workers * 4))
        with ProcessPoolExecutor(max_workers=self.workers) as executor:
            # map() yields in submission order, which is source order.
            return list(executor.map(scan, source, chunksize=chunksize))

    def match(self, source: Sequence[Document], target: Sequence[Document]) -> List[MatchResult]:
        results: List[MatchResult] = []
        for candidate in self.candidates(source, target):
            if candidate is None:
                continue
            if candidate.score >= self.threshold:
                LOGGER.debug(
                    "Matched %s -> %s (%.4f)",
                    candidate.source.path,
                    candidate.target.path,
                    candidate.score,
                )
                results.append(
                    MatchResult(source=candidate.source, target=candidate.target, score=candidate.score)
                )
            else:
                LOGGER.debug(
                    "Best candidate for %s below threshold (%.4f < %.2f)",
                    candidate.source.path,
                    candidate.score,
                    self.threshold,
                )
        return results
