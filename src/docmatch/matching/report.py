"""Plain-text rendering of match results."""

from __future__ import annotations

from typing import Iterable, List

from docmatch.models import MatchResult

SEPARATOR = "-" * 16


def format_report(results: Iterable[MatchResult]) -> str:
    """Render each match as source path, target path and a separator line.

    Blocks are joined with newlines; there is no header or trailing newline.
    An empty result set yields an empty string.
    """
    lines: List[str] = []
    for result in results:
        lines.append(result.source.path)
        lines.append(result.target.path)
        lines.append(SEPARATOR)
    return "\n".join(lines)
