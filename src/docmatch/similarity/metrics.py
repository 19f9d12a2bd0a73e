"""Similarity metrics over names, sizes and extracted text.

All functions return a value in ``[0, 1]`` where ``1`` means identical.
"""

from __future__ import annotations

DEFAULT_MAX_TEXT_CHARS = 5000


def levenshtein_distance(a: str, b: str) -> int:
    """Return the number of single-character edits turning ``a`` into ``b``."""
    rows, cols = len(a) + 1, len(b) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,
                table[i][j - 1] + 1,
                table[i - 1][j - 1] + cost,
            )
    return table[-1][-1]


def string_similarity(a: str, b: str) -> float:
    """Normalized edit similarity, ``1 - distance / max(len(a), len(b))``.

    Comparison is case-sensitive; lower-case both inputs beforehand for a
    case-insensitive result. Cost is quadratic in the input lengths, so long
    text must be truncated by the caller.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    distance = levenshtein_distance(a, b)
    return 1.0 - distance / max(len(a), len(b))


def size_similarity(size_a: int, size_b: int) -> float:
    """Ratio of the smaller size to the larger one; zero sizes never match."""
    if size_a == 0 or size_b == 0:
        return 0.0
    return min(size_a, size_b) / max(size_a, size_b)


def text_similarity(text_a: str, text_b: str, max_len: int = DEFAULT_MAX_TEXT_CHARS) -> float:
    """Compare the first ``max_len`` characters of two texts."""
    head_a = (text_a or "")[:max_len]
    head_b = (text_b or "")[:max_len]
    if not head_a or not head_b:
        return 0.0
    return string_similarity(head_a, head_b)
