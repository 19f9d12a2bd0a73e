"""Text helpers."""

from __future__ import annotations

from typing import Iterable, Optional


def normalize_whitespace(lines: Iterable[str]) -> str:
    """Strip lines, drop blank ones and join the rest."""
    return "\n".join(line.strip() for line in lines if line.strip())


def truncate(text: str, max_chars: Optional[int]) -> str:
    if max_chars is None:
        return text
    return text[:max_chars]
