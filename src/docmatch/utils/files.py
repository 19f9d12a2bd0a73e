"""Utility helpers for working with files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Sequence

DEFAULT_EXTENSIONS = (".pdf",)


def has_extension(name: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> bool:
    """Case-insensitive check of a file name against recognized extensions."""
    lowered = name.lower()
    return any(lowered.endswith(ext.lower()) for ext in extensions)


def iter_document_paths(
    inputs: Iterable[Path], extensions: Sequence[str] = DEFAULT_EXTENSIONS
) -> Iterator[Path]:
    """Yield document paths from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_document_paths(
                sorted(child for child in item.rglob("*") if child.is_file()), extensions
            )
        elif item.is_file() and has_extension(item.name, extensions):
            yield item
