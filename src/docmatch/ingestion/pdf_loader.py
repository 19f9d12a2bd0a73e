"""PDF text extraction.

Uses PyMuPDF (fitz) for fast PDF text extraction. Extraction never raises:
unreadable or malformed documents yield an empty string, which the scorer
treats as "no content".
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional

import fitz  # PyMuPDF

from docmatch.utils.text import normalize_whitespace, truncate

LOGGER = logging.getLogger(__name__)


def _iter_pages(doc: "fitz.Document", label: str) -> Iterator[str]:
    try:
        for index in range(len(doc)):
            try:
                page = doc[index]
                text = page.get_text() or ""
                normalized = normalize_whitespace(text.splitlines())
                if normalized:
                    yield normalized + "\n"
            except Exception as exc:
                LOGGER.warning("Failed to read page %s in %s: %s", index, label, exc)
    finally:
        doc.close()


def iter_text_parts(path: Path) -> Iterator[str]:
    """Yield text content from a PDF file page by page."""
    try:
        doc = fitz.open(path)
    except Exception as exc:
        LOGGER.error("Failed to open PDF %s: %s", path, exc)
        return
    yield from _iter_pages(doc, str(path))


def iter_text_parts_from_bytes(data: bytes, label: str = "<memory>") -> Iterator[str]:
    """Yield text content page by page from an in-memory PDF."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as exc:
        LOGGER.error("Failed to open PDF %s: %s", label, exc)
        return
    yield from _iter_pages(doc, label)


def collect_text(parts: Iterable[str], max_chars: Optional[int] = None) -> str:
    """Join text parts, stopping once ``max_chars`` characters are available."""
    buffer = ""
    stream = iter(parts)
    try:
        for part in stream:
            buffer += part
            if max_chars is not None and len(buffer) >= max_chars:
                break
    finally:
        # Release the underlying document when stopping early.
        close = getattr(stream, "close", None)
        if close is not None:
            close()
    return truncate(buffer.rstrip("\n"), max_chars)


def extract_text(path: Path, max_chars: Optional[int] = None) -> str:
    """Extract text from a PDF on disk, or ``""`` on any failure."""
    return collect_text(iter_text_parts(path), max_chars)


def extract_text_from_bytes(
    data: bytes, max_chars: Optional[int] = None, label: str = "<memory>"
) -> str:
    """Extract text from PDF bytes, or ``""`` on any failure."""
    if not data:
        return ""
    return collect_text(iter_text_parts_from_bytes(data, label), max_chars)
