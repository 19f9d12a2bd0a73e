"""Documents stored in a local directory tree."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from docmatch.errors import EnumerationError
from docmatch.ingestion.pdf_loader import extract_text
from docmatch.models import Document
from docmatch.sources.base import DocumentSource
from docmatch.utils.files import DEFAULT_EXTENSIONS, iter_document_paths

LOGGER = logging.getLogger(__name__)


class FilesystemSource(DocumentSource):
    """Recursively lists documents under ``root``, sorted by path."""

    def __init__(self, root: Path, *, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> None:
        self.root = Path(root)
        self.extensions = tuple(extensions)

    @property
    def location(self) -> str:
        return str(self.root)

    def list_documents(self) -> List[Document]:
        if not self.root.exists():
            raise EnumerationError(self.location, "path does not exist")
        if not self.root.is_dir():
            raise EnumerationError(self.location, "not a directory")

        try:
            paths = list(iter_document_paths([self.root], self.extensions))
        except OSError as exc:
            raise EnumerationError(self.location, str(exc)) from exc

        documents: List[Document] = []
        for path in paths:
            try:
                size = path.stat().st_size
            except OSError as exc:
                LOGGER.warning("Skipping %s: %s", path, exc)
                continue
            documents.append(Document(path=str(path), name=path.name, size=size))
        LOGGER.info("Found %d documents in %s", len(documents), self.location)
        return documents

    def read_content(self, document: Document, max_chars: Optional[int] = None) -> str:
        return extract_text(Path(document.path), max_chars)
