"""Common interface for document collections."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import List, Optional, Type

from docmatch.models import Document


class DocumentSource(ABC):
    """Lists the documents of one collection and reads their text.

    ``list_documents`` raises :class:`docmatch.errors.EnumerationError` when
    the collection cannot be listed. ``read_content`` never raises and returns
    an empty string when the text is unavailable.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human readable location of the collection."""

    @abstractmethod
    def list_documents(self) -> List[Document]:
        ...

    @abstractmethod
    def read_content(self, document: Document, max_chars: Optional[int] = None) -> str:
        ...

    def close(self) -> None:
        """Release resources held by the source."""

    def __enter__(self) -> "DocumentSource":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()
