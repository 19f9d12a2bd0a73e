"""Documents stored in a remote object-storage bucket.

Talks to the storage REST API exposed by Supabase: objects are listed with
``POST /storage/v1/object/list/{bucket}`` and downloaded with
``GET /storage/v1/object/{bucket}/{path}``. Listing is flat; sub-folders of
the prefix are not descended into.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import requests

from docmatch.config import StorageConfig
from docmatch.errors import EnumerationError
from docmatch.ingestion.pdf_loader import extract_text_from_bytes
from docmatch.models import Document
from docmatch.sources.base import DocumentSource
from docmatch.utils.files import DEFAULT_EXTENSIONS, has_extension

LOGGER = logging.getLogger(__name__)

PAGE_SIZE = 1000


def _object_path(prefix: str, name: str) -> str:
    prefix = prefix.strip("/")
    return f"{prefix}/{name}" if prefix else name


class StorageSource(DocumentSource):
    """Lists documents found directly under ``prefix`` in a storage bucket."""

    def __init__(
        self,
        config: StorageConfig,
        prefix: str,
        *,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.prefix = prefix
        self.extensions = tuple(extensions)
        self._owns_session = session is None
        self.session = session or requests.Session()

    @property
    def location(self) -> str:
        return f"{self.config.bucket}/{self.prefix}"

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.key}",
            "apikey": self.config.key,
        }

    def _list_page(self, offset: int) -> List[Dict[str, Any]]:
        url = f"{self.config.url}/storage/v1/object/list/{self.config.bucket}"
        payload = {
            "prefix": self.prefix,
            "limit": PAGE_SIZE,
            "offset": offset,
            "sortBy": {"column": "name", "order": "asc"},
        }
        try:
            response = self.session.post(
                url, json=payload, headers=self._headers(), timeout=self.config.timeout
            )
            response.raise_for_status()
            entries = response.json()
        except (requests.RequestException, ValueError) as exc:
            LOGGER.error("Error listing %s: %s", self.location, exc)
            raise EnumerationError(self.location, str(exc)) from exc
        if not isinstance(entries, list):
            raise EnumerationError(self.location, "unexpected listing response")
        return entries

    def list_documents(self) -> List[Document]:
        documents: List[Document] = []
        offset = 0
        while True:
            entries = self._list_page(offset)
            for entry in entries:
                name = entry.get("name") or ""
                if not has_extension(name, self.extensions):
                    continue
                metadata = entry.get("metadata") or {}
                documents.append(
                    Document(
                        path=_object_path(self.prefix, name),
                        name=name,
                        size=int(metadata.get("size") or 0),
                    )
                )
            if len(entries) < PAGE_SIZE:
                break
            offset += PAGE_SIZE
        LOGGER.info("Found %d documents in %s", len(documents), self.location)
        return documents

    def read_content(self, document: Document, max_chars: Optional[int] = None) -> str:
        url = f"{self.config.url}/storage/v1/object/{self.config.bucket}/{quote(document.path)}"
        try:
            response = self.session.get(url, headers=self._headers(), timeout=self.config.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            LOGGER.warning("Failed to download %s: %s", document.path, exc)
            return ""
        return extract_text_from_bytes(response.content, max_chars, label=document.path)
