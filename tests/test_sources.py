"""Tests for filesystem and remote storage document sources."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from docmatch.config import StorageConfig
from docmatch.errors import EnumerationError
from docmatch.models import Document
from docmatch.sources.filesystem import FilesystemSource
from docmatch.sources.storage import PAGE_SIZE, StorageSource


class TestFilesystemSource:
    """Test FilesystemSource class."""

    def test_lists_documents_recursively(self, tmp_path: Path) -> None:
        nested = tmp_path / "nested"
        nested.mkdir()
        (tmp_path / "b.pdf").write_bytes(b"12345")
        (nested / "a.PDF").write_bytes(b"123")
        (tmp_path / "notes.txt").write_text("skip")

        documents = FilesystemSource(tmp_path).list_documents()

        assert [(d.name, d.size) for d in documents] == [("b.pdf", 5), ("a.PDF", 3)]
        assert documents[0].path == str(tmp_path / "b.pdf")
        assert all(d.content == "" for d in documents)

    def test_missing_root(self, tmp_path: Path) -> None:
        source = FilesystemSource(tmp_path / "missing")

        with pytest.raises(EnumerationError, match="does not exist"):
            source.list_documents()

    def test_root_is_file(self, tmp_path: Path) -> None:
        pdf = tmp_path / "single.pdf"
        pdf.write_bytes(b"x")

        with pytest.raises(EnumerationError, match="not a directory"):
            FilesystemSource(pdf).list_documents()

    def test_custom_extensions(self, tmp_path: Path) -> None:
        (tmp_path / "a.pdf").write_bytes(b"x")
        (tmp_path / "b.txt").write_bytes(b"x")

        documents = FilesystemSource(tmp_path, extensions=(".txt",)).list_documents()

        assert [d.name for d in documents] == ["b.txt"]

    @patch("docmatch.sources.filesystem.extract_text")
    def test_read_content(self, mock_extract: MagicMock, tmp_path: Path) -> None:
        mock_extract.return_value = "text"
        document = Document(path=str(tmp_path / "a.pdf"), name="a.pdf", size=1)

        assert FilesystemSource(tmp_path).read_content(document, 100) == "text"
        mock_extract.assert_called_once_with(tmp_path / "a.pdf", 100)

    def test_context_manager(self, tmp_path: Path) -> None:
        with FilesystemSource(tmp_path) as source:
            assert source.list_documents() == []


def _response(payload=None, status: int = 200, content: bytes = b"") -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    response.content = content
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return response


@pytest.fixture
def storage_config() -> StorageConfig:
    return StorageConfig(url="https://example.supabase.co", key="secret", bucket="Repository")


class TestStorageSource:
    """Test StorageSource class."""

    def test_lists_pdfs_under_prefix(self, storage_config: StorageConfig) -> None:
        session = MagicMock()
        session.post.return_value = _response(
            [
                {"name": "a.pdf", "metadata": {"size": 120}},
                {"name": "B.PDF", "metadata": {"size": 30}},
                {"name": "readme.txt", "metadata": {"size": 5}},
                {"name": "subfolder", "id": None, "metadata": None},
                {"name": "nosize.pdf", "metadata": None},
            ]
        )
        source = StorageSource(storage_config, "books", session=session)

        documents = source.list_documents()

        assert documents == [
            Document(path="books/a.pdf", name="a.pdf", size=120),
            Document(path="books/B.PDF", name="B.PDF", size=30),
            Document(path="books/nosize.pdf", name="nosize.pdf", size=0),
        ]
        url = session.post.call_args[0][0]
        kwargs = session.post.call_args[1]
        assert url == "https://example.supabase.co/storage/v1/object/list/Repository"
        assert kwargs["json"] == {
            "prefix": "books",
            "limit": PAGE_SIZE,
            "offset": 0,
            "sortBy": {"column": "name", "order": "asc"},
        }
        assert kwargs["headers"]["Authorization"] == "Bearer secret"

    def test_paginates(self, storage_config: StorageConfig) -> None:
        first_page = [{"name": f"doc{i:04d}.pdf", "metadata": {"size": 1}} for i in range(PAGE_SIZE)]
        second_page = [{"name": "last.pdf", "metadata": {"size": 1}}]
        session = MagicMock()
        session.post.side_effect = [_response(first_page), _response(second_page)]

        documents = StorageSource(storage_config, "books", session=session).list_documents()

        assert len(documents) == PAGE_SIZE + 1
        assert session.post.call_args_list[1][1]["json"]["offset"] == PAGE_SIZE

    def test_empty_prefix_paths(self, storage_config: StorageConfig) -> None:
        session = MagicMock()
        session.post.return_value = _response([{"name": "root.pdf", "metadata": {"size": 1}}])

        documents = StorageSource(storage_config, "", session=session).list_documents()

        assert documents[0].path == "root.pdf"

    def test_http_error(self, storage_config: StorageConfig) -> None:
        session = MagicMock()
        session.post.return_value = _response({"error": "denied"}, status=403)

        with pytest.raises(EnumerationError, match="Repository/books"):
            StorageSource(storage_config, "books", session=session).list_documents()

    def test_connection_error(self, storage_config: StorageConfig) -> None:
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("unreachable")

        with pytest.raises(EnumerationError, match="unreachable"):
            StorageSource(storage_config, "books", session=session).list_documents()

    def test_unexpected_payload(self, storage_config: StorageConfig) -> None:
        session = MagicMock()
        session.post.return_value = _response({"message": "not a list"})

        with pytest.raises(EnumerationError):
            StorageSource(storage_config, "books", session=session).list_documents()

    @patch("docmatch.sources.storage.extract_text_from_bytes")
    def test_read_content(self, mock_extract: MagicMock, storage_config: StorageConfig) -> None:
        session = MagicMock()
        session.get.return_value = _response(content=b"%PDF-1.4")
        mock_extract.return_value = "remote text"
        document = Document(path="books/my file.pdf", name="my file.pdf", size=1)

        text = StorageSource(storage_config, "books", session=session).read_content(document, 50)

        assert text == "remote text"
        assert session.get.call_args[0][0] == (
            "https://example.supabase.co/storage/v1/object/Repository/books/my%20file.pdf"
        )
        mock_extract.assert_called_once_with(b"%PDF-1.4", 50, label="books/my file.pdf")

    def test_read_content_failure_is_empty(self, storage_config: StorageConfig) -> None:
        """Download failures degrade to empty text."""
        session = MagicMock()
        session.get.side_effect = requests.Timeout("slow")
        document = Document(path="books/a.pdf", name="a.pdf", size=1)

        assert StorageSource(storage_config, "books", session=session).read_content(document) == ""

    @patch("docmatch.sources.storage.requests.Session")
    def test_owned_session_closed(
        self, mock_session_class: MagicMock, storage_config: StorageConfig
    ) -> None:
        """A session created by the source is closed when the source closes."""
        with StorageSource(storage_config, "books") as source:
            assert source.session is mock_session_class.return_value

        mock_session_class.return_value.close.assert_called_once()

    def test_injected_session_left_open(self, storage_config: StorageConfig) -> None:
        """A caller-provided session stays owned by the caller."""
        session = MagicMock()

        with StorageSource(storage_config, "books", session=session):
            pass

        session.close.assert_not_called()
