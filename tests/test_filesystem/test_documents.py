"""Tests for document title and body derivation."""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

import pytest

from docsync.filesystem.documents import derive_title, hash_content, read_document

if TYPE_CHECKING:
    from pathlib import Path


class TestDeriveTitle:
    def test_heading_markers_and_spaces_removed(self) -> None:
        assert derive_title("# Hello World") == "HelloWorld"

    def test_deeper_heading(self) -> None:
        assert derive_title("### Deep  Title\t") == "DeepTitle"

    def test_plain_first_line(self) -> None:
        assert derive_title("Just text") == "Justtext"

    def test_empty_line(self) -> None:
        assert derive_title("") == ""


class TestReadDocument:
    def test_title_and_body(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.md"
        path.write_text("# Hello World\n\nBody text.\n", encoding="utf-8")
        doc = read_document(path)
        assert doc.title == "HelloWorld"
        assert doc.body == "# Hello World\n\nBody text.\n"

    def test_missing_trailing_newline_is_added(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.md"
        path.write_text("# T\nlast line", encoding="utf-8")
        assert read_document(path).body == "# T\nlast line\n"

    def test_crlf_normalized(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.md"
        path.write_bytes(b"# T\r\nline\r\n")
        assert read_document(path).body == "# T\nline\n"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.md"
        path.write_text("", encoding="utf-8")
        doc = read_document(path)
        assert doc.title == ""
        assert doc.body == ""

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            read_document(tmp_path / "missing.md")


class TestHashContent:
    def test_sha256_of_utf8(self) -> None:
        assert hash_content("abc") == hashlib.sha256(b"abc").hexdigest()
