"""Tests for path-derived document identities."""

from __future__ import annotations

import hashlib
import string

from hypothesis import given
from hypothesis import strategies as st

from docsync.services.slug_service import SLUG_LENGTH, document_slug, normalize_document_path

_SEGMENT = st.text(alphabet=string.ascii_letters + string.digits + "-_ ", min_size=1, max_size=10)
_PATH = st.lists(_SEGMENT, min_size=1, max_size=4).map("/".join)


class TestNormalizeDocumentPath:
    def test_root_file_has_no_dot_prefix(self) -> None:
        assert normalize_document_path(".", "notes.md") == "notes.md"

    def test_nested_directory(self) -> None:
        assert normalize_document_path("guides/setup", "a.md") == "guides/setup/a.md"

    def test_redundant_separators_collapse(self) -> None:
        assert normalize_document_path("./guides//", "a.md") == "guides/a.md"

    def test_backslashes_become_posix(self) -> None:
        assert normalize_document_path("guides\\setup", "a.md") == "guides/setup/a.md"


class TestDocumentSlug:
    def test_is_md5_hex_of_path(self) -> None:
        assert document_slug("notes.md") == hashlib.md5(b"notes.md").hexdigest()

    def test_fixed_width_lowercase_hex(self) -> None:
        slug = document_slug("guides/a.md")
        assert len(slug) == SLUG_LENGTH
        assert set(slug) <= set("0123456789abcdef")

    def test_moved_file_gets_new_identity(self) -> None:
        assert document_slug("a/notes.md") != document_slug("b/notes.md")

    def test_non_ascii_path(self) -> None:
        assert len(document_slug("文档/同步.md")) == SLUG_LENGTH

    @given(_PATH)
    def test_deterministic(self, path: str) -> None:
        assert document_slug(path) == document_slug(path)

    @given(st.sets(_PATH, min_size=2, max_size=30))
    def test_distinct_paths_get_distinct_slugs(self, paths: set[str]) -> None:
        assert len({document_slug(p) for p in paths}) == len(paths)
