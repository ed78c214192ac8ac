"""Shared test fixtures for docsync."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from docsync.config import Settings
from docsync.exceptions import RemoteStoreError
from docsync.schemas.document import DocumentPayload, RemoteDocument

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Empty directory used as the mirrored tree."""
    root = tmp_path / "docs"
    root.mkdir()
    return root


@pytest.fixture
def test_settings(docs_dir: Path) -> Settings:
    """Settings pointing at the temporary docs tree, isolated from env files."""
    return Settings(
        _env_file=None,
        base_dir=docs_dir,
        base_api_url="https://docs.example.com/api/v2",
        base_namespace="team/handbook",
        token="test-token",
    )


class FakeDocumentStore:
    """In-memory remote store that records calls and can fail selected slugs."""

    def __init__(self, fail_slugs: set[str] | None = None, start_id: int = 100) -> None:
        self.calls: list[tuple[str, int | None, DocumentPayload]] = []
        self.fail_slugs = fail_slugs or set()
        self._next_id = start_id

    def create(self, namespace: str, payload: DocumentPayload) -> RemoteDocument:
        self.calls.append(("create", None, payload))
        self._maybe_fail(payload)
        self._next_id += 1
        return self._document(self._next_id, payload)

    def update(self, namespace: str, doc_id: int, payload: DocumentPayload) -> RemoteDocument:
        self.calls.append(("update", doc_id, payload))
        self._maybe_fail(payload)
        return self._document(doc_id, payload)

    def _maybe_fail(self, payload: DocumentPayload) -> None:
        if payload.slug in self.fail_slugs:
            raise RemoteStoreError("simulated transport error")

    @staticmethod
    def _document(doc_id: int, payload: DocumentPayload) -> RemoteDocument:
        return RemoteDocument.model_validate(
            {
                "id": doc_id,
                "slug": payload.slug,
                "title": payload.title,
                "body": payload.body,
                "format": payload.format,
            }
        )


@pytest.fixture
def fake_store() -> FakeDocumentStore:
    return FakeDocumentStore()
