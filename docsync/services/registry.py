"""Document registry: the persisted mapping between local files and remote documents."""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from docsync.exceptions import RegistryError
from docsync.filesystem.scanner import ScannedFile
from docsync.schemas.document import Document

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from datetime import datetime

    from docsync.schemas.document import RemoteDocument

logger = logging.getLogger(__name__)

_SNAPSHOT_ADAPTER = TypeAdapter(list[Document])
_DEFAULT_SNAPSHOT_MODE = 0o644


def _snapshot_mode(path: Path) -> int:
    """Permissions for a rewritten snapshot: the existing file's, or 0644."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return _DEFAULT_SNAPSHOT_MODE


class DocumentRegistry:
    """Ordered Document records indexed by slug and by remote id.

    Slugs are unique within the registry and remote ids are unique once
    assigned. The registry owns its records; callers mutate them only through
    the methods below or through the references it hands out.
    """

    def __init__(self, documents: list[Document] | None = None) -> None:
        self._documents: list[Document] = []
        self._by_slug: dict[str, Document] = {}
        self._by_id: dict[int, Document] = {}
        for document in documents or []:
            self.append(document)

    @classmethod
    def load(cls, path: Path) -> DocumentRegistry:
        """Load a registry snapshot, falling back to an empty registry.

        A missing, unreadable or malformed snapshot never blocks startup.
        Duplicate slugs or remote ids in the snapshot keep the first record.
        """
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return cls()
        except OSError as exc:
            logger.warning("Cannot read registry snapshot %s: %s", path, exc)
            return cls()

        try:
            documents = _SNAPSHOT_ADAPTER.validate_json(raw) if raw.strip() else []
        except ValidationError as exc:
            logger.warning("Ignoring malformed registry snapshot %s: %s", path, exc)
            return cls()

        registry = cls()
        for document in documents:
            if document.slug in registry._by_slug:
                logger.warning("Dropping duplicate snapshot entry for slug %s", document.slug)
                continue
            if document.is_remote and document.remote_id in registry._by_id:
                logger.warning(
                    "Dropping duplicate snapshot entry for remote id %d (%s)",
                    document.remote_id,
                    document.path,
                )
                continue
            registry.append(document)
        return registry

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def slugs(self) -> list[str]:
        return [document.slug for document in self._documents]

    def find_by_slug(self, slug: str) -> tuple[bool, Document | None]:
        document = self._by_slug.get(slug)
        return document is not None, document

    def find_by_id(self, remote_id: int) -> tuple[bool, Document | None]:
        if remote_id == 0:
            return False, None
        document = self._by_id.get(remote_id)
        return document is not None, document

    def append(self, document: Document) -> None:
        """Add a new record.

        The caller checks ``find_by_slug`` first; a duplicate slug or an
        already-owned remote id raises RegistryError.
        """
        if document.slug in self._by_slug:
            raise RegistryError(f"Duplicate slug in registry: {document.slug}")
        if document.is_remote and document.remote_id in self._by_id:
            raise RegistryError(f"Remote id {document.remote_id} already tracked")
        self._documents.append(document)
        self._by_slug[document.slug] = document
        if document.is_remote:
            self._by_id[document.remote_id] = document

    def record_remote_save(
        self,
        document: Document,
        remote: RemoteDocument,
        content_hash: str,
        now: datetime,
    ) -> None:
        """Copy a successful create/update result into an owned record."""
        owner = self._by_id.get(remote.id)
        if owner is not None and owner is not document:
            raise RegistryError(
                f"Remote id {remote.id} returned for {document.path} "
                f"is already tracked by {owner.path}"
            )
        if document.is_remote and document.remote_id != remote.id:
            self._by_id.pop(document.remote_id, None)
        document.remote_id = remote.id
        document.remote_snapshot = remote.model_dump(mode="json", exclude_unset=True)
        document.content_hash = content_hash
        document.updated_at = now
        self._by_id[remote.id] = document

    def reconcile_live(
        self, exists: Callable[[Document], bool]
    ) -> list[tuple[ScannedFile, Document]]:
        """Drop records whose backing file is gone and return the live ones.

        After this call the registry retains exactly the records for which
        ``exists`` returned True, in their original order.
        """
        live: list[tuple[ScannedFile, Document]] = []
        for document in self._documents:
            if not exists(document):
                logger.info("Dropping %s from registry: file no longer exists", document.path)
                continue
            scanned = ScannedFile(
                name=document.name, directory=document.directory, path=document.path
            )
            live.append((scanned, document))

        self._documents = [document for _, document in live]
        self._by_slug = {document.slug: document for document in self._documents}
        self._by_id = {
            document.remote_id: document for document in self._documents if document.is_remote
        }
        return live

    def to_snapshot(self) -> list[dict[str, Any]]:
        return [document.model_dump(mode="json", by_alias=True) for document in self._documents]

    def save(self, path: Path) -> None:
        """Atomically write the registry snapshot to ``path``.

        Serialization and I/O errors propagate; a failed write leaves the
        previous snapshot and no temp file behind.
        """
        try:
            data = json.dumps(self.to_snapshot(), indent=2, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as exc:
            raise RegistryError(f"Cannot serialize registry: {exc}") from exc

        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                os.chmod(f.fileno(), _snapshot_mode(path))
                f.write(data)
            tmp_path.replace(path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Saved %d registry entries to %s", len(self._documents), path)
