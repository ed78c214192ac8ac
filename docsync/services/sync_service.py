"""Sync service: registry build phase and per-document upload to the remote store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from docsync.exceptions import RegistryError, RemoteStoreError
from docsync.filesystem.documents import hash_content, read_document
from docsync.filesystem.scanner import load_ignore_rules, scan_files
from docsync.schemas.document import Document, DocumentPayload
from docsync.services.datetime_service import now_utc
from docsync.services.registry import DocumentRegistry
from docsync.services.slug_service import document_slug

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from datetime import datetime
    from pathlib import Path

    from docsync.config import Settings
    from docsync.filesystem.scanner import ScannedFile
    from docsync.schemas.document import RemoteDocument

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """The create/update surface of the remote document store."""

    def create(self, namespace: str, payload: DocumentPayload) -> RemoteDocument: ...

    def update(self, namespace: str, doc_id: int, payload: DocumentPayload) -> RemoteDocument: ...


@dataclass
class SyncReport:
    """Outcome of one build-and-sync pass."""

    new: int = 0
    created: int = 0
    updated: int = 0
    removed: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


def build_registry(
    registry: DocumentRegistry, files: Iterable[ScannedFile], now: datetime
) -> int:
    """Ensure every scanned file has exactly one registry record.

    Existing records get their location metadata and timestamp refreshed.
    Returns the number of records added.
    """
    added = 0
    for scanned in files:
        slug = document_slug(scanned.path)
        found, document = registry.find_by_slug(slug)
        if not found or document is None:
            document = Document(slug=slug)
            registry.append(document)
            added += 1
        document.name = scanned.name
        document.directory = scanned.directory
        document.path = scanned.path
        document.updated_at = now
    return added


def _live_predicate(base_dir: Path) -> Callable[[Document], bool]:
    def exists(document: Document) -> bool:
        if not document.path:
            return False
        try:
            return (base_dir / document.path).is_file()
        except OSError as exc:
            # Kept live; the read in the sync loop reports the failure.
            logger.warning("Cannot stat %s: %s", document.path, exc)
            return True

    return exists


def _sync_document(
    registry: DocumentRegistry,
    store: DocumentStore,
    namespace: str,
    base_dir: Path,
    scanned: ScannedFile,
    document: Document,
    now_fn: Callable[[], datetime],
) -> bool:
    """Upload one document. Returns True when it was created, False when updated."""
    content = read_document(base_dir / scanned.path)
    payload = DocumentPayload(title=content.title, slug=document.slug, body=content.body)

    created = not document.is_remote
    if created:
        remote = store.create(namespace, payload)
    else:
        remote = store.update(namespace, document.remote_id, payload)

    registry.record_remote_save(document, remote, hash_content(content.body), now_fn())
    document.title = content.title
    return created


def sync_documents(
    registry: DocumentRegistry,
    store: DocumentStore,
    settings: Settings,
    now_fn: Callable[[], datetime] = now_utc,
) -> SyncReport:
    """Drop records for deleted files and upload every remaining document.

    A failing document is logged and left unchanged; it never stops the pass.
    """
    report = SyncReport()
    before = len(registry)
    live = registry.reconcile_live(_live_predicate(settings.base_dir))
    report.removed = before - len(live)

    for scanned, document in live:
        try:
            created = _sync_document(
                registry,
                store,
                settings.base_namespace,
                settings.base_dir,
                scanned,
                document,
                now_fn,
            )
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Cannot read %s: %s", scanned.path, exc)
            report.failures.append(scanned.path)
            continue
        except (RemoteStoreError, RegistryError) as exc:
            logger.error("Failed to sync %s: %s", scanned.path, exc)
            report.failures.append(scanned.path)
            continue

        if created:
            report.created += 1
            logger.info("Created %s (id=%d)", scanned.path, document.remote_id)
        else:
            report.updated += 1
            logger.info("Updated %s (id=%d)", scanned.path, document.remote_id)

    logger.info(
        "Sync pass done: %d created, %d updated, %d failed, %d removed",
        report.created,
        report.updated,
        report.failed,
        report.removed,
    )
    return report


def _load_and_build(settings: Settings) -> tuple[DocumentRegistry, int]:
    registry = DocumentRegistry.load(settings.state_file_path)
    rules = load_ignore_rules(settings)
    files = scan_files(settings.base_dir, rules, settings.allowed_suffixes)
    added = build_registry(registry, files, now_utc())
    logger.info("Registry built: %d document(s), %d new", len(registry), added)
    return registry, added


def run_sync(settings: Settings, store: DocumentStore) -> SyncReport:
    """Full pass: load, scan, build, upload, then save the snapshot once.

    Snapshot write errors propagate to the caller after all uploads are done.
    """
    registry, added = _load_and_build(settings)
    report = sync_documents(registry, store, settings)
    report.new = added
    registry.save(settings.state_file_path)
    return report


def run_rebuild(settings: Settings) -> SyncReport:
    """Rebuild and save the registry for the files on disk without remote calls."""
    registry, added = _load_and_build(settings)
    before = len(registry)
    registry.reconcile_live(_live_predicate(settings.base_dir))
    report = SyncReport(new=added, removed=before - len(registry))
    registry.save(settings.state_file_path)
    return report
