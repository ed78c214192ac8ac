"""Application-level exception types.

Convention:
- ``RemoteStoreError`` — a single create/update call failed. The sync engine
  logs it and moves on to the next document.
- ``RegistryError`` — the document registry would lose one of its invariants
  (unique slugs, unique remote ids) or cannot serialize its records.
- ``OSError`` from the snapshot write is left as-is and reaches the CLI, which
  maps it to a non-zero exit code.
"""

from __future__ import annotations


class DocsyncError(Exception):
    """Base class for docsync errors."""


class RemoteStoreError(DocsyncError):
    """Raised when the remote document store rejects or fails a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RegistryError(DocsyncError):
    """Raised when a registry operation would break a registry invariant."""
