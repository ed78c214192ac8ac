"""Stable document identities derived from file paths."""

from __future__ import annotations

import hashlib
import posixpath

SLUG_LENGTH = 32


def normalize_document_path(directory: str, name: str) -> str:
    """Join a scan-relative directory and a file name into a normalized POSIX path.

    ``normalize_document_path(".", "notes.md")`` is ``"notes.md"`` and
    ``normalize_document_path("./guides/", "a.md")`` is ``"guides/a.md"``.
    """
    return posixpath.normpath(posixpath.join(directory.replace("\\", "/"), name))


def document_slug(path: str) -> str:
    """Return the identity token for a normalized document path.

    The token is the hex MD5 digest of the path string, not of the file
    content, so edits keep the identity and moves create a new one.
    """
    return hashlib.md5(path.encode("utf-8")).hexdigest()  # noqa: S324
