"""Reading local markdown documents for upload."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class DocumentContent:
    """Title and upload body of a local document."""

    title: str
    body: str


def derive_title(first_line: str) -> str:
    """Derive a document title from its first line.

    Leading heading markers are stripped and every whitespace character is
    removed, so ``"# Hello World"`` becomes ``"HelloWorld"``.
    """
    return _WHITESPACE.sub("", first_line.lstrip().lstrip("#"))


def read_document(path: Path) -> DocumentContent:
    """Read a document line by line and build its title and body.

    Every line, the first included, ends with exactly one newline in the body.
    Raises OSError or UnicodeDecodeError when the file cannot be read.
    """
    lines: list[str] = []
    with open(path, encoding="utf-8", newline=None) as f:
        for line in f:
            lines.append(line.rstrip("\n"))

    title = derive_title(lines[0]) if lines else ""
    body = "".join(f"{line}\n" for line in lines)
    return DocumentContent(title=title, body=body)


def hash_content(body: str) -> str:
    """SHA-256 hex digest of an upload body, stored as the record's ``hash``."""
    return hashlib.sha256(body.encode("utf-8")).hexdigest()
