"""Local document discovery with ignore rules and suffix filtering."""

from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from docsync.services.slug_service import normalize_document_path

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from docsync.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScannedFile:
    """A candidate document found under the scan root.

    ``directory`` and ``path`` are relative to the root with POSIX separators;
    files directly under the root have ``directory == "."``.
    """

    name: str
    directory: str
    path: str


def _normalize_rule(rule: str) -> str:
    rule = rule.strip().replace("\\", "/").lstrip("/")
    return posixpath.normpath(rule)


def load_ignore_rules(settings: Settings) -> list[str]:
    """Load ignore rules from the configured ignore file.

    A missing or unreadable file yields no user rules. The ignore file and the
    state file are always excluded.
    """
    rules: list[str] = []
    try:
        raw = settings.ignore_file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raw = ""
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read ignore file %s: %s", settings.ignore_file_path, exc)
        raw = ""

    for line in raw.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        rules.append(stripped)

    rules.append(settings.ignore_file)
    rules.append(settings.state_file)
    return rules


def is_ignored(rules: Iterable[str], name: str, rel_path: str) -> bool:
    """Return True when a file or directory matches an ignore rule.

    Rules containing ``/`` are compared with the root-relative path, the others
    with the bare name.
    """
    for rule in rules:
        if "/" in rule or "\\" in rule:
            if _normalize_rule(rule) == rel_path:
                return True
        elif rule.strip() == name:
            return True
    return False


def has_allowed_suffix(name: str, suffixes: Iterable[str]) -> bool:
    """Return True when ``name`` ends with any of ``suffixes``."""
    return any(name.endswith(suffix) for suffix in suffixes)


def scan_files(root: Path, rules: list[str], suffixes: list[str]) -> Iterator[ScannedFile]:
    """Lazily yield every eligible document under ``root``.

    Ignored directories are not descended into. A missing root yields nothing.
    """
    if not root.is_dir():
        logger.debug("Scan root %s does not exist, nothing to scan", root)
        return

    def _on_error(exc: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror)

    for dirpath, dirs, files in os.walk(root, onerror=_on_error):
        rel_dir = Path(os.path.relpath(dirpath, root)).as_posix()
        dirs[:] = [
            d for d in dirs if not is_ignored(rules, d, normalize_document_path(rel_dir, d))
        ]
        for filename in files:
            rel_path = normalize_document_path(rel_dir, filename)
            if is_ignored(rules, filename, rel_path):
                continue
            if not has_allowed_suffix(filename, suffixes):
                continue
            yield ScannedFile(name=filename, directory=rel_dir, path=rel_path)
