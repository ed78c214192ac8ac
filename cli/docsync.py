"""CLI entry point for mirroring a local markdown tree into the remote document store."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from docsync.config import Settings
from docsync.exceptions import RegistryError
from docsync.remote.client import RemoteStoreClient
from docsync.services.sync_service import run_rebuild, run_sync

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

EXIT_OK = 0
EXIT_SNAPSHOT_FAILED = 1
EXIT_USAGE = 2
EXIT_DOCUMENTS_FAILED = 3

USAGE = """\
Commands:
  sync      Upload every document and save the registry (default)
  rebuild   Rebuild and save the registry without contacting the server
  version   Print the version
  help      Print this message

Environment:
  BASE_API_URL     Remote store API base URL
  BASE_DIR         Directory to mirror (default: current directory)
  IGNORE_FILE      Ignore rules file name under BASE_DIR (default: .ignoresync)
  TOKEN            API token sent with every request
  BASE_NAMESPACE   Remote namespace documents are written to
  STATE_FILE       Registry snapshot file name under BASE_DIR (default: book.json)
"""


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stdout,
        force=True,
    )
    # Quiet per-request logging
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsync",
        description="Mirror a local markdown tree into a remote document store",
        epilog=USAGE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", nargs="?", default="sync", help="Command (default: sync)")
    return parser


def _sync(settings: Settings) -> int:
    try:
        store = RemoteStoreClient.from_settings(settings)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_USAGE

    try:
        with store:
            report = run_sync(settings, store)
    except (OSError, RegistryError) as exc:
        logger.error("Failed to write %s: %s", settings.state_file_path, exc)
        return EXIT_SNAPSHOT_FAILED

    if report.failures:
        logger.warning("%d document(s) failed: %s", report.failed, ", ".join(report.failures))
        return EXIT_DOCUMENTS_FAILED
    return EXIT_OK


def _rebuild(settings: Settings) -> int:
    try:
        report = run_rebuild(settings)
    except (OSError, RegistryError) as exc:
        logger.error("Failed to write %s: %s", settings.state_file_path, exc)
        return EXIT_SNAPSHOT_FAILED
    logger.info(
        "Registry rebuilt at %s (%d new, %d removed)",
        settings.state_file_path,
        report.new,
        report.removed,
    )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "version":
        print(f"docsync {VERSION}")
        return EXIT_OK
    if args.command == "help":
        parser.print_help()
        return EXIT_OK

    try:
        settings = Settings()
    except ValidationError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_USAGE
    _configure_logging(settings.debug)

    if args.command == "sync":
        return _sync(settings)
    if args.command == "rebuild":
        return _rebuild(settings)

    logger.warning("Unknown command: %s", args.command)
    parser.print_help()
    return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
