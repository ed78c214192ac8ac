"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOCALHOST_HOSTS = {"localhost", "127.0.0.1", "::1"}


class Settings(BaseSettings):
    """docsync settings.

    Built once at startup and handed to the scanner, registry and sync engine.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote store
    base_api_url: str = "https://www.yuque.com/api/v2"
    base_namespace: str = "tests/sync"
    token: str = ""
    request_timeout: float = Field(default=5.0, gt=0)
    allow_insecure_http: bool = False

    # Local tree
    base_dir: Path = Field(default_factory=Path.cwd)
    ignore_file: str = ".ignoresync"
    state_file: str = "book.json"
    allowed_suffixes: list[str] = Field(default_factory=lambda: [".md"])

    debug: bool = False

    @property
    def ignore_file_path(self) -> Path:
        return self.base_dir / self.ignore_file

    @property
    def state_file_path(self) -> Path:
        return self.base_dir / self.state_file


def validate_base_url(base_url: str, allow_insecure_http: bool = False) -> str:
    """Return the API base URL without a trailing slash.

    Plain http is only accepted for localhost unless ``allow_insecure_http``.
    """
    url = base_url.strip().rstrip("/")
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(f"BASE_API_URL needs a scheme and host, got {base_url!r}")
    insecure = parsed.scheme == "http" and parsed.hostname not in _LOCALHOST_HOSTS
    if insecure and not allow_insecure_http:
        raise ValueError(
            f"HTTPS is required for {parsed.hostname}; set ALLOW_INSECURE_HTTP to override"
        )
    return url
