"""HTTP client for the remote document store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from docsync.config import validate_base_url
from docsync.exceptions import RemoteStoreError
from docsync.schemas.document import RemoteDocument

if TYPE_CHECKING:
    from docsync.config import Settings
    from docsync.schemas.document import DocumentPayload

logger = logging.getLogger(__name__)

USER_AGENT = "docsync"


class RemoteStoreClient:
    """Create and update documents in a remote namespace.

    Every call carries the static token in ``X-Auth-Token`` and is bounded by
    the client timeout. Failed calls are not retried.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(
            base_url=self.base_url,
            headers={
                "User-Agent": USER_AGENT,
                "X-Auth-Token": token,
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> RemoteStoreClient:
        """Build a client from settings, validating the API base URL."""
        base_url = validate_base_url(settings.base_api_url, settings.allow_insecure_http)
        return cls(base_url, settings.token, timeout=settings.request_timeout)

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> RemoteStoreClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def create(self, namespace: str, payload: DocumentPayload) -> RemoteDocument:
        """Create a document in ``namespace``."""
        return self._send("POST", f"/repos/{namespace}/docs", payload)

    def update(self, namespace: str, doc_id: int, payload: DocumentPayload) -> RemoteDocument:
        """Update document ``doc_id`` in ``namespace``."""
        return self._send("PUT", f"/repos/{namespace}/docs/{doc_id}", payload)

    def _send(self, method: str, url: str, payload: DocumentPayload) -> RemoteDocument:
        try:
            resp = self.client.request(method, url, json=payload.model_dump())
        except httpx.HTTPError as exc:
            raise RemoteStoreError(f"{method} {url} failed: {exc}") from exc

        if not resp.is_success:
            msg = f"{method} {url} returned HTTP {resp.status_code}"
            raise RemoteStoreError(msg, status_code=resp.status_code)

        try:
            body: Any = resp.json()
        except ValueError as exc:
            msg = f"{method} {url} returned a non-JSON body"
            raise RemoteStoreError(msg, status_code=resp.status_code) from exc

        data = body.get("data") if isinstance(body, dict) else None
        try:
            remote = RemoteDocument.model_validate(data)
        except ValidationError as exc:
            msg = f"{method} {url} returned an unexpected document: {exc.error_count()} error(s)"
            raise RemoteStoreError(msg, status_code=resp.status_code) from exc

        if remote.id == 0:
            msg = f"{method} {url} returned a document without an id"
            raise RemoteStoreError(msg, status_code=resp.status_code)

        logger.debug("%s %s -> document %d", method, url, remote.id)
        return remote
