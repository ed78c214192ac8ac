"""Document record and remote store payload schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from docsync.services.datetime_service import format_iso, parse_datetime

DEFAULT_VERSION = "1.0.0"
DOCUMENT_FORMAT = "markdown"


class Document(BaseModel):
    """A tracked local file and the remote document it maps to.

    Field aliases keep the snapshot file compatible with ``book.json`` files
    written by earlier versions.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    remote_id: int = Field(default=0, alias="id")
    content_hash: str = Field(default="", alias="hash")
    title: str = ""
    name: str = ""
    directory: str = Field(default=".", alias="dir")
    slug: str
    path: str = ""
    version: str = Field(default=DEFAULT_VERSION, alias="last_version")
    updated_at: datetime | None = None
    remote_snapshot: dict[str, Any] | None = Field(default=None, alias="raw")

    @field_validator("remote_id", mode="before")
    @classmethod
    def null_id_is_unsaved(cls, v: object) -> object:
        return 0 if v is None else v

    @field_validator("updated_at", mode="before")
    @classmethod
    def parse_lax_timestamp(cls, v: object) -> object:
        if isinstance(v, str):
            return parse_datetime(v) if v.strip() else None
        return v

    @field_serializer("updated_at")
    def serialize_timestamp(self, v: datetime | None) -> str | None:
        return format_iso(v) if v is not None else None

    @property
    def is_remote(self) -> bool:
        """True once the remote store has assigned an id."""
        return self.remote_id != 0


class DocumentPayload(BaseModel):
    """Request body for creating or updating a remote document."""

    title: str
    slug: str
    public: int = 0
    format: str = DOCUMENT_FORMAT
    body: str


class RemoteDocument(BaseModel):
    """Document detail returned by the remote store.

    Only ``id`` is interpreted; every other field is kept verbatim so the
    whole response can be stored as the record's snapshot.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    slug: str | None = None
    title: str | None = None
