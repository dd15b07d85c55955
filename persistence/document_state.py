from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_serializer, field_validator

from .interfaces import DocumentStore


def new_document_id() -> str:
    return str(uuid.uuid4())


def truncate_to_millis(value: datetime) -> datetime:
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def utc_now() -> datetime:
    return truncate_to_millis(datetime.now(timezone.utc))


class Document(BaseModel):
    """
    Mirrors the JSON document exposed over HTTP:
      {
        "id": "<uuid>",
        "createDate": "2024-01-01T12:00:00.000+00:00",
        "lastEditDate": "2024-01-01T12:00:00.000+00:00",
        "attributes": { "<key>": "<value>" }
      }

    Fields missing from a client payload are filled the same way server-side
    construction fills them. Timestamps keep millisecond precision; finer
    digits in a payload are dropped on input.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=new_document_id)
    createDate: AwareDatetime = Field(default_factory=utc_now)
    lastEditDate: AwareDatetime = Field(default_factory=utc_now)
    attributes: dict[str, str] = Field(default_factory=dict)

    @field_validator("createDate", "lastEditDate")
    @classmethod
    def _truncate_timestamp(cls, value: datetime) -> datetime:
        return truncate_to_millis(value)

    @field_serializer("createDate", "lastEditDate", when_used="json")
    def _serialize_timestamp(self, value: datetime) -> str:
        return value.isoformat(timespec="milliseconds")

    @classmethod
    def new(cls, attributes: Mapping[str, str] | None = None) -> "Document":
        now = utc_now()
        return cls(
            id=new_document_id(),
            createDate=now,
            lastEditDate=now,
            attributes=dict(attributes or {}),
        )

    @classmethod
    def from_json_payload(cls, raw: bytes | str) -> "Document":
        # Raises pydantic.ValidationError on empty, non-JSON or wrongly shaped payloads.
        return cls.model_validate_json(raw)

    def to_json_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class InMemoryDocumentStore(DocumentStore):
    """
    Process-lifetime document storage.

    - One lock guards the underlying dict; every operation holds it.
    - Callers only ever receive copies, so stored documents change only
      through `put` and `update_attributes`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: dict[str, Document] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    def contains(self, document_id: str) -> bool:
        with self._lock:
            return document_id in self._documents

    def put(self, document: Document) -> bool:
        stored = document.model_copy(deep=True)
        with self._lock:
            did_overwrite = stored.id in self._documents
            self._documents[stored.id] = stored
        return did_overwrite

    def get(self, document_id: str) -> Document | None:
        with self._lock:
            doc = self._documents.get(document_id)
            return doc.model_copy(deep=True) if doc is not None else None

    def update_attributes(self, document_id: str, updates: Mapping[str, str]) -> Document | None:
        with self._lock:
            doc = self._documents.get(document_id)
            if doc is None:
                return None
            doc.attributes.update(updates)
            return doc.model_copy(deep=True)
