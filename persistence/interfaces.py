from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, Protocol

if TYPE_CHECKING:
    from .document_state import Document


class DocumentStore(Protocol):
    """
    Minimal DB-friendly interface: Documents persisted under their own id.
    """

    def contains(self, document_id: str) -> bool:
        """True iff a document is stored under `document_id`."""
        ...

    def put(self, document: Document) -> bool:
        """Insert or replace the entry keyed by `document.id`. Returns True on overwrite."""
        ...

    def get(self, document_id: str) -> Document | None:
        """Return the stored document (never raises on a miss)."""
        ...

    def update_attributes(self, document_id: str, updates: Mapping[str, str]) -> Document | None:
        """Merge `updates` into the stored attributes; None when absent."""
        ...
