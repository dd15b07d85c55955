from __future__ import annotations

from .document_state import Document, InMemoryDocumentStore
from .interfaces import DocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "InMemoryDocumentStore",
]
