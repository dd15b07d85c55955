from __future__ import annotations

import threading
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from persistence.document_state import Document, InMemoryDocumentStore


def test_put_reports_overwrite_only_for_existing_ids():
    store = InMemoryDocumentStore()

    assert store.contains("d1") is False
    assert store.put(Document(id="d1", attributes={"a": "1"})) is False
    assert store.contains("d1") is True

    assert store.put(Document(id="d1", attributes={"a": "2"})) is True
    got = store.get("d1")
    assert got is not None
    assert got.attributes == {"a": "2"}
    assert len(store) == 1


def test_get_missing_returns_none():
    store = InMemoryDocumentStore()
    assert store.get("nope") is None


def test_returned_documents_are_copies():
    store = InMemoryDocumentStore()
    doc = Document(id="d1", attributes={"a": "1"})
    store.put(doc)

    doc.attributes["leak"] = "x"
    got = store.get("d1")
    assert got is not None
    got.attributes["also"] = "x"

    assert store.get("d1").attributes == {"a": "1"}


def test_update_attributes_merges_and_keeps_timestamps():
    store = InMemoryDocumentStore()
    original = Document.new({"a": "1"})
    store.put(original)

    updated = store.update_attributes(original.id, {"b": "2", "a": "3"})
    assert updated is not None
    assert updated.attributes == {"a": "3", "b": "2"}
    assert updated.createDate == original.createDate
    assert updated.lastEditDate == original.lastEditDate

    assert store.update_attributes("missing", {"a": "1"}) is None
    assert store.contains("missing") is False


def test_concurrent_updates_are_not_lost():
    store = InMemoryDocumentStore()
    store.put(Document(id="d1"))

    def _worker(n: int) -> None:
        for i in range(50):
            store.update_attributes("d1", {f"k{n}-{i}": str(i)})

    threads = [threading.Thread(target=_worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.get("d1").attributes) == 8 * 50


def test_new_document_has_fresh_identity():
    a = Document.new()
    b = Document.new()
    assert a.id != b.id
    assert a.createDate == a.lastEditDate
    assert a.createDate.tzinfo is not None
    assert a.attributes == {}


def test_json_doc_uses_offset_timestamps_with_millis():
    doc = Document(
        id="d1",
        createDate=datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc),
        lastEditDate=datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc),
        attributes={"animal": "cat"},
    )
    assert doc.to_json_doc() == {
        "id": "d1",
        "createDate": "2024-01-02T03:04:05.678+00:00",
        "lastEditDate": "2024-01-02T03:04:05.678+00:00",
        "attributes": {"animal": "cat"},
    }


def test_from_json_payload_fills_missing_fields():
    doc = Document.from_json_payload(b'{"attributes": {"animal": "cat"}}')
    assert doc.id
    assert doc.createDate.tzinfo is not None
    assert doc.attributes == {"animal": "cat"}


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"not json",
        b"null",
        b"[]",
        b'{"id": "d1", "attributes": {"a": 1}}',
        b'{"id": "d1", "unknown": "x"}',
        b'{"id": "d1", "createDate": "2024-01-02T03:04:05"}',
    ],
)
def test_from_json_payload_rejects_malformed(payload):
    with pytest.raises(ValidationError):
        Document.from_json_payload(payload)


def test_timestamps_are_kept_at_millisecond_precision():
    doc = Document.from_json_payload(
        b'{"id": "d1", "createDate": "2024-01-02T03:04:05.123456+00:00"}'
    )
    assert doc.createDate.microsecond == 123000
    assert Document.new().createDate.microsecond % 1000 == 0
