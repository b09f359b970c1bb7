"""Tests for InMemoryDocumentStore (snapshot isolation, copy-on-write, copies)."""

import pytest

from taskmaster.domain.exceptions import MalformedPathException
from taskmaster.domain.value_objects.core import DocumentPath
from taskmaster.infrastructure.memory import InMemoryDocumentStore


async def test_snapshot_does_not_see_later_writes() -> None:
    store = InMemoryDocumentStore({"classes/c1": {"createdBy": "a"}})
    snapshot = await store.snapshot()
    store.update("classes/c1", {"createdBy": "b"})
    store.set("classes/c2", {"createdBy": "c"})
    store.delete("classes/c1")
    assert await snapshot.get_document(DocumentPath.parse("classes/c1")) == {"createdBy": "a"}
    assert await snapshot.get_document(DocumentPath.parse("classes/c2")) is None
    fresh = await store.snapshot()
    assert await fresh.get_document(DocumentPath.parse("classes/c1")) is None


async def test_returned_documents_are_copies() -> None:
    store = InMemoryDocumentStore()
    data = {"teachers": ["t1"]}
    store.set("classes/c1/subjects/s1", data)
    data["teachers"].append("intruder")
    snapshot = await store.snapshot()
    read = await snapshot.get_document(DocumentPath.parse("classes/c1/subjects/s1"))
    assert read == {"teachers": ["t1"]}
    read["teachers"].append("again")
    assert store.get("classes/c1/subjects/s1") == {"teachers": ["t1"]}


def test_update_missing_document_raises() -> None:
    with pytest.raises(KeyError):
        InMemoryDocumentStore().update("classes/c1", {"name": "x"})


def test_delete_missing_is_noop() -> None:
    store = InMemoryDocumentStore.from_items([("users/u1", {})])
    store.delete("users/u2")
    assert len(store) == 1


def test_keys_must_be_document_paths() -> None:
    with pytest.raises(MalformedPathException):
        InMemoryDocumentStore({"classes": {}})


async def test_snapshots_share_the_map_until_a_write() -> None:
    """Taking a snapshot copies nothing; the next write copies the map."""
    store = InMemoryDocumentStore({"classes/c1": {"createdBy": "a"}})
    first = await store.snapshot()
    second = await store.snapshot()
    assert first._documents is second._documents
    store.set("classes/c2", {"createdBy": "b"})
    third = await store.snapshot()
    assert third._documents is not first._documents
    assert await first.get_document(DocumentPath.parse("classes/c2")) is None
    assert await third.get_document(DocumentPath.parse("classes/c2")) == {"createdBy": "b"}


async def test_update_after_snapshot_leaves_nested_fields_alone() -> None:
    store = InMemoryDocumentStore(
        {"classes/c1/subjects/s1": {"teachers": ["t1"], "name": "Math"}}
    )
    snapshot = await store.snapshot()
    store.update("classes/c1/subjects/s1", {"teachers": []})
    store.update("classes/c1/subjects/s1", {"name": "Algebra"})
    path = DocumentPath.parse("classes/c1/subjects/s1")
    assert await snapshot.get_document(path) == {"teachers": ["t1"], "name": "Math"}
    assert store.get(path) == {"teachers": [], "name": "Algebra"}
