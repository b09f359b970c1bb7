"""In-memory document store (implements IDocumentStore).

Documents are keyed by DocumentPath. The document map is copy-on-write:
snapshot() hands out the current map and marks it shared, and the next
write copies the map before changing it. Stored documents are never
mutated in place, so a snapshot keeps seeing the state it was taken from
while taking one costs nothing.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from taskmaster.domain.value_objects.core import DocumentPath


class InMemorySnapshot:
    """Read-only view of the store as of InMemoryDocumentStore.snapshot()."""

    def __init__(self, documents: Mapping[DocumentPath, dict[str, Any]]) -> None:
        self._documents = documents

    async def get_document(self, path: DocumentPath) -> dict[str, Any] | None:
        data = self._documents.get(path)
        return copy.deepcopy(data) if data is not None else None


class InMemoryDocumentStore:
    """Thread-safe dict of documents with snapshot isolation."""

    def __init__(
        self, documents: Mapping[str, dict[str, Any]] | None = None
    ) -> None:
        self._documents: dict[DocumentPath, dict[str, Any]] = {}
        self._shared = False
        self._lock = threading.Lock()
        for path, data in (documents or {}).items():
            self.set(path, data)

    @classmethod
    def from_items(
        cls, items: Iterable[tuple[str, dict[str, Any]]]
    ) -> InMemoryDocumentStore:
        return cls(dict(items))

    def _writable(self) -> dict[DocumentPath, dict[str, Any]]:
        """Return a map safe to change (caller holds the lock)."""
        if self._shared:
            self._documents = dict(self._documents)
            self._shared = False
        return self._documents

    def set(self, path: DocumentPath | str, data: dict[str, Any]) -> None:
        """Create or replace the document at path."""
        key = DocumentPath.coerce(path)
        value = copy.deepcopy(dict(data))
        with self._lock:
            self._writable()[key] = value

    def update(self, path: DocumentPath | str, changes: dict[str, Any]) -> None:
        """Merge top-level fields into an existing document (KeyError if missing)."""
        key = DocumentPath.coerce(path)
        changes = copy.deepcopy(changes)
        with self._lock:
            if key not in self._documents:
                raise KeyError(str(key))
            documents = self._writable()
            documents[key] = {**documents[key], **changes}

    def delete(self, path: DocumentPath | str) -> None:
        """Remove the document; no-op if it does not exist."""
        key = DocumentPath.coerce(path)
        with self._lock:
            if key in self._documents:
                del self._writable()[key]

    def get(self, path: DocumentPath | str) -> dict[str, Any] | None:
        key = DocumentPath.coerce(path)
        with self._lock:
            data = self._documents.get(key)
        return copy.deepcopy(data) if data is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    async def snapshot(self) -> InMemorySnapshot:
        with self._lock:
            self._shared = True
            return InMemorySnapshot(self._documents)
