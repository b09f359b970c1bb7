"""Process-local document store (tests, demos, the check_access script)."""

from taskmaster.infrastructure.memory.document_store import (
    InMemoryDocumentStore,
    InMemorySnapshot,
)

__all__ = ["InMemoryDocumentStore", "InMemorySnapshot"]
