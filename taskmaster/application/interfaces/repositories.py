"""Document store interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
The decision engine only reads: it opens one snapshot per decision and
performs every lookup of that decision through it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from taskmaster.domain.value_objects.core import DocumentPath


class IDocumentSnapshot(Protocol):
    """Consistent read-only view of the document store."""

    async def get_document(self, path: DocumentPath) -> dict[str, Any] | None:
        """Return document data, or None if the document does not exist.

        Raises DocumentStoreException when the store cannot be reached; a
        missing document is never an error.
        """


class IDocumentStore(Protocol):
    """Source of snapshots (in-memory or Firestore)."""

    async def snapshot(self) -> IDocumentSnapshot:
        """Return a snapshot; all reads through it observe the same state."""
