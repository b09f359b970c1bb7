"""Per-decision evaluation context.

Carries everything a predicate may reference: actor, captured path
parameters, existing and proposed document data, and lookups bound to one
store snapshot. Lookups are memoized for the lifetime of the context only,
so a decision never sees two versions of the same document and nothing
leaks into the next decision.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from taskmaster.application.interfaces.repositories import IDocumentSnapshot
    from taskmaster.domain.value_objects.core import DocumentPath

# Distinct documents one decision may look up (Firestore rules allow 10 for
# single-document requests; the backend default here is more generous).
DEFAULT_MAX_LOOKUPS = 20


class UndefinedValueError(Exception):
    """Internal signal: a value the predicate needs is undefined.

    Raised for missing documents/fields, type errors (null in 'in' or
    ordering) and the lookup limit. The evaluator folds it into a false grant;
    it never reaches callers.
    """


class LookupLimitExceeded(UndefinedValueError):
    """More distinct documents were looked up than the context allows."""


@dataclass
class EvaluationContext:
    """Explicit replacement for the ambient request/resource/get/exists names."""

    actor_id: str | None
    snapshot: IDocumentSnapshot
    params: Mapping[str, str] = field(default_factory=dict)
    existing: dict[str, Any] | None = None
    proposed: dict[str, Any] | None = None
    max_lookups: int = DEFAULT_MAX_LOOKUPS
    # Documents already in hand (the request's own target); served before the
    # snapshot and not counted against max_lookups.
    preloaded: Mapping[DocumentPath, dict[str, Any] | None] = field(default_factory=dict)
    _lookups: dict[DocumentPath, dict[str, Any] | None] = field(
        default_factory=dict, repr=False
    )

    @property
    def lookup_count(self) -> int:
        """Number of distinct documents fetched so far."""
        return len(self._lookups)

    async def get(self, path: DocumentPath) -> dict[str, Any] | None:
        """Return document data from the snapshot (memoized), None if missing."""
        if path in self.preloaded:
            return self.preloaded[path]
        if path in self._lookups:
            return self._lookups[path]
        if len(self._lookups) >= self.max_lookups:
            raise LookupLimitExceeded(
                f"More than {self.max_lookups} document lookups in one decision"
            )
        data = await self.snapshot.get_document(path)
        self._lookups[path] = data
        return data

    async def exists(self, path: DocumentPath) -> bool:
        return await self.get(path) is not None
