"""Firestore-backed document store (implements IDocumentStore)."""

from __future__ import annotations

import asyncio
from typing import Any

from taskmaster.domain.value_objects.core import DocumentPath
from taskmaster.infrastructure.firebase._rest_client import FirestoreRESTClient
from taskmaster.infrastructure.firebase._rest_encoding import decode_document


class FirestoreSnapshot:
    """All reads share one read-only transaction, begun on the first read.

    A decision that needs no lookups never opens a transaction.
    """

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._transaction: str | None = None
        self._lock = asyncio.Lock()

    async def _transaction_id(self) -> str:
        async with self._lock:
            if self._transaction is None:
                self._transaction = await self._client.begin_read_only_transaction()
            return self._transaction

    async def get_document(self, path: DocumentPath) -> dict[str, Any] | None:
        transaction = await self._transaction_id()
        document = await self._client.get_document(path.segments, transaction)
        if document is None:
            return None
        return decode_document(document)


class FirestoreDocumentStore:
    """Document store over FirestoreRESTClient. Same contract as InMemoryDocumentStore."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client

    async def snapshot(self) -> FirestoreSnapshot:
        return FirestoreSnapshot(self._client)
