"""Firestore-backed implementations of application ports."""

from taskmaster.infrastructure.firebase.repositories.document_store_firestore import (
    FirestoreDocumentStore,
    FirestoreSnapshot,
)

__all__ = ["FirestoreDocumentStore", "FirestoreSnapshot"]
