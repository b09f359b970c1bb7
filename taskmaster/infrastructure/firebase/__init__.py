"""Firestore integration over the REST API."""

from taskmaster.infrastructure.firebase.client import close_firebase, init_firebase

__all__ = [
    "close_firebase",
    "init_firebase",
]
