"""Firestore client (REST-based, no firebase-admin).

Initialized at app startup using either FIREBASE_SERVICE_ACCOUNT_KEY (JSON
string) or FIREBASE_SERVICE_ACCOUNT_PATH (file path). Uses the Firestore
REST API with google-auth so the service does not pull in grpc-based SDKs.
"""

import json
import logging
from pathlib import Path

from taskmaster.core.config import get_settings
from taskmaster.domain.exceptions import ConfigurationException
from taskmaster.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)

logger = logging.getLogger(__name__)

_firestore_client: FirestoreRESTClient | None = None


def _load_key_dict() -> dict:
    """Return the service account dict from the env key or the file path."""
    settings = get_settings()
    key = settings.firebase_service_account_key
    key_json = key.get_secret_value() if key else None
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ConfigurationException(
                "FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON"
            ) from e
    path = settings.firebase_service_account_path
    if not path:
        raise ConfigurationException("No Firebase service account configured")
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_file():
        raise ConfigurationException(
            f"FIREBASE_SERVICE_ACCOUNT_PATH not found: {path} (resolved: {resolved})"
        )
    with open(resolved, encoding="utf-8") as f:
        return json.load(f)


def init_firebase() -> FirestoreRESTClient:
    """Initialize the Firestore client (REST API + google-auth). Idempotent.

    Unlike optional integrations, the document store is required when the
    firestore backend is selected, so bad credentials stop startup.

    Raises:
        ConfigurationException: key missing, unreadable, or without project_id.
    """
    global _firestore_client
    if _firestore_client is not None:
        return _firestore_client
    key_dict = _load_key_dict()
    project_id = key_dict.get("project_id")
    if not project_id:
        raise ConfigurationException(
            "Firebase service account JSON missing 'project_id'"
        )
    _firestore_client = FirestoreRESTClient(
        project_id,
        _get_credentials(key_dict),
        timeout=get_settings().firestore_timeout_seconds,
    )
    logger.info("Firestore REST client initialized for project %s", project_id)
    return _firestore_client


async def close_firebase() -> None:
    """Close the Firestore client's HTTP connection pool. Call from app shutdown."""
    global _firestore_client
    if _firestore_client is not None:
        await _firestore_client.aclose()
        _firestore_client = None
        logger.info("Firestore HTTP client closed")
