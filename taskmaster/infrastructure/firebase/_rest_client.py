"""Thin Firestore REST API client (no firebase-admin).

Uses google-auth for service account tokens and Firestore REST v1.
Only the reads the decision engine needs: single-document gets and
read-only transactions. All HTTP calls use httpx.AsyncClient so they do
not block the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from taskmaster.infrastructure.exceptions import DocumentStoreException
from taskmaster.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_BASE = "https://firestore.googleapis.com/v1"
_SPAN_ATTRIBUTES = {"db.system": "firestore"}


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


async def _request_async(
    client: httpx.AsyncClient,
    url: str,
    operation: str,
    method: str = "GET",
    body: dict | None = None,
    params: dict[str, str] | None = None,
    access_token: str | None = None,
) -> dict | None:
    """Perform an HTTP request to the Firestore REST API. 404 returns None.

    Raises:
        DocumentStoreException: transport failure or any other non-200 status.
    """
    headers = {"Content-Type": "application/json"}
    if access_token:
        headers["Authorization"] = f"Bearer {access_token}"
    try:
        if method == "GET":
            resp = await client.get(url, headers=headers, params=params)
        elif method == "POST":
            resp = await client.post(url, headers=headers, params=params, json=body)
        else:
            raise ValueError(f"Unsupported method: {method!r}")
    except httpx.HTTPError as e:
        logger.exception("Firestore %s request failed", operation)
        raise DocumentStoreException(operation, str(e) or type(e).__name__) from e
    if resp.status_code == 404:
        return None
    if resp.status_code != 200:
        raise DocumentStoreException(operation, f"HTTP {resp.status_code}")
    return resp.json() if resp.content else {}


class FirestoreRESTClient:
    """Lightweight Firestore client using the REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._database = f"projects/{project_id}/databases/(default)"
        self._prefix = f"{self._database}/documents"
        self._http = (
            http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        )
        self._owns_http = http_client is None

    @property
    def project_id(self) -> str:
        return self._project_id

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        """Return a valid access token; refreshes in thread pool to avoid blocking."""
        try:
            return await asyncio.to_thread(_get_access_token, self._credentials)
        except Exception as e:
            logger.exception("Failed to obtain Firestore access token")
            raise DocumentStoreException("authenticate", str(e)) from e

    def document_url(self, segments: list[str] | tuple[str, ...]) -> str:
        """REST URL of the document; every segment is percent-encoded on its own."""
        encoded = "/".join(quote(s, safe="") for s in segments)
        return f"{_BASE}/{self._prefix}/{encoded}"

    @traced("firestore.begin_transaction", attributes=_SPAN_ATTRIBUTES)
    async def begin_read_only_transaction(self) -> str:
        """Start a read-only transaction and return its opaque id."""
        out = await _request_async(
            self._http,
            f"{_BASE}/{self._prefix}:beginTransaction",
            "begin_transaction",
            method="POST",
            body={"options": {"readOnly": {}}},
            access_token=await self.get_token(),
        )
        transaction = (out or {}).get("transaction")
        if not transaction:
            raise DocumentStoreException(
                "begin_transaction", "response carried no transaction id"
            )
        return transaction

    @traced("firestore.get_document", attributes=_SPAN_ATTRIBUTES)
    async def get_document(
        self,
        segments: list[str] | tuple[str, ...],
        transaction: str | None = None,
    ) -> dict[str, Any] | None:
        """Fetch a REST Document; None if it does not exist."""
        params = {"transaction": transaction} if transaction else None
        return await _request_async(
            self._http,
            self.document_url(segments),
            "get_document",
            params=params,
            access_token=await self.get_token(),
        )
