"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Used by main.py; no business
logic here, only wiring: rule tables, document store, decision service. Telemetry is
set up in create_app, before the middleware stack is built.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from taskmaster.application.rules.registry import get_default_rule_set
from taskmaster.application.services.access_decision_service import (
    AccessDecisionService,
)
from taskmaster.core.config import Settings, get_settings
from taskmaster.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


def build_document_store(settings: Settings):
    """Return the configured IDocumentStore implementation."""
    if settings.document_store_backend == "firestore":
        from taskmaster.infrastructure.firebase.client import init_firebase
        from taskmaster.infrastructure.firebase.repositories import (
            FirestoreDocumentStore,
        )

        return FirestoreDocumentStore(init_firebase())

    from taskmaster.infrastructure.memory import InMemoryDocumentStore

    logger.warning("Using in-memory document store; decisions see no real data")
    return InMemoryDocumentStore()


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, rule tables (fail fast on a broken table), document store,
    decision service. Shutdown order: Firestore HTTP pool close,
    telemetry shutdown.
    """
    settings = get_settings()

    # ---- Startup ----
    setup_logging()
    rule_set = get_default_rule_set(settings.legacy_rules_enabled)
    store = build_document_store(settings)
    app.state.document_store = store
    app.state.decision_service = AccessDecisionService(
        rule_set, store, max_lookups=settings.max_lookups_per_decision
    )
    logger.info(
        "Decision service ready: backend=%s, legacy_rules_enabled=%s, rules=%d",
        settings.document_store_backend,
        rule_set.legacy_enabled,
        len(rule_set.current.blocks) + len(rule_set.legacy.blocks),
    )

    yield

    # ---- Shutdown ----
    from taskmaster.infrastructure.firebase.client import close_firebase

    await close_firebase()

    from taskmaster.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)
