"""Pytest configuration and fixtures for taskmaster.

HTTP tests use taskmaster.main:app through httpx's ASGITransport. The
transport does not run the lifespan, so the client fixture wires a decision
service over a seeded in-memory store onto app.state itself.

Seeded class "c1" (owner "owner"):
    members: admin1 (admin), teach1 (teacher), teach2 (teacher), stud1 (member)
    subjects: s1 (teachers [teach1]), s2 (teachers [teach2]); both created by admin1
    assignments: a1 (subject s1, created by admin1)
"""

import pytest
from httpx import ASGITransport, AsyncClient

from taskmaster.application.rules.registry import build_rule_set
from taskmaster.application.services.access_decision_service import (
    AccessDecisionService,
)
from taskmaster.infrastructure.memory import InMemoryDocumentStore
from taskmaster.main import app

OWNER = "owner"
ADMIN = "admin1"
TEACHER = "teach1"
OTHER_TEACHER = "teach2"
STUDENT = "stud1"
OUTSIDER = "outsider"


def _class_documents() -> dict[str, dict]:
    return {
        "classes/c1": {"name": "Algebra", "createdBy": OWNER},
        f"classes/c1/members/{ADMIN}": {"userId": ADMIN, "role": "admin"},
        f"classes/c1/members/{TEACHER}": {"userId": TEACHER, "role": "teacher"},
        f"classes/c1/members/{OTHER_TEACHER}": {
            "userId": OTHER_TEACHER,
            "role": "teacher",
        },
        f"classes/c1/members/{STUDENT}": {"userId": STUDENT, "role": "member"},
        "classes/c1/subjects/s1": {
            "name": "Fractions",
            "createdBy": ADMIN,
            "teachers": [TEACHER],
        },
        "classes/c1/subjects/s2": {
            "name": "Geometry",
            "createdBy": ADMIN,
            "teachers": [OTHER_TEACHER],
        },
        "classes/c1/assignments/a1": {
            "title": "Worksheet 1",
            "createdBy": ADMIN,
            "subjectId": "s1",
        },
    }


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """In-memory store seeded with class c1 (see module docstring)."""
    return InMemoryDocumentStore(_class_documents())


@pytest.fixture
def service(store: InMemoryDocumentStore) -> AccessDecisionService:
    """Decision service over both rule generations and the seeded store."""
    return AccessDecisionService(build_rule_set(), store)


@pytest.fixture
async def client(service: AccessDecisionService) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    app.state.decision_service = service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.decision_service = None
