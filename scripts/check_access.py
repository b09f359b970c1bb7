"""Evaluate one access request against a JSON fixture of documents.

Usage:
    python -m scripts.check_access <fixture.json> <operation> <actor|-> <path> [proposed.json]

The fixture maps document paths to field dicts, e.g.
{"classes/c1": {"createdBy": "u1"}, "classes/c1/members/u2": {"role": "teacher"}}.
Pass "-" as the actor for an unauthenticated request.
Exit status: 0 allow, 1 deny, 2 usage error.
"""

import asyncio
import json
import sys

from taskmaster.application.dtos.access import AccessRequest
from taskmaster.application.rules.registry import build_rule_set
from taskmaster.application.services.access_decision_service import (
    AccessDecisionService,
)
from taskmaster.domain.enums import Operation
from taskmaster.domain.exceptions import MalformedPathException
from taskmaster.infrastructure.memory import InMemoryDocumentStore

USAGE = (
    "Usage: python -m scripts.check_access "
    "<fixture.json> <operation> <actor|-> <path> [proposed.json]\n"
    f"Operations: {', '.join(Operation.values())}"
)


def _load_json(path: str) -> dict:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return data


async def main() -> None:
    """Print the decision as JSON and exit with its status."""
    if len(sys.argv) not in (5, 6):
        print(USAGE, file=sys.stderr)
        sys.exit(2)
    fixture_path, operation, actor, path = sys.argv[1:5]
    try:
        op = Operation(operation)
        store = InMemoryDocumentStore(_load_json(fixture_path))
        proposed = _load_json(sys.argv[5]) if len(sys.argv) == 6 else None
    except (OSError, ValueError, MalformedPathException) as e:
        print(f"{e}\n{USAGE}", file=sys.stderr)
        sys.exit(2)

    service = AccessDecisionService(build_rule_set(), store)
    decision = await service.decide(
        AccessRequest(op, None if actor == "-" else actor, path, proposed_document=proposed)
    )
    print(
        json.dumps(
            {
                "allowed": decision.allowed,
                "rule": decision.rule,
                "generation": decision.generation.value if decision.generation else None,
                "reason": decision.reason.value if decision.reason else None,
                "lookups": decision.lookups,
            },
            indent=2,
        )
    )
    sys.exit(0 if decision.allowed else 1)


if __name__ == "__main__":
    asyncio.run(main())
