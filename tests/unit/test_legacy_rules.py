"""Tests for the legacy generation and path-prefix dispatch."""

import pytest

from taskmaster.application.dtos.access import AccessRequest
from taskmaster.application.rules.registry import RuleSet, build_rule_set
from taskmaster.application.rules.current import build_current_table
from taskmaster.application.rules.legacy import build_legacy_table
from taskmaster.application.services.access_decision_service import (
    AccessDecisionService,
)
from taskmaster.domain.entities.rule import RuleBlock, RuleTable, grant
from taskmaster.domain.enums import DenyReason, Operation, RuleGeneration
from taskmaster.domain.exceptions import RuleDefinitionException
from taskmaster.domain.expressions import lit
from taskmaster.domain.value_objects.core import DocumentPath, PathPattern
from taskmaster.infrastructure.memory import InMemoryDocumentStore

MATERIAL = {"classId": "c1", "createdBy": "stud1", "title": "Notes"}


def test_dispatch_by_first_collection() -> None:
    rule_set = build_rule_set()
    assert rule_set.legacy_prefixes == {"aiMaterials"}
    assert rule_set.generation_for(DocumentPath.parse("aiMaterials/m1")) is RuleGeneration.LEGACY
    assert rule_set.generation_for(DocumentPath.parse("classes/c1")) is RuleGeneration.CURRENT
    assert (
        rule_set.generation_for(DocumentPath.parse("classes/c1/aiMaterials/m1"))
        is RuleGeneration.CURRENT
    )


def test_overlapping_generations_rejected() -> None:
    clash = RuleTable(
        RuleGeneration.LEGACY,
        (RuleBlock(PathPattern("users/{userId}"), (grant("x", Operation.READ, lit(True)),)),),
    )
    with pytest.raises(RuleDefinitionException, match="both generations"):
        RuleSet(build_current_table(), clash)


def test_tables_must_match_their_slot() -> None:
    with pytest.raises(RuleDefinitionException, match="wrong generation"):
        RuleSet(build_legacy_table(), build_legacy_table())


async def test_legacy_admin_includes_teacher(service: AccessDecisionService) -> None:
    """Legacy isAdmin admits teachers; the current table does not."""
    legacy = await service.decide(
        AccessRequest(Operation.UPDATE, "teach1", "aiMaterials/m1", MATERIAL)
    )
    assert legacy.generation is RuleGeneration.LEGACY
    assert legacy.rule == "legacy_ai_material.admin"

    current = await service.decide(
        AccessRequest(Operation.UPDATE, "teach1", "classes/c1/aiMaterials/m1", MATERIAL)
    )
    assert current.generation is RuleGeneration.CURRENT
    assert not current


async def test_legacy_read_uses_document_class(service: AccessDecisionService) -> None:
    member = await service.decide(
        AccessRequest(Operation.READ, "stud1", "aiMaterials/m1", MATERIAL)
    )
    assert member.rule == "legacy_ai_material.read"
    outsider = await service.decide(
        AccessRequest(Operation.READ, "outsider", "aiMaterials/m1", MATERIAL)
    )
    assert outsider.reason is DenyReason.PREDICATES_FALSE


async def test_legacy_create_and_creator(service: AccessDecisionService) -> None:
    created = await service.decide(
        AccessRequest(Operation.CREATE, "teach1", "aiMaterials/m2", proposed_document=MATERIAL)
    )
    assert created.rule == "legacy_ai_material.create"
    own = await service.decide(
        AccessRequest(Operation.DELETE, "stud1", "aiMaterials/m1", MATERIAL)
    )
    assert own.rule == "legacy_ai_material.creator"


async def test_legacy_nested_path_has_no_rule(service: AccessDecisionService) -> None:
    decision = await service.decide(
        AccessRequest(Operation.READ, "stud1", "aiMaterials/m1/versions/v1")
    )
    assert decision.reason is DenyReason.NO_MATCH
    assert decision.generation is RuleGeneration.LEGACY


async def test_disabled_legacy_generation_denies(store: InMemoryDocumentStore) -> None:
    service = AccessDecisionService(build_rule_set(legacy_enabled=False), store)
    decision = await service.decide(
        AccessRequest(Operation.READ, "owner", "aiMaterials/m1", MATERIAL)
    )
    assert decision.reason is DenyReason.GENERATION_DISABLED
    current = await service.decide(AccessRequest(Operation.READ, "owner", "classes/c1"))
    assert current
