"""Legacy rule generation: root-level collections kept for data migration.

Documents here are not nested under a class; they carry a classId field and
helpers are called with it. isAdmin in this generation admits teachers, and
there are no subject-teacher overrides. Do not merge with the current table.
"""

from taskmaster.application.rules.helpers import LEGACY_HELPERS
from taskmaster.domain.entities.rule import RuleBlock, RuleTable, grant
from taskmaster.domain.enums import Operation, RuleGeneration
from taskmaster.domain.expressions import ACTOR, any_of, call, eq, request, resource
from taskmaster.domain.value_objects.core import PathPattern


def build_legacy_table() -> RuleTable:
    """Build the legacy-generation table (validated on construction)."""
    ai_materials = RuleBlock(
        PathPattern("aiMaterials/{materialId}"),
        (
            grant(
                "legacy_ai_material.read",
                Operation.READ,
                any_of(
                    call("isMember", resource("classId")),
                    call("isAdmin", resource("classId")),
                ),
            ),
            grant(
                "legacy_ai_material.create",
                Operation.CREATE,
                call("isAdmin", request("classId")),
            ),
            grant(
                "legacy_ai_material.admin",
                (Operation.UPDATE, Operation.DELETE),
                call("isAdmin", resource("classId")),
            ),
            grant(
                "legacy_ai_material.creator",
                (Operation.UPDATE, Operation.DELETE),
                eq(resource("createdBy"), ACTOR),
            ),
        ),
    )
    return RuleTable(RuleGeneration.LEGACY, (ai_materials,), LEGACY_HELPERS)
