"""Rule table entities.

A RuleTable is the declarative policy for one rule generation: path-scoped
RuleBlocks, each holding the Grants ('allow' statements) declared for that
exact path, plus the named helper predicates the grants may call.
Validation runs on construction so a broken table fails at startup, never
per request.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from taskmaster.domain.enums import Operation, RuleGeneration
from taskmaster.domain.exceptions import RuleDefinitionException
from taskmaster.domain.expressions import (
    Call,
    Expr,
    HelperParam,
    PathParam,
    iter_nodes,
)
from taskmaster.domain.value_objects.core import PathPattern


@dataclass(frozen=True)
class Grant:
    """One 'allow <operations>: if <condition>' statement."""

    name: str
    operations: frozenset[Operation]
    condition: Expr

    def __post_init__(self) -> None:
        if not self.name:
            raise RuleDefinitionException("Grant name is required")
        if not self.operations:
            raise RuleDefinitionException(f"Grant {self.name!r} allows no operations")

    def applies_to(self, operation: Operation) -> bool:
        return operation in self.operations


@dataclass(frozen=True)
class HelperDefinition:
    """Named, parameterized predicate (e.g. isAdmin(classId))."""

    name: str
    params: tuple[str, ...]
    body: Expr

    def __post_init__(self) -> None:
        for node in iter_nodes(self.body):
            if isinstance(node, HelperParam) and node.name not in self.params:
                raise RuleDefinitionException(
                    f"Helper {self.name!r} references unknown parameter {node.name!r}"
                )
            if isinstance(node, PathParam):
                raise RuleDefinitionException(
                    f"Helper {self.name!r} must take path values as parameters, "
                    f"not read {node.name!r} directly"
                )


@dataclass(frozen=True)
class RuleBlock:
    """Grants declared for one path pattern. Nothing is inherited from parents."""

    pattern: PathPattern
    grants: tuple[Grant, ...]

    def grants_for(self, operation: Operation) -> list[Grant]:
        """Return grants for operation in declaration order."""
        return [g for g in self.grants if g.applies_to(operation)]


@dataclass(frozen=True)
class RuleTable:
    """Complete policy for one rule generation."""

    generation: RuleGeneration
    blocks: tuple[RuleBlock, ...]
    helpers: Mapping[str, HelperDefinition] = field(default_factory=dict)

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for block in self.blocks:
            key = "/".join(
                "*" if s.startswith("{") else s for s in block.pattern.segments
            )
            if key in seen:
                raise RuleDefinitionException(
                    "Duplicate rule block", pattern=block.pattern.value
                )
            seen.add(key)
            names = set(block.pattern.wildcard_names)
            grant_names: set[str] = set()
            for grant in block.grants:
                if grant.name in grant_names:
                    raise RuleDefinitionException(
                        f"Duplicate grant name {grant.name!r}",
                        pattern=block.pattern.value,
                    )
                grant_names.add(grant.name)
                self._check_expression(grant.condition, names, block.pattern.value)
        for helper in self.helpers.values():
            self._check_expression(helper.body, set(), helper.name)

    def _check_expression(self, expr: Expr, path_params: set[str], where: str) -> None:
        for node in iter_nodes(expr):
            if isinstance(node, PathParam) and node.name not in path_params:
                raise RuleDefinitionException(
                    f"Unknown path parameter {node.name!r}", pattern=where
                )
            if isinstance(node, HelperParam) and where not in self.helpers:
                raise RuleDefinitionException(
                    f"Helper parameter {node.name!r} used outside a helper",
                    pattern=where,
                )
            if isinstance(node, Call):
                helper = self.helpers.get(node.helper)
                if helper is None:
                    raise RuleDefinitionException(
                        f"Unknown helper {node.helper!r}", pattern=where
                    )
                if len(node.args) != len(helper.params):
                    raise RuleDefinitionException(
                        f"Helper {node.helper!r} takes {len(helper.params)} "
                        f"argument(s), got {len(node.args)}",
                        pattern=where,
                    )

    @property
    def top_level_collections(self) -> frozenset[str]:
        """Literal first segments of all patterns (used for prefix dispatch)."""
        return frozenset(
            b.pattern.segments[0]
            for b in self.blocks
            if not b.pattern.segments[0].startswith("{")
        )

    def describe(self) -> list[dict[str, object]]:
        """Return a serializable listing: pattern, operation, grant names."""
        listing: list[dict[str, object]] = []
        for block in self.blocks:
            for operation in Operation:
                grants = block.grants_for(operation)
                if grants:
                    listing.append(
                        {
                            "pattern": block.pattern.value,
                            "operation": operation.value,
                            "grants": [g.name for g in grants],
                        }
                    )
        return listing


def grant(name: str, operations: Iterable[Operation] | Operation, condition: Expr) -> Grant:
    """Build a Grant from one operation or an iterable of operations."""
    ops = (
        frozenset({operations})
        if isinstance(operations, Operation)
        else frozenset(operations)
    )
    return Grant(name, ops, condition)
