"""Rule table set: both generations plus path-prefix dispatch.

Tables are built once per process (get_default_rule_set) and never merged.
A request whose first segment is a top-level collection of the legacy
table goes to the legacy table; everything else goes to the current one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from taskmaster.application.rules.current import build_current_table
from taskmaster.application.rules.legacy import build_legacy_table
from taskmaster.application.services.path_matcher import PathMatcher
from taskmaster.domain.entities.rule import RuleTable
from taskmaster.domain.enums import RuleGeneration
from taskmaster.domain.exceptions import RuleDefinitionException
from taskmaster.domain.value_objects.core import DocumentPath


@dataclass(frozen=True)
class RuleSet:
    """Current and legacy tables with one compiled matcher each."""

    current: RuleTable
    legacy: RuleTable
    legacy_enabled: bool = True
    _matchers: dict[RuleGeneration, PathMatcher] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.current.generation is not RuleGeneration.CURRENT:
            raise RuleDefinitionException("current table has the wrong generation")
        if self.legacy.generation is not RuleGeneration.LEGACY:
            raise RuleDefinitionException("legacy table has the wrong generation")
        overlap = self.current.top_level_collections & self.legacy_prefixes
        if overlap:
            raise RuleDefinitionException(
                f"Collections claimed by both generations: {sorted(overlap)}"
            )
        self._matchers[RuleGeneration.CURRENT] = PathMatcher(self.current.blocks)
        self._matchers[RuleGeneration.LEGACY] = PathMatcher(self.legacy.blocks)

    @property
    def legacy_prefixes(self) -> frozenset[str]:
        return self.legacy.top_level_collections

    def generation_for(self, path: DocumentPath) -> RuleGeneration:
        """Pick the generation purely from the path prefix (ignores legacy_enabled)."""
        if path.pairs[0][0] in self.legacy_prefixes:
            return RuleGeneration.LEGACY
        return RuleGeneration.CURRENT

    def table(self, generation: RuleGeneration) -> RuleTable:
        return self.current if generation is RuleGeneration.CURRENT else self.legacy

    def matcher(self, generation: RuleGeneration) -> PathMatcher:
        return self._matchers[generation]

    def is_enabled(self, generation: RuleGeneration) -> bool:
        return generation is RuleGeneration.CURRENT or self.legacy_enabled


def build_rule_set(legacy_enabled: bool = True) -> RuleSet:
    """Build and validate both generations."""
    return RuleSet(build_current_table(), build_legacy_table(), legacy_enabled)


@lru_cache
def get_default_rule_set(legacy_enabled: bool = True) -> RuleSet:
    """Return the process-wide rule set (built on first call)."""
    return build_rule_set(legacy_enabled)
