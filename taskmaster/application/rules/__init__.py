"""Rule tables as data: helpers, current generation, legacy generation."""

from taskmaster.application.rules.current import build_current_table
from taskmaster.application.rules.legacy import build_legacy_table
from taskmaster.application.rules.registry import (
    RuleSet,
    build_rule_set,
    get_default_rule_set,
)

__all__ = [
    "RuleSet",
    "build_current_table",
    "build_legacy_table",
    "build_rule_set",
    "get_default_rule_set",
]
