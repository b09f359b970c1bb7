"""Domain entities: rule tables and their parts.

Pure domain models; no persistence concerns.
"""

from taskmaster.domain.entities.rule import (
    Grant,
    HelperDefinition,
    RuleBlock,
    RuleTable,
    grant,
)

__all__ = [
    "Grant",
    "HelperDefinition",
    "RuleBlock",
    "RuleTable",
    "grant",
]
