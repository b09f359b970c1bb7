"""Domain layer: rule entities, expression tree, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from taskmaster.domain.entities import Grant, HelperDefinition, RuleBlock, RuleTable
from taskmaster.domain.enums import (
    ApprovalStatus,
    DenyReason,
    MemberRole,
    Operation,
    RuleGeneration,
)
from taskmaster.domain.exceptions import (
    ConfigurationException,
    MalformedPathException,
    RuleDefinitionException,
    TaskmasterException,
    ValidationException,
)
from taskmaster.domain.value_objects import DocumentPath, PathPattern

__all__ = [
    # Entities
    "Grant",
    "HelperDefinition",
    "RuleBlock",
    "RuleTable",
    # Enums
    "ApprovalStatus",
    "DenyReason",
    "MemberRole",
    "Operation",
    "RuleGeneration",
    # Exceptions
    "ConfigurationException",
    "MalformedPathException",
    "RuleDefinitionException",
    "TaskmasterException",
    "ValidationException",
    # Value objects
    "DocumentPath",
    "PathPattern",
]
