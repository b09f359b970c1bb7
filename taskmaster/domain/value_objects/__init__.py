"""Domain value objects and shared value types."""

from taskmaster.domain.value_objects.core import DocumentPath, PathPattern, wildcard_name

__all__ = [
    "DocumentPath",
    "PathPattern",
    "wildcard_name",
]
