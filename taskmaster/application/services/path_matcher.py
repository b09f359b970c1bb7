"""Maps document paths to rule blocks.

Patterns are compiled into a segment trie. At each depth a literal child is
tried before the wildcard child, so 'classes/{classId}/members/{memberId}'
and a hypothetical 'classes/{classId}/members/self' resolve to the most
specific block. Matching is exact-depth: a block never applies to
documents in its subcollections.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from taskmaster.domain.entities.rule import Grant, RuleBlock
from taskmaster.domain.enums import Operation
from taskmaster.domain.exceptions import RuleDefinitionException
from taskmaster.domain.value_objects.core import DocumentPath, wildcard_name


@dataclass(frozen=True)
class PathMatch:
    """Matched block and the values captured by its wildcards."""

    block: RuleBlock
    params: dict[str, str]

    def grants_for(self, operation: Operation) -> list[Grant]:
        return self.block.grants_for(operation)


@dataclass
class _Node:
    literals: dict[str, "_Node"] = field(default_factory=dict)
    wildcard_name: str | None = None
    wildcard: "_Node | None" = None
    block: RuleBlock | None = None


class PathMatcher:
    """Segment trie over the blocks of one rule table."""

    def __init__(self, blocks: Iterable[RuleBlock]) -> None:
        self._root = _Node()
        for block in blocks:
            self._add(block)

    def _add(self, block: RuleBlock) -> None:
        node = self._root
        for segment in block.pattern.segments:
            name = wildcard_name(segment)
            if name is None:
                node = node.literals.setdefault(segment, _Node())
                continue
            if node.wildcard is None:
                node.wildcard_name = name
                node.wildcard = _Node()
            elif node.wildcard_name != name:
                raise RuleDefinitionException(
                    f"Wildcard {{{name}}} conflicts with {{{node.wildcard_name}}} "
                    "at the same depth",
                    pattern=block.pattern.value,
                )
            node = node.wildcard
        if node.block is not None:
            raise RuleDefinitionException(
                "Duplicate rule block", pattern=block.pattern.value
            )
        node.block = block

    def match(self, path: DocumentPath) -> PathMatch | None:
        """Return the most specific block for path, or None (closed world)."""
        params: dict[str, str] = {}
        block = self._walk(self._root, path.segments, 0, params)
        if block is None:
            return None
        return PathMatch(block, params)

    def _walk(
        self,
        node: _Node,
        segments: tuple[str, ...],
        index: int,
        params: dict[str, str],
    ) -> RuleBlock | None:
        if index == len(segments):
            return node.block
        segment = segments[index]
        literal = node.literals.get(segment)
        if literal is not None:
            found = self._walk(literal, segments, index + 1, params)
            if found is not None:
                return found
        if node.wildcard is not None and node.wildcard_name is not None:
            params[node.wildcard_name] = segment
            found = self._walk(node.wildcard, segments, index + 1, params)
            if found is not None:
                return found
            del params[node.wildcard_name]
        return None
