"""Domain value objects for the Taskmaster access policy.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from taskmaster.domain.exceptions import MalformedPathException, RuleDefinitionException

# Firestore reserves ids of the form __name__.
_RESERVED_ID_RE = re.compile(r"^__.*__$")
_WILDCARD_RE = re.compile(r"^\{([A-Za-z_][A-Za-z0-9_]*)\}$")


def _check_segment(raw: str, segment: object) -> str:
    """Return segment if usable as a collection name or document id."""
    if not isinstance(segment, str):
        raise MalformedPathException(raw, f"segment {segment!r} is not a string")
    if not segment:
        raise MalformedPathException(raw, "empty segment")
    if "/" in segment:
        raise MalformedPathException(raw, f"segment {segment!r} contains '/'")
    if segment in (".", ".."):
        raise MalformedPathException(raw, f"segment {segment!r} is reserved")
    if _RESERVED_ID_RE.match(segment):
        raise MalformedPathException(raw, f"segment {segment!r} is reserved")
    return segment


@dataclass(frozen=True)
class DocumentPath:
    """Hierarchical address of one document.

    Stored as (collection, document id) pairs, e.g.
    (("classes", "c1"), ("members", "u1")) for classes/c1/members/u1.
    """

    pairs: tuple[tuple[str, str], ...]

    def __post_init__(self) -> None:
        raw = "/".join("/".join(str(s) for s in pair) for pair in self.pairs)
        if not self.pairs:
            raise MalformedPathException(raw, "path has no segments")
        for pair in self.pairs:
            if len(pair) != 2:
                raise MalformedPathException(raw, f"{pair!r} is not a (collection, id) pair")
            _check_segment(raw, pair[0])
            _check_segment(raw, pair[1])

    @classmethod
    def parse(cls, raw: str) -> "DocumentPath":
        """Parse 'classes/c1/members/u1' (leading/trailing slashes ignored)."""
        if not isinstance(raw, str):
            raise MalformedPathException(repr(raw), "path is not a string")
        segments = raw.strip("/").split("/") if raw.strip("/") else []
        if not segments:
            raise MalformedPathException(raw, "path has no segments")
        if len(segments) % 2:
            raise MalformedPathException(raw, "odd number of segments (collection path)")
        for segment in segments:
            _check_segment(raw, segment)
        return cls(tuple(zip(segments[0::2], segments[1::2])))

    @classmethod
    def from_segments(cls, segments: Sequence[object]) -> "DocumentPath":
        """Build from a flat segment list (used for lookup targets)."""
        raw = "/".join(str(s) for s in segments)
        if not segments or len(segments) % 2:
            raise MalformedPathException(raw, "odd number of segments (collection path)")
        checked = [_check_segment(raw, s) for s in segments]
        return cls(tuple(zip(checked[0::2], checked[1::2])))

    @classmethod
    def coerce(
        cls, value: "DocumentPath | str | Iterable[Sequence[str]]"
    ) -> "DocumentPath":
        """Accept a DocumentPath, its string form, or a sequence of pairs."""
        if isinstance(value, DocumentPath):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        try:
            pairs = tuple(tuple(pair) for pair in value)
        except TypeError:
            raise MalformedPathException(repr(value), "not a path") from None
        return cls(pairs)

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(s for pair in self.pairs for s in pair)

    @property
    def collection(self) -> str:
        """Collection the addressed document lives in."""
        return self.pairs[-1][0]

    @property
    def document_id(self) -> str:
        return self.pairs[-1][1]

    def child(self, collection: str, document_id: str) -> "DocumentPath":
        return DocumentPath(self.pairs + ((collection, document_id),))

    def __str__(self) -> str:
        return "/".join(self.segments)


@dataclass(frozen=True)
class PathPattern:
    """Rule path pattern such as 'classes/{classId}/members/{memberId}'.

    Each segment is a literal or a single-segment wildcard. Patterns always
    address documents, so they have an even number of segments.
    """

    value: str

    def __post_init__(self) -> None:
        segments = self.value.strip("/").split("/")
        if not self.value.strip("/") or len(segments) % 2:
            raise RuleDefinitionException(
                "Pattern must address documents (even number of segments)",
                pattern=self.value,
            )
        names: list[str] = []
        for segment in segments:
            if not segment:
                raise RuleDefinitionException("Empty pattern segment", pattern=self.value)
            if "{" in segment or "}" in segment:
                m = _WILDCARD_RE.match(segment)
                if not m:
                    raise RuleDefinitionException(
                        f"Invalid wildcard segment {segment!r}", pattern=self.value
                    )
                names.append(m.group(1))
        if len(names) != len(set(names)):
            raise RuleDefinitionException(
                "Wildcard names must be unique within a pattern", pattern=self.value
            )

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(self.value.strip("/").split("/"))

    @property
    def wildcard_names(self) -> tuple[str, ...]:
        return tuple(
            name for name in (wildcard_name(s) for s in self.segments) if name
        )

    def __str__(self) -> str:
        return self.value


def wildcard_name(segment: str) -> str | None:
    """Return the variable name of a '{name}' segment, or None for literals."""
    m = _WILDCARD_RE.match(segment)
    return m.group(1) if m else None
