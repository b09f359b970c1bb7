"""Predicate expression tree (rule language as data).

Rule tables are built from these immutable nodes; the application layer
interprets them (PredicateEvaluator). Nodes carry no behavior beyond
structure so tables can be listed, validated and compared.

Builders at the bottom wrap plain Python values in Literal, so a rule reads
close to its source form:

    eq(resource("createdBy"), ACTOR)
    all_of(call("isTeacher", arg("classId")), contains(resource("teachers"), ACTOR))
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

COMPARISON_OPERATORS = frozenset({"==", "!=", "<", "<=", ">", ">="})


class Expr:
    """Base class for all expression nodes."""

    def children(self) -> tuple["Expr", ...]:
        return ()


# ---- Values ----


@dataclass(frozen=True)
class Literal(Expr):
    value: Any


@dataclass(frozen=True)
class ActorId(Expr):
    """Authenticated actor id (None when unauthenticated)."""


@dataclass(frozen=True)
class PathParam(Expr):
    """Value captured by a '{name}' wildcard of the matched pattern."""

    name: str


@dataclass(frozen=True)
class HelperParam(Expr):
    """Parameter of the enclosing helper definition."""

    name: str


@dataclass(frozen=True)
class ResourceField(Expr):
    """Field of the existing document ('resource.data.<field>')."""

    field: str


@dataclass(frozen=True)
class RequestField(Expr):
    """Field of the proposed document ('request.resource.data.<field>')."""

    field: str


@dataclass(frozen=True)
class LookupPath(Expr):
    """Target of get()/exists(): literal segments or expressions."""

    segments: tuple[str | Expr, ...]

    def children(self) -> tuple[Expr, ...]:
        return tuple(s for s in self.segments if isinstance(s, Expr))


@dataclass(frozen=True)
class DocumentField(Expr):
    """get(path).data.<field>; undefined when the document or field is missing."""

    path: LookupPath
    field: str

    def children(self) -> tuple[Expr, ...]:
        return (self.path,)


@dataclass(frozen=True)
class Size(Expr):
    value: Expr

    def children(self) -> tuple[Expr, ...]:
        return (self.value,)


# ---- Predicates ----


@dataclass(frozen=True)
class Compare(Expr):
    left: Expr
    operator: str
    right: Expr

    def __post_init__(self) -> None:
        if self.operator not in COMPARISON_OPERATORS:
            raise ValueError(f"Unknown comparison operator: {self.operator!r}")

    def children(self) -> tuple[Expr, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class In(Expr):
    """item in container (list/set/map keys)."""

    item: Expr
    container: Expr

    def children(self) -> tuple[Expr, ...]:
        return (self.item, self.container)


@dataclass(frozen=True)
class HasField(Expr):
    """'<field>' in resource.data (source='resource') or request.resource.data."""

    source: str
    field: str

    def __post_init__(self) -> None:
        if self.source not in ("resource", "request"):
            raise ValueError(f"Unknown document source: {self.source!r}")


@dataclass(frozen=True)
class IsNull(Expr):
    value: Expr

    def children(self) -> tuple[Expr, ...]:
        return (self.value,)


@dataclass(frozen=True)
class Exists(Expr):
    path: LookupPath

    def children(self) -> tuple[Expr, ...]:
        return (self.path,)


@dataclass(frozen=True)
class And(Expr):
    terms: tuple[Expr, ...]

    def children(self) -> tuple[Expr, ...]:
        return self.terms


@dataclass(frozen=True)
class Or(Expr):
    terms: tuple[Expr, ...]

    def children(self) -> tuple[Expr, ...]:
        return self.terms


@dataclass(frozen=True)
class Not(Expr):
    term: Expr

    def children(self) -> tuple[Expr, ...]:
        return (self.term,)


@dataclass(frozen=True)
class Call(Expr):
    """Invocation of a named helper predicate."""

    helper: str
    args: tuple[Expr, ...] = ()

    def children(self) -> tuple[Expr, ...]:
        return self.args


def iter_nodes(expr: Expr) -> Iterator[Expr]:
    """Yield expr and all descendants (depth-first, pre-order)."""
    yield expr
    for child in expr.children():
        yield from iter_nodes(child)


# ---- Builders ----

ACTOR = ActorId()


def _wrap(value: Any) -> Expr:
    return value if isinstance(value, Expr) else Literal(value)


def lit(value: Any) -> Literal:
    return Literal(value)


def param(name: str) -> PathParam:
    return PathParam(name)


def arg(name: str) -> HelperParam:
    return HelperParam(name)


def resource(field: str) -> ResourceField:
    return ResourceField(field)


def request(field: str) -> RequestField:
    return RequestField(field)


def doc(*segments: str | Expr) -> LookupPath:
    return LookupPath(tuple(segments))


def get_field(path: LookupPath, field: str) -> DocumentField:
    return DocumentField(path, field)


def size(value: Any) -> Size:
    return Size(_wrap(value))


def eq(left: Any, right: Any) -> Compare:
    return Compare(_wrap(left), "==", _wrap(right))


def ne(left: Any, right: Any) -> Compare:
    return Compare(_wrap(left), "!=", _wrap(right))


def le(left: Any, right: Any) -> Compare:
    return Compare(_wrap(left), "<=", _wrap(right))


def contains(container: Any, item: Any) -> In:
    return In(_wrap(item), _wrap(container))


def has(source: str, field: str) -> HasField:
    return HasField(source, field)


def is_null(value: Any) -> IsNull:
    return IsNull(_wrap(value))


def not_null(value: Any) -> Not:
    return Not(IsNull(_wrap(value)))


def exists(path: LookupPath) -> Exists:
    return Exists(path)


def all_of(*terms: Expr) -> And:
    return And(tuple(terms))


def any_of(*terms: Expr) -> Or:
    return Or(tuple(terms))


def not_(term: Expr) -> Not:
    return Not(term)


def call(helper: str, *args: Any) -> Call:
    return Call(helper, tuple(_wrap(a) for a in args))
