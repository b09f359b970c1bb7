"""Interprets predicate expression trees against an EvaluationContext.

Semantics:
- and/or short-circuit left to right; operands must be booleans.
- A missing document, a missing field, null in 'in'/'size'/ordering, or a
  malformed lookup target makes the value undefined. Undefined propagates
  to the enclosing grant, which then evaluates false (fail closed).
- Helpers are evaluated with their own parameter scope; path parameters are
  only visible to grants, helpers receive them as arguments.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from taskmaster.application.services.evaluation_context import (
    EvaluationContext,
    UndefinedValueError,
)
from taskmaster.domain.entities.rule import HelperDefinition
from taskmaster.domain.exceptions import MalformedPathException
from taskmaster.domain.expressions import (
    ActorId,
    And,
    Call,
    Compare,
    DocumentField,
    Exists,
    Expr,
    HasField,
    HelperParam,
    In,
    IsNull,
    Literal,
    LookupPath,
    Not,
    Or,
    PathParam,
    RequestField,
    ResourceField,
    Size,
)
from taskmaster.domain.value_objects.core import DocumentPath

logger = logging.getLogger(__name__)

_ORDERING = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

Scope = Mapping[str, Any]


def _read_field(data: dict[str, Any] | None, field: str, source: str) -> Any:
    """Return data[field] (dotted names walk nested maps); undefined if absent."""
    if data is None:
        raise UndefinedValueError(f"{source} is absent")
    value: Any = data
    for part in field.split("."):
        if not isinstance(value, dict) or part not in value:
            raise UndefinedValueError(f"{source}.{field} is undefined")
        value = value[part]
    return value


def _as_bool(value: Any, what: str) -> bool:
    if not isinstance(value, bool):
        raise UndefinedValueError(f"{what} operand is not a boolean: {value!r}")
    return value


class PredicateEvaluator:
    """Evaluates grant conditions; helpers come from the rule table being applied."""

    def __init__(self, helpers: Mapping[str, HelperDefinition]) -> None:
        self._helpers = helpers
        self._handlers: dict[
            type, Callable[[Any, EvaluationContext, Scope], Awaitable[Any]]
        ] = {
            Literal: self._literal,
            ActorId: self._actor,
            PathParam: self._path_param,
            HelperParam: self._helper_param,
            ResourceField: self._resource_field,
            RequestField: self._request_field,
            DocumentField: self._document_field,
            Size: self._size,
            Compare: self._compare,
            In: self._in,
            HasField: self._has_field,
            IsNull: self._is_null,
            Exists: self._exists,
            And: self._and,
            Or: self._or,
            Not: self._not,
            Call: self._call,
        }

    async def check(self, condition: Expr, ctx: EvaluationContext) -> bool:
        """Return True only if condition evaluates to exactly True.

        Undefined values and malformed lookup targets yield False; they are
        never propagated to the caller.
        """
        try:
            result = await self.evaluate(condition, ctx)
        except UndefinedValueError as e:
            logger.debug("Predicate undefined: %s", e)
            return False
        except MalformedPathException as e:
            logger.debug("Malformed lookup target: %s", e.message)
            return False
        return result is True

    async def evaluate(
        self, expr: Expr, ctx: EvaluationContext, scope: Scope | None = None
    ) -> Any:
        """Return the value of expr (raises UndefinedValueError when undefined)."""
        handler = self._handlers.get(type(expr))
        if handler is None:
            raise TypeError(f"Unsupported expression node: {type(expr).__name__}")
        return await handler(expr, ctx, scope or {})

    # ---- values ----

    async def _literal(self, expr: Literal, ctx: EvaluationContext, scope: Scope) -> Any:
        return expr.value

    async def _actor(self, expr: ActorId, ctx: EvaluationContext, scope: Scope) -> Any:
        return ctx.actor_id

    async def _path_param(
        self, expr: PathParam, ctx: EvaluationContext, scope: Scope
    ) -> Any:
        if expr.name not in ctx.params:
            raise UndefinedValueError(f"path parameter {expr.name!r} is not bound")
        return ctx.params[expr.name]

    async def _helper_param(
        self, expr: HelperParam, ctx: EvaluationContext, scope: Scope
    ) -> Any:
        if expr.name not in scope:
            raise UndefinedValueError(f"helper parameter {expr.name!r} is not bound")
        return scope[expr.name]

    async def _resource_field(
        self, expr: ResourceField, ctx: EvaluationContext, scope: Scope
    ) -> Any:
        return _read_field(ctx.existing, expr.field, "resource")

    async def _request_field(
        self, expr: RequestField, ctx: EvaluationContext, scope: Scope
    ) -> Any:
        return _read_field(ctx.proposed, expr.field, "request.resource")

    async def _resolve_path(
        self, path: LookupPath, ctx: EvaluationContext, scope: Scope
    ) -> DocumentPath:
        segments: list[object] = []
        for segment in path.segments:
            if isinstance(segment, Expr):
                segments.append(await self.evaluate(segment, ctx, scope))
            else:
                segments.append(segment)
        return DocumentPath.from_segments(segments)

    async def _document_field(
        self, expr: DocumentField, ctx: EvaluationContext, scope: Scope
    ) -> Any:
        target = await self._resolve_path(expr.path, ctx, scope)
        data = await ctx.get(target)
        return _read_field(data, expr.field, f"get({target})")

    async def _size(self, expr: Size, ctx: EvaluationContext, scope: Scope) -> Any:
        value = await self.evaluate(expr.value, ctx, scope)
        if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
            return len(value)
        raise UndefinedValueError(f"size() of {type(value).__name__}")

    # ---- predicates ----

    async def _compare(
        self, expr: Compare, ctx: EvaluationContext, scope: Scope
    ) -> bool:
        left = await self.evaluate(expr.left, ctx, scope)
        right = await self.evaluate(expr.right, ctx, scope)
        if expr.operator == "==":
            return left == right
        if expr.operator == "!=":
            return left != right
        if left is None or right is None:
            raise UndefinedValueError(f"null operand for {expr.operator}")
        try:
            return bool(_ORDERING[expr.operator](left, right))
        except TypeError as e:
            raise UndefinedValueError(str(e)) from None

    async def _in(self, expr: In, ctx: EvaluationContext, scope: Scope) -> bool:
        container = await self.evaluate(expr.container, ctx, scope)
        if not isinstance(container, (list, tuple, set, frozenset, dict)):
            raise UndefinedValueError(
                f"'in' needs a list or map, got {type(container).__name__}"
            )
        item = await self.evaluate(expr.item, ctx, scope)
        try:
            return item in container
        except TypeError as e:
            raise UndefinedValueError(str(e)) from None

    async def _has_field(
        self, expr: HasField, ctx: EvaluationContext, scope: Scope
    ) -> bool:
        data = ctx.existing if expr.source == "resource" else ctx.proposed
        if data is None:
            raise UndefinedValueError(f"{expr.source} is absent")
        return expr.field in data

    async def _is_null(self, expr: IsNull, ctx: EvaluationContext, scope: Scope) -> bool:
        return await self.evaluate(expr.value, ctx, scope) is None

    async def _exists(self, expr: Exists, ctx: EvaluationContext, scope: Scope) -> bool:
        target = await self._resolve_path(expr.path, ctx, scope)
        return await ctx.exists(target)

    async def _and(self, expr: And, ctx: EvaluationContext, scope: Scope) -> bool:
        for term in expr.terms:
            if not _as_bool(await self.evaluate(term, ctx, scope), "&&"):
                return False
        return True

    async def _or(self, expr: Or, ctx: EvaluationContext, scope: Scope) -> bool:
        for term in expr.terms:
            if _as_bool(await self.evaluate(term, ctx, scope), "||"):
                return True
        return False

    async def _not(self, expr: Not, ctx: EvaluationContext, scope: Scope) -> bool:
        return not _as_bool(await self.evaluate(expr.term, ctx, scope), "!")

    async def _call(self, expr: Call, ctx: EvaluationContext, scope: Scope) -> Any:
        helper = self._helpers.get(expr.helper)
        if helper is None:
            raise UndefinedValueError(f"unknown helper {expr.helper!r}")
        values = [await self.evaluate(a, ctx, scope) for a in expr.args]
        return await self.evaluate(helper.body, ctx, dict(zip(helper.params, values)))
