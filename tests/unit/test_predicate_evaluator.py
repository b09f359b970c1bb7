"""Tests for PredicateEvaluator and EvaluationContext (fail-closed semantics)."""

import pytest

from taskmaster.application.services.evaluation_context import (
    EvaluationContext,
    LookupLimitExceeded,
    UndefinedValueError,
)
from taskmaster.application.services.predicate_evaluator import PredicateEvaluator
from taskmaster.domain.entities.rule import HelperDefinition
from taskmaster.domain.expressions import (
    ACTOR,
    Compare,
    all_of,
    any_of,
    arg,
    call,
    contains,
    doc,
    eq,
    exists,
    get_field,
    has,
    is_null,
    le,
    lit,
    not_,
    param,
    request,
    resource,
    size,
)
from taskmaster.domain.value_objects.core import DocumentPath
from taskmaster.infrastructure.memory import InMemoryDocumentStore

OWNS = HelperDefinition(
    "owns",
    ("classId",),
    eq(get_field(doc("classes", arg("classId")), "createdBy"), ACTOR),
)


class CountingStore(InMemoryDocumentStore):
    """Counts snapshot reads so memoization is observable."""

    def __init__(self, documents) -> None:
        super().__init__(documents)
        self.reads = 0

    async def snapshot(self):
        snapshot = await super().snapshot()
        original = snapshot.get_document

        async def counted(path):
            self.reads += 1
            return await original(path)

        snapshot.get_document = counted
        return snapshot


@pytest.fixture
def store() -> CountingStore:
    return CountingStore(
        {
            "classes/c1": {"createdBy": "owner", "meta": {"level": 3}},
            "classes/c2": {"createdBy": "someone"},
        }
    )


@pytest.fixture
def evaluator() -> PredicateEvaluator:
    return PredicateEvaluator({OWNS.name: OWNS})


async def _ctx(store, actor="owner", **kwargs) -> EvaluationContext:
    return EvaluationContext(actor_id=actor, snapshot=await store.snapshot(), **kwargs)


async def test_literal_true_and_non_boolean(evaluator, store) -> None:
    """check() is true only for exactly True."""
    ctx = await _ctx(store)
    assert await evaluator.check(lit(True), ctx) is True
    assert await evaluator.check(lit("yes"), ctx) is False


async def test_helper_call_and_lookup(evaluator, store) -> None:
    ctx = await _ctx(store, params={"classId": "c1"})
    assert await evaluator.check(call("owns", param("classId")), ctx)
    assert not await evaluator.check(call("owns", "c2"), ctx)


async def test_missing_document_field_is_false(evaluator, store) -> None:
    """get() of a missing document is undefined and folds to false."""
    ctx = await _ctx(store)
    assert await evaluator.check(call("owns", "missing"), ctx) is False


async def test_negation_of_undefined_is_still_false(evaluator, store) -> None:
    """Undefined poisons the whole grant; !undefined is not true."""
    ctx = await _ctx(store)
    assert await evaluator.check(not_(call("owns", "missing")), ctx) is False


async def test_malformed_lookup_target_is_false(evaluator, store) -> None:
    """A lookup with an empty or slash-containing id never raises."""
    ctx = await _ctx(store)
    assert await evaluator.check(call("owns", ""), ctx) is False
    assert await evaluator.check(call("owns", "c1/members/x"), ctx) is False
    assert await evaluator.check(exists(doc("classes", resource("classId"))), ctx) is False


async def test_or_short_circuits_before_undefined(evaluator, store) -> None:
    ctx = await _ctx(store)
    assert await evaluator.check(any_of(lit(True), call("owns", "missing")), ctx)
    assert not await evaluator.check(all_of(lit(False), call("owns", "missing")), ctx)
    assert store.reads == 0


async def test_or_after_undefined_is_false(evaluator, store) -> None:
    """Left-to-right: an undefined left operand ends evaluation."""
    ctx = await _ctx(store)
    assert not await evaluator.check(any_of(call("owns", "missing"), lit(True)), ctx)


async def test_null_ordering_is_undefined(evaluator, store) -> None:
    ctx = await _ctx(store, proposed={"count": None})
    with pytest.raises(UndefinedValueError):
        await evaluator.evaluate(le(request("count"), 5), ctx)
    assert await evaluator.check(le(request("count"), 5), ctx) is False


async def test_mixed_type_ordering_is_undefined(evaluator, store) -> None:
    ctx = await _ctx(store)
    assert await evaluator.check(Compare(lit("a"), "<", lit(1)), ctx) is False


async def test_in_requires_collection(evaluator, store) -> None:
    ctx = await _ctx(store, existing={"teachers": None, "ids": ["owner"]})
    assert await evaluator.check(contains(resource("ids"), ACTOR), ctx)
    assert await evaluator.check(contains(resource("teachers"), ACTOR), ctx) is False


async def test_equality_with_null_is_defined(evaluator, store) -> None:
    ctx = await _ctx(store, existing={"approvedBy": None})
    assert not await evaluator.check(eq(resource("approvedBy"), ACTOR), ctx)
    assert await evaluator.check(is_null(resource("approvedBy")), ctx)


async def test_dotted_fields_walk_maps(evaluator, store) -> None:
    ctx = await _ctx(store)
    expr = eq(get_field(doc("classes", "c1"), "meta.level"), 3)
    assert await evaluator.check(expr, ctx)


async def test_has_field_and_size(evaluator, store) -> None:
    ctx = await _ctx(store, proposed={"photo": "abcd"})
    assert await evaluator.check(has("request", "photo"), ctx)
    assert not await evaluator.check(has("request", "other"), ctx)
    assert await evaluator.check(eq(size(request("photo")), 4), ctx)
    assert await evaluator.check(has("resource", "photo"), ctx) is False


async def test_lookups_are_memoized_per_context(evaluator, store) -> None:
    ctx = await _ctx(store)
    expr = all_of(call("owns", "c1"), call("owns", "c1"), exists(doc("classes", "c1")))
    assert await evaluator.check(expr, ctx)
    assert store.reads == 1
    assert ctx.lookup_count == 1


async def test_preloaded_documents_win_over_snapshot(evaluator, store) -> None:
    """A preloaded target is served as given and never read or counted."""
    ctx = await _ctx(
        store, preloaded={DocumentPath.parse("classes/c1"): {"createdBy": "other"}}
    )
    assert not await evaluator.check(call("owns", "c1"), ctx)
    assert store.reads == 0
    assert ctx.lookup_count == 0


async def test_missing_documents_are_memoized_too(evaluator, store) -> None:
    ctx = await _ctx(store)
    assert not await evaluator.check(exists(doc("classes", "nope")), ctx)
    assert not await evaluator.check(exists(doc("classes", "nope")), ctx)
    assert store.reads == 1


async def test_lookup_limit(evaluator, store) -> None:
    """Distinct lookups beyond max_lookups are undefined (false)."""
    ctx = await _ctx(store, max_lookups=1)
    assert await evaluator.check(call("owns", "c1"), ctx)
    with pytest.raises(LookupLimitExceeded):
        await evaluator.evaluate(call("owns", "c2"), ctx)
    assert await evaluator.check(call("owns", "c2"), ctx) is False
    assert await evaluator.check(call("owns", "c1"), ctx) is True


async def test_unknown_helper_is_false(store) -> None:
    ctx = await _ctx(store)
    assert await PredicateEvaluator({}).check(call("owns", "c1"), ctx) is False


async def test_unbound_path_parameter_is_false(evaluator, store) -> None:
    ctx = await _ctx(store)
    assert await evaluator.check(eq(param("classId"), "c1"), ctx) is False
