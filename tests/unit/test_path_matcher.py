"""Tests for PathMatcher (segment trie, literal before wildcard, exact depth)."""

import pytest

from taskmaster.application.rules.current import build_current_table
from taskmaster.application.services.path_matcher import PathMatcher
from taskmaster.domain.entities.rule import RuleBlock, grant
from taskmaster.domain.enums import Operation
from taskmaster.domain.exceptions import RuleDefinitionException
from taskmaster.domain.expressions import lit
from taskmaster.domain.value_objects.core import DocumentPath, PathPattern


def _block(pattern: str) -> RuleBlock:
    return RuleBlock(PathPattern(pattern), (grant(pattern, Operation.READ, lit(True)),))


@pytest.fixture
def matcher() -> PathMatcher:
    return PathMatcher(
        [
            _block("classes/{classId}"),
            _block("classes/{classId}/members/{memberId}"),
            _block("classes/{classId}/members/self"),
            _block("classes/archive/members/{memberId}"),
        ]
    )


def test_wildcards_capture_values(matcher: PathMatcher) -> None:
    match = matcher.match(DocumentPath.parse("classes/c1/members/u1"))
    assert match is not None
    assert match.block.pattern.value == "classes/{classId}/members/{memberId}"
    assert match.params == {"classId": "c1", "memberId": "u1"}


def test_literal_preferred_over_wildcard(matcher: PathMatcher) -> None:
    match = matcher.match(DocumentPath.parse("classes/c1/members/self"))
    assert match.block.pattern.value == "classes/{classId}/members/self"
    assert match.params == {"classId": "c1"}


def test_backtracks_from_dead_literal_branch(matcher: PathMatcher) -> None:
    """classes/archive has no block of its own, so the wildcard branch applies."""
    match = matcher.match(DocumentPath.parse("classes/archive"))
    assert match.block.pattern.value == "classes/{classId}"
    assert match.params == {"classId": "archive"}


def test_literal_branch_used_when_it_matches(matcher: PathMatcher) -> None:
    match = matcher.match(DocumentPath.parse("classes/archive/members/u9"))
    assert match.block.pattern.value == "classes/archive/members/{memberId}"
    assert match.params == {"memberId": "u9"}


def test_no_inheritance_into_subcollections(matcher: PathMatcher) -> None:
    """A block never applies to deeper documents."""
    assert matcher.match(DocumentPath.parse("classes/c1/members/u1/notes/n1")) is None


def test_unknown_collection_is_no_match(matcher: PathMatcher) -> None:
    assert matcher.match(DocumentPath.parse("schools/s1")) is None


def test_conflicting_wildcard_names_rejected() -> None:
    with pytest.raises(RuleDefinitionException, match="conflicts"):
        PathMatcher([_block("classes/{classId}"), _block("classes/{id}/members/{m}")])


def test_duplicate_block_rejected() -> None:
    with pytest.raises(RuleDefinitionException, match="Duplicate"):
        PathMatcher([_block("users/{userId}"), _block("users/{userId}")])


def test_current_table_routes_every_collection() -> None:
    """Every class-scoped and user path of the current table resolves."""
    matcher = PathMatcher(build_current_table().blocks)
    paths = {
        "classes/c1": "classes/{classId}",
        "classes/c1/members/u1": "classes/{classId}/members/{memberId}",
        "classes/c1/subjects/s1": "classes/{classId}/subjects/{subjectId}",
        "classes/c1/assignments/a1": "classes/{classId}/assignments/{assignmentId}",
        "classes/c1/assignments/a1/comments/k1": (
            "classes/{classId}/assignments/{assignmentId}/comments/{commentId}"
        ),
        "classes/c1/experience/e1": "classes/{classId}/experience/{entryId}",
        "classes/c1/aiMaterials/m1": "classes/{classId}/aiMaterials/{materialId}",
        "classes/c1/gallery/g1": "classes/{classId}/gallery/{itemId}",
        "classes/c1/albums/al1": "classes/{classId}/albums/{itemId}",
        "classes/c1/featuredImages/f1": "classes/{classId}/featuredImages/{itemId}",
        "classes/c1/galleryApprovals/p1": "classes/{classId}/galleryApprovals/{approvalId}",
        "classes/c1/completionApprovals/p1": (
            "classes/{classId}/completionApprovals/{approvalId}"
        ),
        "users/u1": "users/{userId}",
        "users/u1/completedAssignments/x1": (
            "users/{userId}/completedAssignments/{completionId}"
        ),
    }
    for raw, pattern in paths.items():
        match = matcher.match(DocumentPath.parse(raw))
        assert match is not None, raw
        assert match.block.pattern.value == pattern
