"""Application services: path matching, predicate evaluation, decision orchestration."""

from taskmaster.application.services.access_decision_service import AccessDecisionService
from taskmaster.application.services.evaluation_context import EvaluationContext
from taskmaster.application.services.path_matcher import PathMatch, PathMatcher
from taskmaster.application.services.predicate_evaluator import PredicateEvaluator

__all__ = [
    "AccessDecisionService",
    "EvaluationContext",
    "PathMatch",
    "PathMatcher",
    "PredicateEvaluator",
]
