"""Rule condition compilation and evaluation."""

from src.core.rules.conditions import LogicExpr, compile_condition
from src.core.rules.evaluator import RuleEvaluator, build_rule_evaluator, evaluate_rule
from src.core.rules.predicates import (
    JsonLogicPredicateEngine,
    PredicateEngine,
    PredicateEngineProvider,
    get_predicate_engine_provider,
)

__all__ = [
    "LogicExpr",
    "compile_condition",
    "RuleEvaluator",
    "build_rule_evaluator",
    "evaluate_rule",
    "JsonLogicPredicateEngine",
    "PredicateEngine",
    "PredicateEngineProvider",
    "get_predicate_engine_provider",
]
