"""
FILE: src/core/rules/evaluator.py
Decides whether a rule matches a simulation context.
"""

import logging
from typing import Any, Mapping, Optional

from src.core.models import Rule, RuleStatus
from src.core.rules.conditions import compile_condition
from src.core.rules.predicates import (
    PredicateEngine,
    PredicateEngineProvider,
    get_predicate_engine_provider,
)

logger = logging.getLogger(__name__)


class RuleEvaluator:
    """Evaluates active rules through a ready predicate engine.

    Inactive and draft rules never match. A missing engine or a failing
    expression makes the rule not match; neither aborts the caller.
    """

    def __init__(self, *, engine: Optional[PredicateEngine]) -> None:
        self._engine = engine

    @property
    def engine_available(self) -> bool:
        return self._engine is not None

    async def evaluate_rule(self, rule: Rule, context: Mapping[str, Any]) -> bool:
        if rule.status != RuleStatus.ACTIVE:
            return False

        if self._engine is None:
            logger.error("Predicate engine unavailable. Rule=%s evaluated as not matching", rule.id)
            return False

        try:
            expression = compile_condition(rule.conditions)
            return bool(self._engine.apply(expression, context))
        except Exception:
            logger.exception("Rule evaluation failed. Rule=%s", rule.id)
            return False


async def build_rule_evaluator(provider: Optional[PredicateEngineProvider] = None) -> RuleEvaluator:
    engine_provider = provider or get_predicate_engine_provider()
    return RuleEvaluator(engine=await engine_provider.load())


async def evaluate_rule(rule: Rule, context: Mapping[str, Any]) -> bool:
    evaluator = await build_rule_evaluator()
    return await evaluator.evaluate_rule(rule, context)
