"""
FILE: src/core/lifecycle/rule_catalog.py
Rule authoring helpers, validation and the stand-alone rule catalog.
"""

import logging
import uuid
from typing import Any, Awaitable, Callable, Mapping, Optional

from src.core.lifecycle.errors import RuleNotFoundError, RuleValidationError
from src.core.lifecycle.fields import FieldCatalog
from src.core.lifecycle.repository import LifecycleRepository
from src.core.models import (
    ActionType,
    ConditionOperator,
    FieldType,
    LogicalOperator,
    Rule,
    RuleAction,
    RuleCondition,
    RuleConditionGroup,
    RulePriority,
    RuleStatus,
    RuleValidationResult,
    utc_now,
)
from src.core.rules.evaluator import RuleEvaluator, build_rule_evaluator

logger = logging.getLogger(__name__)

EvaluatorFactory = Callable[[], Awaitable[RuleEvaluator]]


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def validate_rule(rule: Rule) -> RuleValidationResult:
    errors: list[str] = []
    if not rule.name or not rule.name.strip():
        errors.append("Rule name is required")
    if not rule.conditions.conditions:
        errors.append("At least one condition is required")
    if not rule.actions:
        errors.append("At least one action is required")
    return RuleValidationResult(is_valid=not errors, errors=errors)


class RuleCatalogService:
    def __init__(
        self,
        *,
        repository: LifecycleRepository,
        field_catalog: Optional[FieldCatalog] = None,
        evaluator_factory: EvaluatorFactory = build_rule_evaluator,
        require_valid_active_rules: bool = True,
    ) -> None:
        self._repository = repository
        self._field_catalog = field_catalog or FieldCatalog()
        self._evaluator_factory = evaluator_factory
        self._require_valid_active_rules = require_valid_active_rules

    @property
    def field_catalog(self) -> FieldCatalog:
        return self._field_catalog

    def create_condition(
        self, field: str, operator: ConditionOperator, value: Any
    ) -> RuleCondition:
        definition = self._field_catalog.get_field_definition(field)
        return RuleCondition(
            id=generate_id("cond"),
            field=field,
            operator=operator,
            value=value,
            value_type=definition.type if definition is not None else FieldType.STRING,
        )

    def create_condition_group(
        self, operator: LogicalOperator = LogicalOperator.AND
    ) -> RuleConditionGroup:
        return RuleConditionGroup(id=generate_id("grp"), operator=operator, conditions=[])

    def create_action(self, action_type: ActionType, **params: Any) -> RuleAction:
        return RuleAction(id=generate_id("act"), type=action_type, **params)

    def create_rule(self, name: str) -> Rule:
        now = utc_now()
        return Rule(
            id=generate_id("rule"),
            name=name,
            description="",
            conditions=self.create_condition_group(),
            actions=[],
            status=RuleStatus.DRAFT,
            priority=RulePriority.MEDIUM,
            created_at=now,
            updated_at=now,
            tags=[],
        )

    def validate_rule(self, rule: Rule) -> RuleValidationResult:
        return validate_rule(rule)

    def ensure_publishable(self, rule: Rule) -> None:
        """Reject active rules that would not validate; drafts are stored as-is."""
        if not self._require_valid_active_rules or rule.status != RuleStatus.ACTIVE:
            return
        result = validate_rule(rule)
        if not result.is_valid:
            raise RuleValidationError(result.errors)

    def list_rules(self) -> list[Rule]:
        return self._repository.list_rules()

    def get_rule(self, *, rule_id: str) -> Rule:
        rule = self._repository.get_rule(rule_id=rule_id)
        if rule is None:
            raise RuleNotFoundError("RULE_NOT_FOUND")
        return rule

    def add_rule(self, rule: Rule) -> Rule:
        self.ensure_publishable(rule)
        self._repository.save_rule(rule)
        logger.info("Rule added. Rule=%s Status=%s", rule.id, rule.status.value)
        return rule

    def update_rule(self, rule: Rule) -> Rule:
        self.get_rule(rule_id=rule.id)
        self.ensure_publishable(rule)
        updated = rule.model_copy(update={"updated_at": utc_now()})
        self._repository.save_rule(updated)
        return updated

    def delete_rule(self, *, rule_id: str) -> None:
        if not self._repository.delete_rule(rule_id=rule_id):
            raise RuleNotFoundError("RULE_NOT_FOUND")

    async def evaluate_rule(self, rule: Rule, context: Mapping[str, Any]) -> bool:
        evaluator = await self._evaluator_factory()
        return await evaluator.evaluate_rule(rule, context)

    async def execute_rule(self, rule: Rule, context: Mapping[str, Any]) -> list[RuleAction]:
        """Return the actions a match would run. Nothing is applied here."""
        if not await self.evaluate_rule(rule, context):
            return []
        return list(rule.actions)
