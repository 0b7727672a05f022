"""
FILE: src/core/rules/conditions.py
Compiles rule condition trees into JSON-logic expressions.
"""

from typing import Any, Union

from src.core.models import ConditionOperator, RuleCondition, RuleConditionGroup

LogicExpr = Union[bool, dict[str, Any]]

_COMPARISON_OPERATORS: dict[ConditionOperator, str] = {
    ConditionOperator.EQUALS: "==",
    ConditionOperator.NOT_EQUALS: "!=",
    ConditionOperator.GREATER_THAN: ">",
    ConditionOperator.LESS_THAN: "<",
    ConditionOperator.GREATER_THAN_OR_EQUALS: ">=",
    ConditionOperator.LESS_THAN_OR_EQUALS: "<=",
}


def compile_condition(node: Union[RuleCondition, RuleConditionGroup]) -> LogicExpr:
    """Compile a condition group or leaf into a JSON-logic expression.

    An empty group compiles to ``True`` so that it never blocks a rule.
    Negation is applied to leaves only.
    """
    if isinstance(node, RuleConditionGroup):
        return _compile_group(node)
    return _compile_leaf(node)


def _compile_group(group: RuleConditionGroup) -> LogicExpr:
    if not group.conditions:
        return True
    return {group.operator.value: [compile_condition(child) for child in group.conditions]}


def _compile_leaf(condition: RuleCondition) -> LogicExpr:
    expression = _compile_comparison(condition.operator, {"var": condition.field}, condition.value)
    if condition.negated:
        return {"!": expression}
    return expression


def _compile_comparison(operator: Any, field_ref: dict[str, Any], value: Any) -> dict[str, Any]:
    comparison = _COMPARISON_OPERATORS.get(operator)
    if comparison is not None:
        return {comparison: [field_ref, value]}

    if operator == ConditionOperator.CONTAINS:
        return {"in": [value, field_ref]}
    if operator == ConditionOperator.NOT_CONTAINS:
        return {"!": {"in": [value, field_ref]}}
    if operator == ConditionOperator.IN:
        return {"in": [field_ref, value]}
    if operator == ConditionOperator.NOT_IN:
        return {"!": {"in": [field_ref, value]}}
    if operator == ConditionOperator.STARTS_WITH:
        return {"startsWith": [field_ref, value]}
    if operator == ConditionOperator.ENDS_WITH:
        return {"endsWith": [field_ref, value]}
    if operator == ConditionOperator.BETWEEN and _is_range_pair(value):
        lower, upper = value
        return {"and": [{">=": [field_ref, lower]}, {"<=": [field_ref, upper]}]}

    # Malformed between pairs and unknown operators degrade to equality.
    return {"==": [field_ref, value]}


def _is_range_pair(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) == 2
