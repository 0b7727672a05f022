import pytest

from src.core.models import ConditionOperator, LogicalOperator
from src.core.rules import compile_condition
from tests.factories import condition, group

AMOUNT = {"var": "amount"}


@pytest.mark.parametrize(
    ("operator", "symbol"),
    [
        (ConditionOperator.EQUALS, "=="),
        (ConditionOperator.NOT_EQUALS, "!="),
        (ConditionOperator.GREATER_THAN, ">"),
        (ConditionOperator.LESS_THAN, "<"),
        (ConditionOperator.GREATER_THAN_OR_EQUALS, ">="),
        (ConditionOperator.LESS_THAN_OR_EQUALS, "<="),
    ],
)
def test_comparison_operators_compile_to_binary_expressions(operator, symbol):
    assert compile_condition(condition("amount", operator, 10)) == {symbol: [AMOUNT, 10]}


def test_contains_checks_value_inside_field():
    expression = compile_condition(condition("counterparty", ConditionOperator.CONTAINS, "Bank"))
    assert expression == {"in": ["Bank", {"var": "counterparty"}]}


def test_not_contains_wraps_membership_in_not():
    expression = compile_condition(
        condition("counterparty", ConditionOperator.NOT_CONTAINS, "Bank")
    )
    assert expression == {"!": {"in": ["Bank", {"var": "counterparty"}]}}


def test_in_and_not_in_check_field_inside_value():
    options = ["fx", "commodity"]
    assert compile_condition(condition("hedge_type", ConditionOperator.IN, options)) == {
        "in": [{"var": "hedge_type"}, options]
    }
    assert compile_condition(condition("hedge_type", ConditionOperator.NOT_IN, options)) == {
        "!": {"in": [{"var": "hedge_type"}, options]}
    }


def test_string_prefix_and_suffix_operators():
    assert compile_condition(condition("hedge_id", ConditionOperator.STARTS_WITH, "HG")) == {
        "startsWith": [{"var": "hedge_id"}, "HG"]
    }
    assert compile_condition(condition("hedge_id", ConditionOperator.ENDS_WITH, "-01")) == {
        "endsWith": [{"var": "hedge_id"}, "-01"]
    }


def test_between_expands_to_inclusive_range():
    expression = compile_condition(condition("amount", ConditionOperator.BETWEEN, [100, 200]))
    assert expression == {"and": [{">=": [AMOUNT, 100]}, {"<=": [AMOUNT, 200]}]}


@pytest.mark.parametrize("value", [[100], [1, 2, 3], "100-200", None])
def test_malformed_between_falls_back_to_equality(value):
    expression = compile_condition(condition("amount", ConditionOperator.BETWEEN, value))
    assert expression == {"==": [AMOUNT, value]}


def test_negated_leaf_is_wrapped_in_not():
    expression = compile_condition(
        condition("amount", ConditionOperator.GREATER_THAN, 5, negated=True)
    )
    assert expression == {"!": {">": [AMOUNT, 5]}}


def test_empty_group_compiles_to_true():
    assert compile_condition(group()) is True
    assert compile_condition(group(operator=LogicalOperator.OR)) is True


def test_nested_groups_keep_child_order_and_operators():
    tree = group(
        condition("status", ConditionOperator.EQUALS, "active", condition_id="c1"),
        group(
            condition("amount", ConditionOperator.GREATER_THAN, 10, condition_id="c2"),
            condition("amount", ConditionOperator.LESS_THAN, 5, condition_id="c3"),
            operator=LogicalOperator.OR,
            group_id="g2",
        ),
    )

    assert compile_condition(tree) == {
        "and": [
            {"==": [{"var": "status"}, "active"]},
            {"or": [{">": [AMOUNT, 10]}, {"<": [AMOUNT, 5]}]},
        ]
    }


def test_negation_is_not_applied_to_groups():
    tree = group(condition("amount", ConditionOperator.EQUALS, 1, negated=True))
    assert compile_condition(tree) == {"and": [{"!": {"==": [AMOUNT, 1]}}]}
