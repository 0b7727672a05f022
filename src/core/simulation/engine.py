"""
FILE: src/core/simulation/engine.py
What-if simulation orchestration over a stage's rules.
"""

import logging
from copy import deepcopy
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from pydantic import ValidationError

from src.core.models import (
    HedgeEntity,
    Rule,
    RulePriority,
    SimulationOutput,
    TraceEntry,
    utc_now,
)
from src.core.rules.evaluator import RuleEvaluator, build_rule_evaluator
from src.core.simulation.actions import SimulationState, apply_action
from src.core.simulation.allocation import allocate

logger = logging.getLogger(__name__)

PRIORITY_RANK: dict[RulePriority, int] = {
    RulePriority.HIGH: 1,
    RulePriority.MEDIUM: 2,
    RulePriority.LOW: 3,
}

DEFAULT_STATUS = "Approved"


def sort_rules_by_priority(rules: Sequence[Rule]) -> list[Rule]:
    # sorted() is stable: equal priorities keep their input order.
    return sorted(rules, key=lambda rule: PRIORITY_RANK[rule.priority])


def build_initial_state(simulation_input: Mapping[str, Any]) -> SimulationState:
    return {
        "input": simulation_input,
        "entities": simulation_input.get("entities") or [],
        "status": DEFAULT_STATUS,
        "reason": "",
        "action": "",
        "calculated_fields": {},
        "halt_processing": False,
    }


async def run_simulation(
    rules: Sequence[Rule],
    simulation_input: Mapping[str, Any],
    *,
    evaluator: Optional[RuleEvaluator] = None,
    now: Callable[[], datetime] = utc_now,
) -> SimulationOutput:
    """Run ``rules`` in priority order against a copy of ``simulation_input``.

    Each rule sees the state left behind by the rules before it. A
    haltProcessing action stops the remaining actions of its rule and every
    later rule. Allocation always runs on the final entity list.
    """
    if evaluator is None:
        evaluator = await build_rule_evaluator()

    run_input = deepcopy(dict(simulation_input))
    state = build_initial_state(run_input)
    trace: list[TraceEntry] = []

    for rule in sort_rules_by_priority(rules):
        if state.get("halt_processing"):
            logger.debug("Simulation halted. Skipping remaining rules from Rule=%s", rule.id)
            break

        input_state = deepcopy(state)
        matched = await evaluator.evaluate_rule(rule, state)
        if matched:
            for action in rule.actions:
                apply_action(action, state, now=now)
                if state.get("halt_processing"):
                    break

        trace.append(
            TraceEntry(
                rule_id=rule.id,
                rule_name=rule.name,
                condition_evaluation=matched,
                actions_executed=list(rule.actions) if matched else [],
                input_state=input_state,
                output_state=deepcopy(state),
                timestamp=now(),
            )
        )

    entity_allocations = allocate(
        _valid_entities(state.get("entities")), run_input.get("hedge_amount")
    )
    logger.info(
        "Simulation completed. Rules=%s Traced=%s Halted=%s Status=%s",
        len(rules),
        len(trace),
        bool(state.get("halt_processing")),
        state.get("status"),
    )
    return SimulationOutput(
        status=_as_text(state.get("status")),
        reason=_as_text(state.get("reason")),
        action=_as_text(state.get("action")),
        trace=trace,
        entity_allocations=entity_allocations,
        calculated_fields=_as_mapping(state.get("calculated_fields")),
    )


def _valid_entities(entities: Any) -> list[HedgeEntity]:
    if not isinstance(entities, list):
        return []
    valid: list[HedgeEntity] = []
    for index, entity in enumerate(entities):
        try:
            valid.append(
                entity if isinstance(entity, HedgeEntity) else HedgeEntity.model_validate(entity)
            )
        except ValidationError:
            logger.warning("Skipping invalid hedge entity at position %s", index)
    return valid


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_mapping(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}
