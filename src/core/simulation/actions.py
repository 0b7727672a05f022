"""
FILE: src/core/simulation/actions.py
Applies rule actions to a mutable simulation state.
"""

from datetime import datetime
from typing import Any, Callable, MutableMapping, Optional

from src.core.models import ActionType, RuleAction, utc_now

SimulationState = MutableMapping[str, Any]


def apply_action(
    action: RuleAction,
    state: SimulationState,
    *,
    now: Callable[[], datetime] = utc_now,
) -> None:
    """Mutate ``state`` in place. Actions with missing operands are no-ops."""
    if action.type == ActionType.SET_FIELD:
        if action.field:
            _set_field(state, action.field, action.value)
    elif action.type == ActionType.NOTIFY:
        notifications = state.get("notifications")
        if not isinstance(notifications, list):
            notifications = []
            state["notifications"] = notifications
        notifications.append({"message": action.message, "timestamp": now()})
    elif action.type == ActionType.APPLY_LIFECYCLE:
        state["lifecycle_stage"] = action.lifecycle_stage
    elif action.type == ActionType.HALT_PROCESSING:
        state["halt_processing"] = True
    elif action.type == ActionType.MODIFY_HEDGE:
        # Unrestricted merge: parameters may replace control keys such as status.
        for key, value in (action.parameters or {}).items():
            state[key] = value


def _set_field(state: SimulationState, path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    container: Any = state
    for part in parents:
        container = _descend(container, part)
        if container is None:
            return

    if not _assign(container, leaf, value):
        return

    calculated_fields = state.get("calculated_fields")
    if not isinstance(calculated_fields, MutableMapping):
        calculated_fields = {}
        state["calculated_fields"] = calculated_fields
    calculated_fields[path] = value


def _descend(container: Any, part: str) -> Any:
    if isinstance(container, list):
        index = _list_index(container, part)
        if index is None:
            return None
        child = container[index]
        if not isinstance(child, (MutableMapping, list)):
            child = {}
            container[index] = child
        return child

    child = container.get(part)
    if not isinstance(child, (MutableMapping, list)):
        child = {}
        container[part] = child
    return child


def _assign(container: Any, leaf: str, value: Any) -> bool:
    if isinstance(container, list):
        index = _list_index(container, leaf)
        if index is None:
            return False
        container[index] = value
        return True
    container[leaf] = value
    return True


def _list_index(items: list, part: str) -> Optional[int]:
    if not part.isdigit():
        return None
    index = int(part)
    return index if index < len(items) else None
