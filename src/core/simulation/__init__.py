"""What-if simulation package."""

from src.core.simulation.actions import apply_action
from src.core.simulation.allocation import allocate
from src.core.simulation.engine import run_simulation, sort_rules_by_priority

__all__ = [
    "allocate",
    "apply_action",
    "run_simulation",
    "sort_rules_by_priority",
]
