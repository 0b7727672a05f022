"""Rule catalog, lifecycle stages and stage-scoped simulations."""

from src.core.lifecycle.errors import (
    LifecycleError,
    RuleNotFoundError,
    RuleValidationError,
    SimulationEnvironmentNotFoundError,
    StageNotFoundError,
)
from src.core.lifecycle.fields import DEFAULT_FIELD_DEFINITIONS, FieldCatalog
from src.core.lifecycle.repository import LifecycleRepository
from src.core.lifecycle.rule_catalog import RuleCatalogService, generate_id, validate_rule
from src.core.lifecycle.simulations import SimulationService, build_simulation_input
from src.core.lifecycle.stages import (
    PRE_UTILISATION_STAGE_ID,
    LifecycleStageService,
    build_default_stages,
)

__all__ = [
    "DEFAULT_FIELD_DEFINITIONS",
    "FieldCatalog",
    "LifecycleError",
    "LifecycleRepository",
    "LifecycleStageService",
    "PRE_UTILISATION_STAGE_ID",
    "RuleCatalogService",
    "RuleNotFoundError",
    "RuleValidationError",
    "SimulationEnvironmentNotFoundError",
    "SimulationService",
    "StageNotFoundError",
    "build_default_stages",
    "build_simulation_input",
    "generate_id",
    "validate_rule",
]
