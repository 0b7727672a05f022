"""
FILE: src/core/lifecycle/simulations.py
Stage-scoped what-if simulations and saved simulation environments.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from src.core.lifecycle.errors import SimulationEnvironmentNotFoundError, StageNotFoundError
from src.core.lifecycle.repository import LifecycleRepository
from src.core.lifecycle.rule_catalog import EvaluatorFactory
from src.core.models import HedgeEntity, SimulationEnvironment, SimulationOutput
from src.core.rules.evaluator import build_rule_evaluator
from src.core.simulation.engine import run_simulation

logger = logging.getLogger(__name__)


class SimulationService:
    def __init__(
        self,
        *,
        repository: LifecycleRepository,
        evaluator_factory: EvaluatorFactory = build_rule_evaluator,
    ) -> None:
        self._repository = repository
        self._evaluator_factory = evaluator_factory

    def save_environment(self, environment: SimulationEnvironment) -> SimulationEnvironment:
        self._repository.save_environment(environment)
        return environment

    def get_environment(self, *, stage_id: str) -> Optional[SimulationEnvironment]:
        return self._repository.get_environment(stage_id=stage_id)

    def clear_environments(self) -> None:
        self._repository.clear_environments()

    async def run_stage_simulation(
        self, *, stage_id: str, simulation_input: Mapping[str, Any]
    ) -> SimulationOutput:
        stage = self._repository.get_stage(stage_id=stage_id)
        if stage is None:
            raise StageNotFoundError("STAGE_NOT_FOUND")

        logger.info("Running stage simulation. Stage=%s Rules=%s", stage.id, len(stage.rules))
        evaluator = await self._evaluator_factory()
        return await run_simulation(stage.rules, simulation_input, evaluator=evaluator)

    async def run_saved_environment(self, *, stage_id: str) -> SimulationOutput:
        environment = self._repository.get_environment(stage_id=stage_id)
        if environment is None:
            raise SimulationEnvironmentNotFoundError("SIMULATION_ENVIRONMENT_NOT_FOUND")
        return await self.run_stage_simulation(
            stage_id=stage_id,
            simulation_input=build_simulation_input(environment.input_data, environment.entities),
        )


def build_simulation_input(
    input_data: Mapping[str, Any], entities: Iterable[HedgeEntity]
) -> dict[str, Any]:
    simulation_input = dict(input_data)
    simulation_input["entities"] = [entity.model_dump() for entity in entities]
    return simulation_input
