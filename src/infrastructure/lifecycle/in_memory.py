from copy import deepcopy
from threading import Lock
from typing import Optional

from src.core.lifecycle.repository import LifecycleRepository
from src.core.models import LifecycleStage, Rule, SimulationEnvironment


class InMemoryLifecycleRepository(LifecycleRepository):
    def __init__(self) -> None:
        self._lock = Lock()
        self._stages: dict[str, LifecycleStage] = {}
        self._rules: dict[str, Rule] = {}
        self._environments: dict[str, SimulationEnvironment] = {}

    def list_stages(self) -> list[LifecycleStage]:
        with self._lock:
            return [deepcopy(stage) for stage in self._stages.values()]

    def get_stage(self, *, stage_id: str) -> Optional[LifecycleStage]:
        with self._lock:
            stage = self._stages.get(stage_id)
            return deepcopy(stage) if stage is not None else None

    def save_stage(self, stage: LifecycleStage) -> None:
        with self._lock:
            self._stages[stage.id] = deepcopy(stage)

    def delete_stage(self, *, stage_id: str) -> bool:
        with self._lock:
            return self._stages.pop(stage_id, None) is not None

    def list_rules(self) -> list[Rule]:
        with self._lock:
            return [deepcopy(rule) for rule in self._rules.values()]

    def get_rule(self, *, rule_id: str) -> Optional[Rule]:
        with self._lock:
            rule = self._rules.get(rule_id)
            return deepcopy(rule) if rule is not None else None

    def save_rule(self, rule: Rule) -> None:
        with self._lock:
            self._rules[rule.id] = deepcopy(rule)

    def delete_rule(self, *, rule_id: str) -> bool:
        with self._lock:
            return self._rules.pop(rule_id, None) is not None

    def get_environment(self, *, stage_id: str) -> Optional[SimulationEnvironment]:
        with self._lock:
            environment = self._environments.get(stage_id)
            return deepcopy(environment) if environment is not None else None

    def save_environment(self, environment: SimulationEnvironment) -> None:
        with self._lock:
            self._environments[environment.stage_id] = deepcopy(environment)

    def clear_environments(self) -> None:
        with self._lock:
            self._environments.clear()
