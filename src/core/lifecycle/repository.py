from typing import Optional, Protocol

from src.core.models import LifecycleStage, Rule, SimulationEnvironment


class LifecycleRepository(Protocol):
    def list_stages(self) -> list[LifecycleStage]: ...

    def get_stage(self, *, stage_id: str) -> Optional[LifecycleStage]: ...

    def save_stage(self, stage: LifecycleStage) -> None: ...

    def delete_stage(self, *, stage_id: str) -> bool: ...

    def list_rules(self) -> list[Rule]: ...

    def get_rule(self, *, rule_id: str) -> Optional[Rule]: ...

    def save_rule(self, rule: Rule) -> None: ...

    def delete_rule(self, *, rule_id: str) -> bool: ...

    def get_environment(self, *, stage_id: str) -> Optional[SimulationEnvironment]: ...

    def save_environment(self, environment: SimulationEnvironment) -> None: ...

    def clear_environments(self) -> None: ...
