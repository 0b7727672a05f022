"""
FILE: src/core/lifecycle/stages.py
Lifecycle stage management and the stage-scoped rule sets.
"""

import logging
from typing import Optional

from src.core.lifecycle.errors import RuleNotFoundError, StageNotFoundError
from src.core.lifecycle.repository import LifecycleRepository
from src.core.lifecycle.rule_catalog import RuleCatalogService, generate_id
from src.core.models import LifecycleStage, LifecycleStageStatus, Rule, RuleStatus, utc_now

logger = logging.getLogger(__name__)

PRE_UTILISATION_STAGE_ID = "stage-1a"

_DEFAULT_STAGES: tuple[tuple[str, str, str, str], ...] = (
    (
        PRE_UTILISATION_STAGE_ID,
        "Stage 1A: Pre-Utilisation Check",
        "Check conditions before hedge utilization",
        "pi pi-check-circle",
    ),
    (
        "stage-1b",
        "Stage 1B: FPM Instructions",
        "Process FPM instructions for the hedge",
        "pi pi-file",
    ),
    ("stage-2", "Stage 2: Murex Booking", "Manage Murex booking process", "pi pi-book"),
    ("stage-3", "Stage 3: GL Booking", "General ledger booking procedures", "pi pi-wallet"),
    (
        "stage-4",
        "Stage 4: Externalization Check",
        "Verify hedge externalization requirements",
        "pi pi-globe",
    ),
    (
        "stage-5",
        "Stage 5: Daily Monitoring",
        "Regular monitoring of hedge performance",
        "pi pi-chart-line",
    ),
    (
        "stage-6",
        "Stage 6: Hedge Failure Detected",
        "Actions to take when hedge failure is detected",
        "pi pi-exclamation-triangle",
    ),
)


def build_default_stages() -> list[LifecycleStage]:
    now = utc_now()
    return [
        LifecycleStage(
            id=stage_id,
            name=name,
            description=description,
            sequence=sequence,
            status=LifecycleStageStatus.ACTIVE,
            rules=[],
            icon=icon,
            created_at=now,
            updated_at=now,
        )
        for sequence, (stage_id, name, description, icon) in enumerate(_DEFAULT_STAGES, start=1)
    ]


class LifecycleStageService:
    def __init__(
        self,
        *,
        repository: LifecycleRepository,
        rule_catalog: RuleCatalogService,
    ) -> None:
        self._repository = repository
        self._rule_catalog = rule_catalog

    def seed_default_stages(self) -> None:
        if self._repository.list_stages():
            return
        for stage in build_default_stages():
            if stage.id == PRE_UTILISATION_STAGE_ID:
                message_validation = self._rule_catalog.create_rule("Message Validation")
                message_validation.description = (
                    "Validates that required message fields are present"
                )
                message_validation.status = RuleStatus.ACTIVE
                stage.rules.append(message_validation)
            self._repository.save_stage(stage)
        logger.info("Seeded default lifecycle stages. Count=%s", len(_DEFAULT_STAGES))

    def list_stages(self) -> list[LifecycleStage]:
        return sorted(self._repository.list_stages(), key=lambda stage: stage.sequence)

    def get_stage(self, *, stage_id: str) -> LifecycleStage:
        stage = self._repository.get_stage(stage_id=stage_id)
        if stage is None:
            raise StageNotFoundError("STAGE_NOT_FOUND")
        return stage

    def create_stage(self, name: str, description: str) -> LifecycleStage:
        max_sequence = max((stage.sequence for stage in self._repository.list_stages()), default=0)
        now = utc_now()
        return LifecycleStage(
            id=generate_id("stage"),
            name=name,
            description=description,
            sequence=max_sequence + 1,
            status=LifecycleStageStatus.DRAFT,
            rules=[],
            created_at=now,
            updated_at=now,
        )

    def add_stage(self, stage: LifecycleStage) -> LifecycleStage:
        self._repository.save_stage(stage)
        return stage

    def update_stage(self, stage: LifecycleStage) -> LifecycleStage:
        self.get_stage(stage_id=stage.id)
        updated = stage.model_copy(update={"updated_at": utc_now()})
        self._repository.save_stage(updated)
        return updated

    def delete_stage(self, *, stage_id: str) -> None:
        if not self._repository.delete_stage(stage_id=stage_id):
            raise StageNotFoundError("STAGE_NOT_FOUND")

    def get_stage_rules(self, *, stage_id: str) -> list[Rule]:
        return self.get_stage(stage_id=stage_id).rules

    def add_rule_to_stage(self, *, stage_id: str, rule: Rule) -> LifecycleStage:
        stage = self.get_stage(stage_id=stage_id)
        self._rule_catalog.ensure_publishable(rule)
        stage.rules.append(rule)
        return self._touch(stage)

    def update_rule_in_stage(self, *, stage_id: str, rule: Rule) -> LifecycleStage:
        stage = self.get_stage(stage_id=stage_id)
        index = _rule_index(stage, rule.id)
        if index is None:
            raise RuleNotFoundError("RULE_NOT_FOUND_IN_STAGE")
        self._rule_catalog.ensure_publishable(rule)
        stage.rules[index] = rule.model_copy(update={"updated_at": utc_now()})
        return self._touch(stage)

    def remove_rule_from_stage(self, *, stage_id: str, rule_id: str) -> LifecycleStage:
        stage = self.get_stage(stage_id=stage_id)
        if _rule_index(stage, rule_id) is None:
            raise RuleNotFoundError("RULE_NOT_FOUND_IN_STAGE")
        stage.rules = [rule for rule in stage.rules if rule.id != rule_id]
        return self._touch(stage)

    def _touch(self, stage: LifecycleStage) -> LifecycleStage:
        stage.updated_at = utc_now()
        self._repository.save_stage(stage)
        return stage


def _rule_index(stage: LifecycleStage, rule_id: str) -> Optional[int]:
    return next((index for index, rule in enumerate(stage.rules) if rule.id == rule_id), None)
