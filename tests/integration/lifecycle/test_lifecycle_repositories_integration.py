import pytest

from src.core.models import (
    ActionType,
    ConditionOperator,
    HedgeEntity,
    LifecycleStage,
    SimulationEnvironment,
)
from src.infrastructure.lifecycle import InMemoryLifecycleRepository, SqliteLifecycleRepository
from tests.factories import action, condition, entity, group, rule


@pytest.fixture(params=["in_memory", "sqlite"])
def lifecycle_repository(request, tmp_path):
    if request.param == "sqlite":
        return SqliteLifecycleRepository(database_path=str(tmp_path / "lifecycle" / "rules.db"))
    return InMemoryLifecycleRepository()


def _stage(stage_id, sequence, rules=()):
    return LifecycleStage(id=stage_id, name=stage_id, sequence=sequence, rules=list(rules))


def _cap_rule():
    return rule(
        "rule_cap",
        conditions=group(condition("amount", ConditionOperator.BETWEEN, [1, 5])),
        actions=[action(ActionType.MODIFY_HEDGE, parameters={"status": "Blocked"})],
    )


def test_stage_upsert_get_list_delete(lifecycle_repository):
    lifecycle_repository.save_stage(_stage("stage-a", 1))
    lifecycle_repository.save_stage(_stage("stage-b", 2, rules=[_cap_rule()]))
    lifecycle_repository.save_stage(_stage("stage-a", 3))

    assert [stage.id for stage in lifecycle_repository.list_stages()] == ["stage-a", "stage-b"]
    assert lifecycle_repository.get_stage(stage_id="stage-a").sequence == 3

    stored = lifecycle_repository.get_stage(stage_id="stage-b")
    assert stored.rules[0].conditions.conditions[0].value == [1, 5]
    assert stored.rules[0].actions[0].parameters == {"status": "Blocked"}

    assert lifecycle_repository.delete_stage(stage_id="stage-a") is True
    assert lifecycle_repository.delete_stage(stage_id="stage-a") is False
    assert lifecycle_repository.get_stage(stage_id="stage-a") is None


def test_rule_upsert_get_list_delete(lifecycle_repository):
    cap = _cap_rule()
    lifecycle_repository.save_rule(cap)
    lifecycle_repository.save_rule(cap.model_copy(update={"name": "Cap v2"}))

    assert [item.name for item in lifecycle_repository.list_rules()] == ["Cap v2"]
    assert lifecycle_repository.get_rule(rule_id="rule_cap") == cap.model_copy(
        update={"name": "Cap v2"}
    )
    assert lifecycle_repository.delete_rule(rule_id="rule_cap") is True
    assert lifecycle_repository.get_rule(rule_id="rule_cap") is None


def test_environment_save_get_clear(lifecycle_repository):
    environment = SimulationEnvironment(
        stage_id="stage-a",
        input_data={"hedge_amount": 120},
        entities=[entity("ent_1", "100.50", optimal_car="12.5")],
    )
    lifecycle_repository.save_environment(environment)

    stored = lifecycle_repository.get_environment(stage_id="stage-a")
    assert stored == environment
    assert isinstance(stored.entities[0], HedgeEntity)

    lifecycle_repository.clear_environments()
    assert lifecycle_repository.get_environment(stage_id="stage-a") is None


def test_sqlite_repository_persists_across_instances(tmp_path):
    database_path = str(tmp_path / "rules.db")
    SqliteLifecycleRepository(database_path=database_path).save_stage(_stage("stage-a", 1))

    reopened = SqliteLifecycleRepository(database_path=database_path)

    assert [stage.id for stage in reopened.list_stages()] == ["stage-a"]
