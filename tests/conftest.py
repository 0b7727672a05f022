"""
FILE: tests/conftest.py
Shared fixtures for rule engine, lifecycle and API tests.
"""

from pathlib import Path

import pytest

from src.api.dependencies import reset_lifecycle_services_for_tests
from src.core.lifecycle import FieldCatalog, LifecycleStageService, RuleCatalogService
from src.core.rules import PredicateEngineProvider, RuleEvaluator
from src.core.rules.predicates import reset_predicate_engine_provider_for_tests
from src.infrastructure.lifecycle import InMemoryLifecycleRepository


def _has_marker(item: pytest.Item, name: str) -> bool:
    return item.get_closest_marker(name) is not None


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if _has_marker(item, "unit") or _has_marker(item, "integration"):
            continue

        path = Path(str(item.fspath)).as_posix().lower()
        if "/tests/integration/" in path or "_integration.py" in path:
            item.add_marker(pytest.mark.integration)
            continue
        item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def lifecycle_runtime_test_harness(monkeypatch: pytest.MonkeyPatch):
    """Run every test against fresh in-memory services and a fresh engine provider."""
    monkeypatch.setenv("LIFECYCLE_STORE_BACKEND", "IN_MEMORY")
    monkeypatch.setenv("LIFECYCLE_SEED_DEFAULT_STAGES", "true")
    reset_lifecycle_services_for_tests()
    reset_predicate_engine_provider_for_tests()
    yield
    reset_lifecycle_services_for_tests()
    reset_predicate_engine_provider_for_tests()


@pytest.fixture
def json_logic_evaluator() -> RuleEvaluator:
    provider = PredicateEngineProvider()
    engine = provider._import_engine()
    assert engine is not None
    return RuleEvaluator(engine=engine)


@pytest.fixture
def repository() -> InMemoryLifecycleRepository:
    return InMemoryLifecycleRepository()


@pytest.fixture
def rule_catalog(repository, json_logic_evaluator) -> RuleCatalogService:
    async def _factory() -> RuleEvaluator:
        return json_logic_evaluator

    return RuleCatalogService(
        repository=repository,
        field_catalog=FieldCatalog(),
        evaluator_factory=_factory,
    )


@pytest.fixture
def stage_service(repository, rule_catalog) -> LifecycleStageService:
    return LifecycleStageService(repository=repository, rule_catalog=rule_catalog)
