from typing import Optional

from fastapi import HTTPException, status

from src.api import config
from src.core.lifecycle import (
    FieldCatalog,
    LifecycleRepository,
    LifecycleStageService,
    RuleCatalogService,
    SimulationService,
)

_REPOSITORY: Optional[LifecycleRepository] = None
_RULE_CATALOG: Optional[RuleCatalogService] = None
_STAGE_SERVICE: Optional[LifecycleStageService] = None
_SIMULATION_SERVICE: Optional[SimulationService] = None


def get_lifecycle_repository() -> LifecycleRepository:
    global _REPOSITORY
    if _REPOSITORY is None:
        try:
            _REPOSITORY = config.build_repository()
        except RuntimeError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
            ) from exc
    return _REPOSITORY


def get_rule_catalog_service() -> RuleCatalogService:
    global _RULE_CATALOG
    if _RULE_CATALOG is None:
        _RULE_CATALOG = RuleCatalogService(
            repository=get_lifecycle_repository(),
            field_catalog=FieldCatalog(),
            require_valid_active_rules=config.require_valid_active_rules(),
        )
    return _RULE_CATALOG


def get_lifecycle_stage_service() -> LifecycleStageService:
    global _STAGE_SERVICE
    if _STAGE_SERVICE is None:
        _STAGE_SERVICE = LifecycleStageService(
            repository=get_lifecycle_repository(),
            rule_catalog=get_rule_catalog_service(),
        )
        if config.seed_default_stages_enabled():
            _STAGE_SERVICE.seed_default_stages()
    return _STAGE_SERVICE


def get_simulation_service() -> SimulationService:
    global _SIMULATION_SERVICE
    if _SIMULATION_SERVICE is None:
        get_lifecycle_stage_service()
        _SIMULATION_SERVICE = SimulationService(repository=get_lifecycle_repository())
    return _SIMULATION_SERVICE


def reset_lifecycle_services_for_tests() -> None:
    global _REPOSITORY
    global _RULE_CATALOG
    global _STAGE_SERVICE
    global _SIMULATION_SERVICE
    _REPOSITORY = None
    _RULE_CATALOG = None
    _STAGE_SERVICE = None
    _SIMULATION_SERVICE = None
