from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from src.api.dependencies import get_lifecycle_stage_service
from src.api.http_status import HTTP_422_UNPROCESSABLE
from src.api.request_models import StageCreateRequest
from src.api.routers.lifecycle_http_errors import raise_lifecycle_http_exception
from src.core.lifecycle import LifecycleError, LifecycleStageService
from src.core.models import LifecycleStage, Rule

router = APIRouter(tags=["Lifecycle Stages"])

StageId = Annotated[str, Path(description="Lifecycle stage identifier.", examples=["stage-1a"])]
RuleId = Annotated[str, Path(description="Rule identifier.", examples=["rule_cap_check"])]
StageService = Annotated[LifecycleStageService, Depends(get_lifecycle_stage_service)]


@router.get(
    "/stages",
    response_model=list[LifecycleStage],
    summary="List Lifecycle Stages",
    description="Returns lifecycle stages ordered by sequence.",
)
def list_stages(service: StageService) -> list[LifecycleStage]:
    return service.list_stages()


@router.post(
    "/stages",
    response_model=LifecycleStage,
    status_code=status.HTTP_201_CREATED,
    summary="Create Lifecycle Stage",
    description="Creates a draft stage placed after the current last stage.",
)
def create_stage(request: StageCreateRequest, service: StageService) -> LifecycleStage:
    return service.add_stage(service.create_stage(request.name, request.description))


@router.get("/stages/{stage_id}", response_model=LifecycleStage, summary="Get Lifecycle Stage")
def get_stage(stage_id: StageId, service: StageService) -> LifecycleStage:
    try:
        return service.get_stage(stage_id=stage_id)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.put("/stages/{stage_id}", response_model=LifecycleStage, summary="Update Lifecycle Stage")
def update_stage(stage_id: StageId, stage: LifecycleStage, service: StageService) -> LifecycleStage:
    if stage.id != stage_id:
        raise HTTPException(status_code=HTTP_422_UNPROCESSABLE, detail="STAGE_ID_MISMATCH")
    try:
        return service.update_stage(stage)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.delete(
    "/stages/{stage_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Lifecycle Stage",
)
def delete_stage(stage_id: StageId, service: StageService) -> None:
    try:
        service.delete_stage(stage_id=stage_id)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.get("/stages/{stage_id}/rules", response_model=list[Rule], summary="List Stage Rules")
def list_stage_rules(stage_id: StageId, service: StageService) -> list[Rule]:
    try:
        return service.get_stage_rules(stage_id=stage_id)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.post(
    "/stages/{stage_id}/rules",
    response_model=LifecycleStage,
    status_code=status.HTTP_201_CREATED,
    summary="Add Rule To Stage",
)
def add_stage_rule(stage_id: StageId, rule: Rule, service: StageService) -> LifecycleStage:
    try:
        return service.add_rule_to_stage(stage_id=stage_id, rule=rule)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.put(
    "/stages/{stage_id}/rules/{rule_id}",
    response_model=LifecycleStage,
    summary="Update Stage Rule",
)
def update_stage_rule(
    stage_id: StageId, rule_id: RuleId, rule: Rule, service: StageService
) -> LifecycleStage:
    if rule.id != rule_id:
        raise HTTPException(status_code=HTTP_422_UNPROCESSABLE, detail="RULE_ID_MISMATCH")
    try:
        return service.update_rule_in_stage(stage_id=stage_id, rule=rule)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.delete(
    "/stages/{stage_id}/rules/{rule_id}",
    response_model=LifecycleStage,
    summary="Remove Rule From Stage",
)
def remove_stage_rule(stage_id: StageId, rule_id: RuleId, service: StageService) -> LifecycleStage:
    try:
        return service.remove_rule_from_stage(stage_id=stage_id, rule_id=rule_id)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)
