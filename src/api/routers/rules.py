from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from src.api.dependencies import get_rule_catalog_service
from src.api.http_status import HTTP_422_UNPROCESSABLE
from src.api.request_models import (
    ConditionCompileRequest,
    ConditionCompileResponse,
    RuleEvaluationRequest,
    RuleEvaluationResponse,
)
from src.api.routers.lifecycle_http_errors import raise_lifecycle_http_exception
from src.core.lifecycle import LifecycleError, RuleCatalogService
from src.core.models import FieldDefinition, Rule, RuleValidationResult
from src.core.rules import compile_condition

router = APIRouter(tags=["Rule Catalog"])

RuleId = Annotated[str, Path(description="Rule identifier.", examples=["rule_cap_check"])]
RuleCatalog = Annotated[RuleCatalogService, Depends(get_rule_catalog_service)]


@router.get(
    "/fields",
    response_model=list[FieldDefinition],
    summary="List Field Definitions",
    description="Returns the hedge fields available to rule conditions.",
)
def list_field_definitions(service: RuleCatalog) -> list[FieldDefinition]:
    return service.field_catalog.list_field_definitions()


@router.get(
    "/fields/{field_id}",
    response_model=FieldDefinition,
    summary="Get Field Definition",
)
def get_field_definition(
    field_id: Annotated[str, Path(description="Field identifier.", examples=["amount"])],
    service: RuleCatalog,
) -> FieldDefinition:
    definition = service.field_catalog.get_field_definition(field_id)
    if definition is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="FIELD_NOT_FOUND")
    return definition


@router.get("/rules", response_model=list[Rule], summary="List Rules")
def list_rules(service: RuleCatalog) -> list[Rule]:
    return service.list_rules()


@router.post(
    "/rules",
    response_model=Rule,
    status_code=status.HTTP_201_CREATED,
    summary="Create Rule",
    description="Stores a rule. Active rules must pass validation; drafts are stored as-is.",
)
def create_rule(rule: Rule, service: RuleCatalog) -> Rule:
    try:
        return service.add_rule(rule)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.post(
    "/rules/validate",
    response_model=RuleValidationResult,
    summary="Validate Rule",
    description="Checks rule name, conditions and actions without storing the rule.",
)
def validate_rule(rule: Rule, service: RuleCatalog) -> RuleValidationResult:
    return service.validate_rule(rule)


@router.get("/rules/{rule_id}", response_model=Rule, summary="Get Rule")
def get_rule(rule_id: RuleId, service: RuleCatalog) -> Rule:
    try:
        return service.get_rule(rule_id=rule_id)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.put("/rules/{rule_id}", response_model=Rule, summary="Update Rule")
def update_rule(rule_id: RuleId, rule: Rule, service: RuleCatalog) -> Rule:
    if rule.id != rule_id:
        raise HTTPException(status_code=HTTP_422_UNPROCESSABLE, detail="RULE_ID_MISMATCH")
    try:
        return service.update_rule(rule)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.delete(
    "/rules/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Rule",
)
def delete_rule(rule_id: RuleId, service: RuleCatalog) -> None:
    try:
        service.delete_rule(rule_id=rule_id)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)


@router.post(
    "/rules/{rule_id}/evaluate",
    response_model=RuleEvaluationResponse,
    summary="Evaluate Rule Against Context",
    description=(
        "Evaluates a stored rule against the supplied context and returns the actions a "
        "match would execute. Nothing is applied."
    ),
)
async def evaluate_rule(
    rule_id: RuleId,
    request: RuleEvaluationRequest,
    service: RuleCatalog,
) -> RuleEvaluationResponse:
    try:
        rule = service.get_rule(rule_id=rule_id)
    except LifecycleError as exc:
        raise_lifecycle_http_exception(exc)
    matched = await service.evaluate_rule(rule, request.context)
    return RuleEvaluationResponse(
        rule_id=rule.id,
        matched=matched,
        actions=list(rule.actions) if matched else [],
    )


@router.post(
    "/conditions/compile",
    response_model=ConditionCompileResponse,
    summary="Compile Condition",
    description="Returns the JSON-logic expression for a condition leaf or group.",
)
def compile_condition_expression(request: ConditionCompileRequest) -> ConditionCompileResponse:
    return ConditionCompileResponse(expression=compile_condition(request.condition))
