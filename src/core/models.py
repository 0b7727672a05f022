"""
FILE: src/core/models.py
Domain models for hedge lifecycle rules, stages and what-if simulations.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    SELECT = "select"
    MULTI_SELECT = "multiSelect"


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    GREATER_THAN_OR_EQUALS = "greaterThanOrEquals"
    LESS_THAN_OR_EQUALS = "lessThanOrEquals"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    IN = "in"
    NOT_IN = "notIn"
    BETWEEN = "between"


class LogicalOperator(str, Enum):
    AND = "and"
    OR = "or"


class ActionType(str, Enum):
    SET_FIELD = "setField"
    NOTIFY = "notify"
    APPLY_LIFECYCLE = "applyLifecycle"
    HALT_PROCESSING = "haltProcessing"
    MODIFY_HEDGE = "modifyHedge"


class RuleStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class RulePriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LifecycleStageStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class FieldOption(BaseModel):
    value: str = Field(description="Stored option value.", examples=["fx"])
    label: str = Field(description="Display label for the option.", examples=["Foreign Exchange"])


class FieldDefinition(BaseModel):
    id: str = Field(description="Context key the field is read from.", examples=["amount"])
    name: str = Field(description="Human readable field name.", examples=["Amount"])
    type: FieldType = Field(description="Semantic type of the field value.")
    options: Optional[List[FieldOption]] = Field(
        default=None,
        description="Allowed values for select and multiSelect fields.",
    )
    description: Optional[str] = Field(default=None, description="Optional field description.")


class RuleCondition(BaseModel):
    kind: Literal["condition"] = Field(
        default="condition", description="Discriminator for leaf condition nodes."
    )
    id: str = Field(description="Condition identifier.", examples=["cond_1"])
    field: str = Field(
        description="Dot-separated path into the evaluation context.",
        examples=["input.hedge_amount"],
    )
    operator: ConditionOperator = Field(description="Comparison applied to the field value.")
    value: Any = Field(
        default=None,
        description="Comparison operand. `between` expects a `[min, max]` pair.",
        examples=[1000000],
    )
    value_type: FieldType = Field(
        default=FieldType.STRING,
        description="Declared type of the comparison operand.",
    )
    negated: bool = Field(default=False, description="Wrap the comparison in a logical NOT.")


class RuleConditionGroup(BaseModel):
    kind: Literal["group"] = Field(
        default="group", description="Discriminator for condition group nodes."
    )
    id: str = Field(description="Condition group identifier.", examples=["grp_1"])
    operator: LogicalOperator = Field(
        default=LogicalOperator.AND, description="Logical operator joining child conditions."
    )
    conditions: List["ConditionNode"] = Field(
        default_factory=list,
        description="Ordered child conditions and nested groups.",
    )


ConditionNode = Annotated[
    Union[RuleCondition, RuleConditionGroup],
    Field(discriminator="kind"),
]

RuleConditionGroup.model_rebuild()


class RuleAction(BaseModel):
    id: str = Field(description="Action identifier.", examples=["act_1"])
    type: ActionType = Field(description="Action kind applied to simulation state.")
    field: Optional[str] = Field(
        default=None,
        description="Dot-separated state path for setField actions.",
        examples=["calculated_fields.hedge_ratio"],
    )
    value: Any = Field(default=None, description="Value written by setField actions.")
    message: Optional[str] = Field(default=None, description="Message recorded by notify.")
    lifecycle_stage: Optional[str] = Field(
        default=None, description="Target stage recorded by applyLifecycle."
    )
    parameters: Optional[Dict[str, Any]] = Field(
        default=None, description="Top-level state overrides applied by modifyHedge."
    )


class Rule(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "rule_cap_check",
                "name": "Hedge amount cap",
                "conditions": {
                    "kind": "group",
                    "id": "grp_1",
                    "operator": "and",
                    "conditions": [
                        {
                            "kind": "condition",
                            "id": "cond_1",
                            "field": "input.hedge_amount",
                            "operator": "greaterThan",
                            "value": 1000000,
                            "value_type": "number",
                        }
                    ],
                },
                "actions": [
                    {"id": "act_1", "type": "modifyHedge", "parameters": {"status": "Blocked"}}
                ],
                "status": "active",
                "priority": "high",
            }
        }
    }

    id: str = Field(description="Rule identifier.", examples=["rule_cap_check"])
    name: str = Field(description="Rule display name.", examples=["Hedge amount cap"])
    description: Optional[str] = Field(default=None, description="Optional rule description.")
    conditions: RuleConditionGroup = Field(description="Root condition group.")
    actions: List[RuleAction] = Field(
        default_factory=list, description="Ordered actions executed when the rule matches."
    )
    status: RuleStatus = Field(
        default=RuleStatus.DRAFT,
        description="Only active rules can match during evaluation.",
    )
    priority: RulePriority = Field(
        default=RulePriority.MEDIUM, description="Execution priority within a stage."
    )
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp (UTC).")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update timestamp (UTC).")
    created_by: Optional[str] = Field(default=None, description="Author of the rule.")
    updated_by: Optional[str] = Field(default=None, description="Last editor of the rule.")
    tags: List[str] = Field(default_factory=list, description="Free-form rule tags.")
    category: Optional[str] = Field(default=None, description="Optional rule category.")


class RuleValidationResult(BaseModel):
    is_valid: bool = Field(description="True when no validation errors were found.")
    errors: List[str] = Field(default_factory=list, description="Validation error messages.")


class LifecycleStage(BaseModel):
    id: str = Field(description="Stage identifier.", examples=["stage-1a"])
    name: str = Field(description="Stage display name.")
    description: str = Field(default="", description="Stage description.")
    sequence: int = Field(description="Ordering position of the stage in the lifecycle.")
    status: LifecycleStageStatus = Field(default=LifecycleStageStatus.DRAFT)
    rules: List[Rule] = Field(default_factory=list, description="Rules attached to the stage.")
    icon: Optional[str] = Field(default=None, description="Optional display icon.")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    created_by: Optional[str] = Field(default=None)
    updated_by: Optional[str] = Field(default=None)


class HedgeEntity(BaseModel):
    id: str = Field(description="Entity identifier.", examples=["ent_sg"])
    name: str = Field(description="Entity display name.", examples=["Singapore Branch"])
    type: Literal["Branch", "Subsidiary", "Associate"] = Field(description="Entity legal form.")
    nav_type: Literal["RE", "COI"] = Field(description="NAV basis of the entity.")
    nav: Decimal = Field(ge=0, description="Net asset value.", examples=["1000000"])
    car_exempt: bool = Field(
        default=False, description="Entity is exempt from capital-adequacy buffers."
    )
    optimal_car: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        description="Percentage of NAV reserved as capital-adequacy buffer.",
        examples=["12.5"],
    )
    already_hedged: Decimal = Field(
        default=Decimal("0"), description="Amount of NAV already hedged."
    )
    parent_entity_id: Optional[str] = Field(default=None, description="Parent entity id.")
    overlay: Optional[Decimal] = Field(default=None, description="Optional overlay amount.")


class SimulationEnvironment(BaseModel):
    stage_id: str = Field(description="Stage the environment belongs to.", examples=["stage-1a"])
    input_data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Simulation input fields, for example `hedge_amount`.",
        examples=[{"hedge_amount": 120}],
    )
    entities: List[HedgeEntity] = Field(
        default_factory=list, description="Synthetic portfolio of hedge entities."
    )


class TraceEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    rule_id: str = Field(description="Identifier of the evaluated rule.")
    rule_name: str = Field(description="Name of the evaluated rule.")
    condition_evaluation: bool = Field(description="Whether the rule matched.")
    actions_executed: List[RuleAction] = Field(
        default_factory=list, description="Actions of the rule when it matched."
    )
    input_state: Dict[str, Any] = Field(description="State snapshot before the rule ran.")
    output_state: Dict[str, Any] = Field(description="State snapshot after the rule ran.")
    timestamp: datetime = Field(description="Time the entry was recorded (UTC).")


class EntityAllocation(BaseModel):
    entity_id: str = Field(description="Entity identifier.")
    entity_name: str = Field(description="Entity display name.")
    allocation: Decimal = Field(description="Hedge amount assigned to the entity.")
    available_amount: Decimal = Field(description="Capacity left after buffer and hedges.")
    buffer: Decimal = Field(description="Capital-adequacy buffer held back from NAV.")
    nav_after_car: Decimal = Field(description="NAV net of the capital-adequacy buffer.")
    exhausted: bool = Field(description="True when the entity capacity is fully used.")


class SimulationOutput(BaseModel):
    status: str = Field(description="Final simulation status.", examples=["Approved"])
    reason: str = Field(default="", description="Final reason text.")
    action: str = Field(default="", description="Final recommended action.")
    trace: List[TraceEntry] = Field(default_factory=list, description="Per-rule audit trail.")
    entity_allocations: List[EntityAllocation] = Field(
        default_factory=list, description="Capital allocation schedule."
    )
    calculated_fields: Dict[str, Any] = Field(
        default_factory=dict, description="Fields written by setField actions."
    )


class SimulationRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {
                "input_data": {"hedge_amount": 120},
                "entities": [
                    {
                        "id": "ent_1",
                        "name": "Head Office",
                        "type": "Branch",
                        "nav_type": "RE",
                        "nav": "100",
                        "car_exempt": True,
                    },
                    {
                        "id": "ent_2",
                        "name": "Subsidiary A",
                        "type": "Subsidiary",
                        "nav_type": "COI",
                        "nav": "50",
                        "optimal_car": "10",
                    },
                ],
            }
        }
    }

    input_data: Dict[str, Any] = Field(
        default_factory=dict, description="Simulation input fields, for example `hedge_amount`."
    )
    entities: List[HedgeEntity] = Field(
        default_factory=list, description="Synthetic portfolio of hedge entities."
    )
