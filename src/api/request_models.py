from typing import Any, Dict, List

from pydantic import BaseModel, Field

from src.core.models import ConditionNode, RuleAction


class RuleEvaluationRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "example": {"context": {"input": {"hedge_amount": 2500000}, "status": "Approved"}}
        }
    }

    context: Dict[str, Any] = Field(
        default_factory=dict,
        description="Evaluation context; condition fields are dot paths into it.",
    )


class RuleEvaluationResponse(BaseModel):
    rule_id: str = Field(description="Evaluated rule identifier.")
    matched: bool = Field(description="Whether the rule conditions matched the context.")
    actions: List[RuleAction] = Field(
        default_factory=list, description="Actions a match would execute."
    )


class ConditionCompileRequest(BaseModel):
    condition: ConditionNode = Field(description="Condition leaf or group to compile.")


class ConditionCompileResponse(BaseModel):
    expression: Any = Field(description="Compiled JSON-logic expression.")


class StageCreateRequest(BaseModel):
    name: str = Field(min_length=1, description="Stage display name.")
    description: str = Field(default="", description="Stage description.")
