"""
FILE: src/core/lifecycle/fields.py
Catalog of hedge fields available to rule conditions.
"""

from typing import Iterable, Optional

from src.core.models import FieldDefinition, FieldOption, FieldType

DEFAULT_FIELD_DEFINITIONS: tuple[FieldDefinition, ...] = (
    FieldDefinition(
        id="hedge_id",
        name="Hedge ID",
        type=FieldType.STRING,
        description="Unique identifier for the hedge",
    ),
    FieldDefinition(
        id="hedge_type",
        name="Hedge Type",
        type=FieldType.SELECT,
        options=[
            FieldOption(value="interest_rate", label="Interest Rate"),
            FieldOption(value="fx", label="Foreign Exchange"),
            FieldOption(value="commodity", label="Commodity"),
        ],
    ),
    FieldDefinition(id="amount", name="Amount", type=FieldType.NUMBER, description="Hedge amount"),
    FieldDefinition(
        id="trade_date",
        name="Trade Date",
        type=FieldType.DATE,
        description="Date the hedge was traded",
    ),
    FieldDefinition(
        id="maturity_date",
        name="Maturity Date",
        type=FieldType.DATE,
        description="Date the hedge matures",
    ),
    FieldDefinition(
        id="status",
        name="Status",
        type=FieldType.SELECT,
        options=[
            FieldOption(value="active", label="Active"),
            FieldOption(value="pending", label="Pending"),
            FieldOption(value="matured", label="Matured"),
            FieldOption(value="terminated", label="Terminated"),
        ],
    ),
    FieldDefinition(id="counterparty", name="Counterparty", type=FieldType.STRING),
)


class FieldCatalog:
    def __init__(self, definitions: Optional[Iterable[FieldDefinition]] = None) -> None:
        self._definitions = list(
            definitions if definitions is not None else DEFAULT_FIELD_DEFINITIONS
        )

    def list_field_definitions(self) -> list[FieldDefinition]:
        return [definition.model_copy(deep=True) for definition in self._definitions]

    def get_field_definition(self, field_id: str) -> Optional[FieldDefinition]:
        definition = next((item for item in self._definitions if item.id == field_id), None)
        return definition.model_copy(deep=True) if definition is not None else None
