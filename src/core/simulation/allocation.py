"""
FILE: src/core/simulation/allocation.py
Greedy hedge allocation across entities net of capital-adequacy buffers.
"""

from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

from src.core.models import EntityAllocation, HedgeEntity

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def calculate_buffer(entity: HedgeEntity) -> Decimal:
    if entity.car_exempt:
        return _ZERO
    return entity.nav * entity.optimal_car / _HUNDRED


def calculate_nav_after_car(entity: HedgeEntity) -> Decimal:
    if entity.car_exempt:
        return entity.nav
    return max(_ZERO, entity.nav - calculate_buffer(entity))


def calculate_available_amount(entity: HedgeEntity) -> Decimal:
    if entity.car_exempt:
        return max(_ZERO, entity.nav - entity.already_hedged)
    return max(_ZERO, calculate_nav_after_car(entity) - entity.already_hedged)


def allocate(
    entities: Iterable[Union[HedgeEntity, Mapping[str, Any]]],
    total_amount: Optional[Union[Decimal, int, float, str]],
) -> list[EntityAllocation]:
    """Distribute ``total_amount`` over entities in descending NAV order.

    Each entity receives at most its available amount. Once the amount is
    used up, remaining entities are reported with a zero allocation.
    """
    hedge_entities = [_as_entity(entity) for entity in entities]
    if not hedge_entities or not total_amount:
        return []

    remaining = Decimal(str(total_amount))
    allocations: list[EntityAllocation] = []
    for entity in sorted(hedge_entities, key=lambda item: item.nav, reverse=True):
        available_amount = calculate_available_amount(entity)
        if remaining <= _ZERO:
            allocation = _ZERO
            exhausted = True
        else:
            allocation = min(available_amount, remaining)
            remaining -= allocation
            exhausted = allocation >= available_amount

        allocations.append(
            EntityAllocation(
                entity_id=entity.id,
                entity_name=entity.name,
                allocation=allocation,
                available_amount=available_amount,
                buffer=calculate_buffer(entity),
                nav_after_car=calculate_nav_after_car(entity),
                exhausted=exhausted,
            )
        )
    return allocations


def _as_entity(entity: Union[HedgeEntity, Mapping[str, Any]]) -> HedgeEntity:
    if isinstance(entity, HedgeEntity):
        return entity
    return HedgeEntity.model_validate(entity)
