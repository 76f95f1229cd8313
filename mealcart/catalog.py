"""
Catalog collaborator: live meal availability.

The is_active flag returned here is authoritative. It is fetched at the
moment of use and never cached by the engine.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from mealcart._types import Money, MealId


@dataclass(frozen=True, slots=True)
class MealAvailability:
    id: MealId
    name: str
    is_active: bool
    price: Money
    shelf_life_days: int | None = None


class CatalogGateway(Protocol):
    async def get_meal_availability(
        self, meal_ids: Sequence[MealId]
    ) -> Sequence[MealAvailability]:
        """Availability for the requested ids. Unknown ids are omitted."""
        ...


def index_by_id(meals: Sequence[MealAvailability]) -> dict[MealId, MealAvailability]:
    return {meal.id: meal for meal in meals}


__all__ = ("MealAvailability", "CatalogGateway", "index_by_id")
