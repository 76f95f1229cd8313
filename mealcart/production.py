"""
Production date: the latest day an order can be prepared.

All meals in an order are cooked and shipped together, so the most
perishable one bounds the whole order:

    production_date = delivery_date - min(shelf_life_days)

    compute_production_date(date(2025, 3, 14), cart.items)  # date(2025, 3, 11)
"""

from collections.abc import Iterable
from datetime import date, timedelta
from typing import Protocol


class HasShelfLife(Protocol):
    @property
    def shelf_life_days(self) -> int | None: ...


def shortest_shelf_life(items: Iterable[HasShelfLife]) -> int | None:
    lives = [item.shelf_life_days for item in items if item.shelf_life_days is not None]
    return min(lives) if lives else None


def compute_production_date(
    delivery_date: date | None,
    items: Iterable[HasShelfLife],
) -> date | None:
    """
    None when there is no delivery date or no item with a known shelf
    life. Calendar arithmetic only, no time of day involved.
    """
    if delivery_date is None:
        return None
    shortest = shortest_shelf_life(items)
    if shortest is None:
        return None
    return delivery_date - timedelta(days=shortest)


__all__ = ("HasShelfLife", "shortest_shelf_life", "compute_production_date")
