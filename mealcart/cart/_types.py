"""
Cart items, reorder context, state and the action union.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType

from mealcart._types import Money, MealId


def _frozen[K, V](mapping: Mapping[K, V]) -> Mapping[K, V]:
    return MappingProxyType(dict(mapping))


class ItemType(Enum):
    MEAL = "meal"
    PACKAGE = "package"


class OrderType(Enum):
    REGULAR = "regular"
    PACKAGE = "package"


# ═══════════════════════════════════════════════════════════════════════════════
# Items
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class PackageData:
    """
    Meals chosen for a package, captured when the package is added.

    Never re-derived from the catalog afterwards.
    """
    package_id: str
    package_name: str
    meal_count: int
    selected_meals: Mapping[MealId, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "selected_meals", _frozen(self.selected_meals))


@dataclass(frozen=True, slots=True)
class CartItem:
    id: str
    name: str
    price: Money
    quantity: int = 1
    type: ItemType = ItemType.MEAL
    shelf_life_days: int | None = None
    package_data: PackageData | None = None

    @property
    def is_package(self) -> bool:
        return self.type is ItemType.PACKAGE

    def with_quantity(self, quantity: int) -> CartItem:
        return replace(self, quantity=quantity)


# ═══════════════════════════════════════════════════════════════════════════════
# Reorder Context
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class UnavailableItem:
    item_id: MealId
    item_name: str
    requested_qty: int


@dataclass(frozen=True, slots=True)
class ReorderContext:
    """
    Pending replacements for a reorder. Lives only in memory.

    pending_package holds a package reorder back from the cart until every
    retired meal in it has a replacement.
    """
    original_order_id: str
    original_order_type: OrderType
    unavailable_items: tuple[UnavailableItem, ...]
    replacements: Mapping[MealId, MealId] = field(default_factory=dict)
    pending_package: CartItem | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "replacements", _frozen(self.replacements))

    def with_replacement(self, unavailable_id: MealId, replacement_id: MealId) -> ReorderContext:
        return replace(self, replacements={**self.replacements, unavailable_id: replacement_id})

    def unresolved(self) -> tuple[UnavailableItem, ...]:
        return tuple(u for u in self.unavailable_items if u.item_id not in self.replacements)

    @property
    def is_resolved(self) -> bool:
        return not self.unresolved()


# ═══════════════════════════════════════════════════════════════════════════════
# State
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class CartState:
    items: tuple[CartItem, ...] = ()
    reorder_context: ReorderContext | None = None

    def find(self, item_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Actions
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class SetItems:
    items: tuple[CartItem, ...]


@dataclass(frozen=True, slots=True)
class AddItem:
    """Add one unit. Merges into an existing non-package line with the same id."""
    item: CartItem


@dataclass(frozen=True, slots=True)
class AddPackage:
    """Always a new line."""
    item: CartItem


@dataclass(frozen=True, slots=True)
class UpdateQuantity:
    item_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class RemoveItem:
    item_id: str


@dataclass(frozen=True, slots=True)
class ClearCart:
    pass


@dataclass(frozen=True, slots=True)
class SetReorderContext:
    context: ReorderContext | None


type CartAction = (
    SetItems
    | AddItem
    | AddPackage
    | UpdateQuantity
    | RemoveItem
    | ClearCart
    | SetReorderContext
)


__all__ = (
    "ItemType",
    "OrderType",
    "PackageData",
    "CartItem",
    "UnavailableItem",
    "ReorderContext",
    "CartState",
    "SetItems",
    "AddItem",
    "AddPackage",
    "UpdateQuantity",
    "RemoveItem",
    "ClearCart",
    "SetReorderContext",
    "CartAction",
)
