"""
Pydantic models for the persisted cart payload.

The stored shape is camelCase JSON:

    {"items": [{"id": "m1", "name": "Chicken Bowl", "price": 899,
                "quantity": 2, "type": "meal", "shelfLifeDays": 4}]}

Anything that fails validation is rejected as a whole; the store turns
that into an empty cart.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from mealcart.cart._types import CartItem, ItemType, PackageData


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PackageDataModel(_Model):
    package_id: str
    package_name: str
    meal_count: int = Field(ge=0)
    selected_meals: dict[str, int] = Field(default_factory=dict)

    def to_domain(self) -> PackageData:
        return PackageData(
            package_id=self.package_id,
            package_name=self.package_name,
            meal_count=self.meal_count,
            selected_meals=self.selected_meals,
        )

    @classmethod
    def from_domain(cls, data: PackageData) -> PackageDataModel:
        return cls(
            package_id=data.package_id,
            package_name=data.package_name,
            meal_count=data.meal_count,
            selected_meals=dict(data.selected_meals),
        )


class CartItemModel(_Model):
    id: str
    name: str
    price: int = Field(ge=0)
    quantity: int = Field(ge=1)
    type: Literal["meal", "package"] = "meal"
    shelf_life_days: int | None = Field(default=None, ge=0)
    package_data: PackageDataModel | None = None

    def to_domain(self) -> CartItem:
        return CartItem(
            id=self.id,
            name=self.name,
            price=self.price,
            quantity=self.quantity,
            type=ItemType(self.type),
            shelf_life_days=self.shelf_life_days,
            package_data=self.package_data.to_domain() if self.package_data else None,
        )

    @classmethod
    def from_domain(cls, item: CartItem) -> CartItemModel:
        return cls(
            id=item.id,
            name=item.name,
            price=item.price,
            quantity=item.quantity,
            type=item.type.value,
            shelf_life_days=item.shelf_life_days,
            package_data=(
                PackageDataModel.from_domain(item.package_data)
                if item.package_data else None
            ),
        )


class CartSnapshotModel(_Model):
    items: list[CartItemModel] = Field(default_factory=list)


def encode_items(items: tuple[CartItem, ...]) -> str:
    snapshot = CartSnapshotModel(items=[CartItemModel.from_domain(i) for i in items])
    return snapshot.model_dump_json(by_alias=True)


def decode_items(payload: str) -> tuple[CartItem, ...]:
    """Raises pydantic.ValidationError on malformed or invalid payloads."""
    snapshot = CartSnapshotModel.model_validate_json(payload)
    return tuple(item.to_domain() for item in snapshot.items)


__all__ = (
    "PackageDataModel",
    "CartItemModel",
    "CartSnapshotModel",
    "encode_items",
    "decode_items",
    "ValidationError",
)
