"""
The cart reducer is the only place cart state changes.

reduce() is pure and total: every action yields a valid state, nothing
raises, nothing awaits. Anything asynchronous happens before dispatch.
"""

from dataclasses import replace

from mealcart.cart._types import (
    ItemType,
    CartItem,
    CartState,
    CartAction,
    SetItems,
    AddItem,
    AddPackage,
    UpdateQuantity,
    RemoveItem,
    ClearCart,
    SetReorderContext,
)


def reduce(state: CartState, action: CartAction) -> CartState:
    match action:
        case SetItems(items):
            return replace(state, items=tuple(i for i in items if i.quantity >= 1))

        case AddItem(item) if item.is_package:
            return _append(state, item, ItemType.PACKAGE)

        case AddItem(item):
            if any(i.id == item.id and not i.is_package for i in state.items):
                return replace(state, items=tuple(
                    i.with_quantity(i.quantity + 1) if i.id == item.id and not i.is_package else i
                    for i in state.items
                ))
            return _append(state, item, ItemType.MEAL)

        case AddPackage(item):
            return _append(state, item, ItemType.PACKAGE)

        case UpdateQuantity(item_id, quantity) if quantity <= 0:
            return reduce(state, RemoveItem(item_id))

        case UpdateQuantity(item_id, quantity):
            return replace(state, items=tuple(
                i.with_quantity(quantity) if i.id == item_id else i
                for i in state.items
            ))

        case RemoveItem(item_id):
            return replace(state, items=tuple(i for i in state.items if i.id != item_id))

        case ClearCart():
            return replace(state, items=())

        case SetReorderContext(context):
            return replace(state, reorder_context=context)


def _append(state: CartState, item: CartItem, kind: ItemType) -> CartState:
    line = replace(item, quantity=1, type=kind)
    return replace(state, items=(*state.items, line))


__all__ = ("reduce",)
