"""
Cart: state container for cart items and reorder context.

    from mealcart import cart as K

    store = K.CartStore(K.MemoryStorage())
    await store.rehydrate()
    await store.dispatch(K.AddItem(K.CartItem("m1", "Chicken Bowl", 899)))
    await store.dispatch(K.UpdateQuantity("m1", 0))     # removes the line
"""

from mealcart.cart._types import (
    ItemType,
    OrderType,
    PackageData,
    CartItem,
    UnavailableItem,
    ReorderContext,
    CartState,
    SetItems,
    AddItem,
    AddPackage,
    UpdateQuantity,
    RemoveItem,
    ClearCart,
    SetReorderContext,
    CartAction,
)
from mealcart.cart._reducer import reduce
from mealcart.cart._codec import (
    CartItemModel,
    CartSnapshotModel,
    encode_items,
    decode_items,
)
from mealcart.cart._storage import CartStorage, MemoryStorage
from mealcart.cart._sqlalchemy import SQLAlchemyStorage, CartSnapshotTable
from mealcart.cart._store import CartStore

__all__ = (
    # Types
    "ItemType",
    "OrderType",
    "PackageData",
    "CartItem",
    "UnavailableItem",
    "ReorderContext",
    "CartState",
    # Actions
    "SetItems",
    "AddItem",
    "AddPackage",
    "UpdateQuantity",
    "RemoveItem",
    "ClearCart",
    "SetReorderContext",
    "CartAction",
    "reduce",
    # Persistence
    "CartItemModel",
    "CartSnapshotModel",
    "encode_items",
    "decode_items",
    "CartStorage",
    "MemoryStorage",
    "SQLAlchemyStorage",
    "CartSnapshotTable",
    # Store
    "CartStore",
)
