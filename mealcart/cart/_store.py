"""
Injectable cart state container.

    store = CartStore(MemoryStorage())
    await store.rehydrate()
    await store.dispatch(AddItem(CartItem("m1", "Chicken Bowl", 899)))
    store.total_price    # 899

The transition itself is reduce(), synchronous and total. dispatch()
persists afterwards whenever the item list changed; a failed save is
logged and never undoes or blocks the transition.
"""

from __future__ import annotations

import logging

from kungfu import Ok, Error

from mealcart._types import Money
from mealcart.pricing import subtotal
from mealcart.cart._types import (
    CartItem,
    CartState,
    CartAction,
    ReorderContext,
    SetItems,
)
from mealcart.cart._reducer import reduce
from mealcart.cart._codec import encode_items, decode_items, ValidationError
from mealcart.cart._storage import CartStorage, MemoryStorage

log = logging.getLogger(__name__)


class CartStore:
    __slots__ = ("_storage", "_state", "_rehydrated")

    def __init__(
        self,
        storage: CartStorage | None = None,
        state: CartState | None = None,
    ) -> None:
        self._storage: CartStorage = storage if storage is not None else MemoryStorage()
        self._state = state if state is not None else CartState()
        self._rehydrated = False

    # ─── Reads ────────────────────────────────────────────────────────────────

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> tuple[CartItem, ...]:
        return self._state.items

    @property
    def reorder_context(self) -> ReorderContext | None:
        return self._state.reorder_context

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._state.items)

    @property
    def total_price(self) -> Money:
        return subtotal(self._state.items)

    def contains(self, item_id: str) -> bool:
        return self._state.find(item_id) is not None

    # ─── Transitions ──────────────────────────────────────────────────────────

    async def dispatch(self, action: CartAction) -> CartState:
        previous = self._state
        self._state = reduce(previous, action)
        if self._state.items != previous.items:
            await self._persist()
        return self._state

    async def rehydrate(self) -> CartState:
        """Load persisted items once. Corrupt data yields an empty cart."""
        if self._rehydrated:
            return self._state
        self._rehydrated = True

        match await self._storage.load():
            case Ok(None):
                return self._state
            case Ok(payload):
                try:
                    items = decode_items(payload)
                except ValidationError as e:
                    log.warning(f"Discarding unreadable saved cart: {e.error_count()} errors")
                    items = ()
                self._state = reduce(self._state, SetItems(items))
            case Error(e):
                log.warning(f"Could not load saved cart: {e.message}")

        return self._state

    async def _persist(self) -> None:
        match await self._storage.save(encode_items(self._state.items)):
            case Ok(_):
                pass
            case Error(e):
                log.error(f"Could not save cart: {e.message}")


__all__ = ("CartStore",)
