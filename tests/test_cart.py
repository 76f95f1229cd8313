import json
import logging

import pytest
from kungfu import Ok, Error
from pydantic import ValidationError

from mealcart.errors import StorageError
from mealcart.cart import (
    CartItem,
    CartState,
    CartStore,
    ItemType,
    MemoryStorage,
    OrderType,
    PackageData,
    ReorderContext,
    SQLAlchemyStorage,
    UnavailableItem,
    SetItems,
    AddItem,
    AddPackage,
    UpdateQuantity,
    RemoveItem,
    ClearCart,
    SetReorderContext,
    encode_items,
    decode_items,
    reduce,
)

from tests.fakes import item


def package(line_id: str = "pkg-1", price: int = 4500) -> CartItem:
    return CartItem(
        id=line_id,
        name="Family Box",
        price=price,
        type=ItemType.PACKAGE,
        package_data=PackageData("box-6", "Family Box", 6, {"m1": 4, "m2": 2}),
    )


CONTEXT = ReorderContext(
    original_order_id="o-1",
    original_order_type=OrderType.REGULAR,
    unavailable_items=(UnavailableItem("m9", "Retired Curry", 2),),
)


# ── Reducer ────────────────────────────────────────────────────

class TestReduce:

    def test_add_merges_same_meal(self):
        state = reduce(CartState(), AddItem(item("m1")))
        state = reduce(state, AddItem(item("m1")))
        assert len(state.items) == 1
        assert state.items[0].quantity == 2

    def test_add_new_meal_starts_at_one(self):
        state = reduce(CartState(), AddItem(item("m1", quantity=5)))
        assert state.items[0].quantity == 1
        assert state.items[0].type is ItemType.MEAL

    def test_packages_never_merge(self):
        state = reduce(CartState(), AddPackage(package()))
        state = reduce(state, AddPackage(package()))
        state = reduce(state, AddItem(package()))
        assert len(state.items) == 3
        assert all(i.quantity == 1 and i.is_package for i in state.items)

    def test_meal_does_not_merge_into_package_line(self):
        state = reduce(CartState(), AddPackage(package("x")))
        state = reduce(state, AddItem(item("x")))
        assert [i.type for i in state.items] == [ItemType.PACKAGE, ItemType.MEAL]

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_removes(self, quantity):
        state = reduce(CartState(), AddItem(item("m1")))
        state = reduce(state, UpdateQuantity("m1", quantity))
        assert state.items == ()

    def test_update_quantity(self):
        state = reduce(CartState(), AddItem(item("m1")))
        state = reduce(state, UpdateQuantity("m1", 4))
        assert state.items[0].quantity == 4

    def test_update_unknown_line_is_noop(self):
        state = reduce(CartState(), AddItem(item("m1")))
        assert reduce(state, UpdateQuantity("nope", 3)) == state
        assert reduce(state, RemoveItem("nope")) == state

    def test_set_items_drops_empty_lines(self):
        state = reduce(CartState(), SetItems((item("m1", quantity=2), item("m2", quantity=0))))
        assert [i.id for i in state.items] == ["m1"]

    def test_clear_keeps_reorder_context(self):
        state = reduce(CartState(), SetReorderContext(CONTEXT))
        state = reduce(state, AddItem(item("m1")))
        state = reduce(state, ClearCart())
        assert state.items == ()
        assert state.reorder_context == CONTEXT

    def test_package_data_is_frozen(self):
        with pytest.raises(TypeError):
            package().package_data.selected_meals["m3"] = 1


class TestReorderContext:

    def test_resolution(self):
        assert not CONTEXT.is_resolved
        resolved = CONTEXT.with_replacement("m9", "m2")
        assert resolved.is_resolved
        assert resolved.replacements["m9"] == "m2"
        assert CONTEXT.replacements == {}


# ── Codec ──────────────────────────────────────────────────────

class TestCodec:

    def test_camel_case_payload(self):
        payload = json.loads(encode_items((package(),)))
        line = payload["items"][0]
        assert line["shelfLifeDays"] is None
        assert line["type"] == "package"
        assert line["packageData"]["selectedMeals"] == {"m1": 4, "m2": 2}

    def test_reads_back_package(self):
        [line] = decode_items(encode_items((package(),)))
        assert line == package()

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            '{"items": [{"id": "m1", "name": "x", "price": -5, "quantity": 1}]}',
            '{"items": [{"id": "m1", "name": "x", "price": 100, "quantity": 0}]}',
            '{"items": [{"id": "m1", "name": "x", "price": 100, "quantity": 1, "type": "bundle"}]}',
        ],
    )
    def test_rejects_bad_payloads(self, payload):
        with pytest.raises(ValidationError):
            decode_items(payload)


# ── Store ──────────────────────────────────────────────────────

class FailingStorage:

    async def load(self):
        return Error(StorageError("disk gone"))

    async def save(self, payload):
        return Error(StorageError("disk full"))


class TestCartStore:

    async def test_totals(self, cart: CartStore):
        await cart.dispatch(AddItem(item("m1", 899)))
        await cart.dispatch(AddItem(item("m1", 899)))
        await cart.dispatch(AddPackage(package(price=4500)))
        assert cart.total_items == 3
        assert cart.total_price == 899 * 2 + 4500

    async def test_persists_item_changes_only(self, cart: CartStore, storage: MemoryStorage):
        await cart.dispatch(AddItem(item("m1")))
        assert storage.saves == 1
        await cart.dispatch(SetReorderContext(CONTEXT))
        assert storage.saves == 1
        await cart.dispatch(RemoveItem("missing"))
        assert storage.saves == 1

    async def test_reorder_context_is_not_persisted(self, cart: CartStore, storage: MemoryStorage):
        await cart.dispatch(SetReorderContext(CONTEXT))
        await cart.dispatch(AddItem(item("m1")))
        assert "m9" not in storage.payload

    async def test_rehydrate_restores_items(self, storage: MemoryStorage):
        first = CartStore(storage)
        await first.dispatch(AddItem(item("m1")))
        await first.dispatch(AddPackage(package()))

        second = CartStore(storage)
        await second.rehydrate()
        assert second.items == first.items

    async def test_rehydrate_runs_once(self, storage: MemoryStorage):
        store = CartStore(storage)
        await store.rehydrate()
        storage.payload = encode_items((item("m1"),))
        await store.rehydrate()
        assert store.items == ()

    async def test_corrupt_payload_yields_empty_cart(self, caplog):
        store = CartStore(MemoryStorage('{"items": [{"id": 1}]}'))
        with caplog.at_level(logging.WARNING):
            state = await store.rehydrate()
        assert state.items == ()
        assert "unreadable" in caplog.text

    async def test_storage_failures_never_block(self, caplog):
        store = CartStore(FailingStorage())
        assert (await store.rehydrate()).items == ()
        with caplog.at_level(logging.ERROR):
            await store.dispatch(AddItem(item("m1")))
        assert store.total_items == 1
        assert "disk full" in caplog.text


class TestSQLAlchemyStorage:

    async def test_round_trip_through_sqlite(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path}/cart.db"
        storage = await SQLAlchemyStorage.connect(url, key="alice")
        assert await storage.load() == Ok(None)

        store = CartStore(storage)
        await store.dispatch(AddItem(item("m1")))
        await store.dispatch(AddItem(item("m1")))
        await storage.close()

        reopened = await SQLAlchemyStorage.connect(url, key="alice")
        store = CartStore(reopened)
        await store.rehydrate()
        await reopened.close()
        assert store.items == (item("m1", quantity=2),)

    async def test_keys_are_isolated(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path}/cart.db"
        alice = await SQLAlchemyStorage.connect(url, key="alice")
        bob = await SQLAlchemyStorage.connect(url, key="bob")
        try:
            await alice.save('{"items": []}')
            assert await bob.load() == Ok(None)
            assert await alice.load() == Ok('{"items": []}')
        finally:
            await alice.close()
            await bob.close()
