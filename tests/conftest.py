"""Fixtures wiring the fakes into engine services."""

import pytest

from mealcart.config import Settings
from mealcart.cart import CartStore, MemoryStorage
from mealcart.discounts import DiscountComposer

from tests.fakes import FakeCatalog, FakeCoupons, FakeGiftCards, meal


@pytest.fixture
def settings() -> Settings:
    return Settings(default_delivery_fee=599)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def cart(storage: MemoryStorage) -> CartStore:
    return CartStore(storage)


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog(meal("m1"), meal("m2", 1099), meal("m3", 749, shelf=2), meal("gift", 650))


@pytest.fixture
def coupons() -> FakeCoupons:
    return FakeCoupons()


@pytest.fixture
def gift_cards() -> FakeGiftCards:
    return FakeGiftCards()


@pytest.fixture
def composer(cart, coupons, gift_cards, catalog, settings) -> DiscountComposer:
    return DiscountComposer(cart, coupons, gift_cards, catalog, settings)
