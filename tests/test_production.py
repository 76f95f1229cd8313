from datetime import date, timedelta

import pytest

from mealcart import compute_production_date
from mealcart.production import shortest_shelf_life

from tests.fakes import item

FRIDAY = date(2025, 3, 14)


class TestProductionDate:

    def test_most_perishable_item_wins(self):
        items = [item("a", shelf=5), item("b", shelf=2), item("c", shelf=4)]
        assert compute_production_date(FRIDAY, items) == date(2025, 3, 12)

    def test_items_without_shelf_life_are_ignored(self):
        items = [item("a", shelf=None), item("b", shelf=3)]
        assert shortest_shelf_life(items) == 3
        assert compute_production_date(FRIDAY, items) == date(2025, 3, 11)

    def test_none_without_delivery_date(self):
        assert compute_production_date(None, [item("a")]) is None

    def test_none_without_any_shelf_life(self):
        assert compute_production_date(FRIDAY, [item("a", shelf=None)]) is None
        assert compute_production_date(FRIDAY, []) is None

    def test_crosses_month_boundary(self):
        assert compute_production_date(date(2025, 3, 2), [item("a", shelf=3)]) == date(2025, 2, 27)

    @pytest.mark.parametrize("extra_shelf", [1, 2, 3, 10])
    def test_adding_an_item_never_moves_the_date_earlier(self, extra_shelf):
        items = [item("a", shelf=4), item("b", shelf=6)]
        before = compute_production_date(FRIDAY, items)
        after = compute_production_date(FRIDAY, [*items, item("c", shelf=extra_shelf)])
        assert after >= before

    @pytest.mark.parametrize("longer", [3, 4, 9])
    def test_longer_shelf_life_never_moves_the_date_later(self, longer):
        before = compute_production_date(FRIDAY, [item("a", shelf=2), item("b", shelf=5)])
        after = compute_production_date(FRIDAY, [item("a", shelf=longer), item("b", shelf=5)])
        assert after <= before

    def test_later_delivery_moves_production_later(self):
        items = [item("a", shelf=3)]
        a = compute_production_date(FRIDAY, items)
        b = compute_production_date(FRIDAY + timedelta(days=2), items)
        assert b - a == timedelta(days=2)
