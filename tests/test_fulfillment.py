import asyncio
from datetime import date, timedelta

import pytest
from kungfu import Ok, Error

from mealcart import fulfillment as F
from mealcart.errors import EligibilityErrorKind, InputErrorKind

from tests.fakes import FakeFulfillment, TODAY

M = F.FulfillmentMethod

TAUNTON = F.DeliveryZone(
    id="z1",
    zone_name="Taunton",
    postcodes=("TA6 5LT", "ta1 1aa"),
    postcode_prefixes=("TA2",),
    delivery_days=("Monday", "wednesday", "friday"),
    delivery_fee=399,
    minimum_order=2000,
)
LONDON = F.DeliveryZone(
    id="z2",
    zone_name="Westminster",
    postcode_prefixes=("SW1A",),
    delivery_days=("tuesday",),
)
BROAD = F.DeliveryZone(
    id="z3",
    zone_name="Somerset",
    postcode_prefixes=("TA",),
    delivery_days=("thursday",),
    delivery_fee=0,
)
SHOP = F.CollectionPoint(
    id="p1",
    point_name="Kitchen Shop",
    collection_days=("saturday",),
    collection_fee=0,
)


# ── Postcodes ──────────────────────────────────────────────────

class TestResolveZone:

    @pytest.mark.parametrize("postcode", ["TA6 5LT", "ta65lt", "Ta6-5lt", " TA6  5LT "])
    def test_exact_match_ignores_casing_and_punctuation(self, postcode):
        assert F.resolve_zone(postcode, [TAUNTON]) is TAUNTON

    def test_prefix_on_full_postcode(self):
        assert F.resolve_zone("SW1A1AA", [LONDON]) is LONDON

    def test_prefix_on_outward_code(self):
        assert F.outward_code("TA2 8QX") == "TA2"
        assert F.resolve_zone("TA2 8QX", [TAUNTON]) is TAUNTON

    def test_exact_beats_earlier_prefix(self):
        # BROAD is listed first and its "TA" prefix matches, but TAUNTON lists the postcode exactly
        assert F.resolve_zone("TA6 5LT", [BROAD, TAUNTON]) is TAUNTON

    def test_no_match_is_none(self):
        assert F.resolve_zone("EH1 1YZ", [TAUNTON, LONDON]) is None

    def test_empty_postcode_matches_nothing(self):
        assert F.resolve_zone("  ", [TAUNTON, LONDON, BROAD]) is None


class TestCheckPostcode:

    def test_short_input_is_not_a_negative(self):
        check = F.check_postcode("TA6", [TAUNTON])
        assert check == F.InsufficientPostcode("TA6")
        assert F.zone_from_check(check).error.kind is InputErrorKind.POSTCODE_INCOMPLETE

    def test_no_zone(self):
        check = F.check_postcode("EH1 1YZ", [TAUNTON])
        assert isinstance(check, F.NoDeliveryZone)
        assert F.zone_from_check(check).error.kind is EligibilityErrorKind.NO_ZONE

    def test_matched(self):
        check = F.check_postcode("ta6 5lt", [TAUNTON])
        assert check == F.ZoneMatched("TA65LT", TAUNTON)
        assert F.zone_from_check(check) == Ok(TAUNTON)


# ── Dates ──────────────────────────────────────────────────────

class TestDates:

    @pytest.mark.parametrize("offset", [0, -1, -3, -7, -30])
    def test_nothing_before_tomorrow(self, offset):
        day = TODAY + timedelta(days=offset)
        everyday = F.DeliveryZone("z", "All week", delivery_days=F.WEEKDAYS)
        assert not F.is_eligible_for_date(M.DELIVERY, everyday, day, today=TODAY)
        result = F.check_date(M.DELIVERY, everyday, day, today=TODAY)
        assert result.error.kind is EligibilityErrorKind.DATE_TOO_EARLY

    def test_delivery_day_matches_case_insensitively(self):
        wednesday = date(2025, 3, 12)
        assert F.is_eligible_for_date(M.DELIVERY, TAUNTON, wednesday, today=TODAY)

    def test_delivery_on_other_weekday_is_unavailable(self):
        tuesday = date(2025, 3, 11)
        result = F.check_date(M.DELIVERY, TAUNTON, tuesday, today=TODAY)
        assert result.error.kind is EligibilityErrorKind.DATE_UNAVAILABLE

    def test_no_zone_means_no_date(self):
        result = F.check_date(M.DELIVERY, None, date(2025, 3, 12), today=TODAY)
        assert result.error.kind is EligibilityErrorKind.NO_ZONE

    def test_collection_needs_a_point(self):
        saturday = date(2025, 3, 15)
        assert F.is_eligible_for_date(M.COLLECTION, SHOP, saturday, today=TODAY)
        assert not F.is_eligible_for_date(M.COLLECTION, None, saturday, today=TODAY)
        assert not F.is_eligible_for_date(M.COLLECTION, TAUNTON, saturday, today=TODAY)

    def test_available_dates_within_window(self):
        days = F.available_dates(M.DELIVERY, TAUNTON, today=TODAY, window=14)
        assert days[0] == date(2025, 3, 12)
        assert all(d > TODAY for d in days)
        assert {F.weekday_name(d) for d in days} == {"monday", "wednesday", "friday"}
        assert len(days) == 6

    def test_available_dates_without_point(self):
        assert F.available_dates(M.COLLECTION, None, today=TODAY) == []


# ── Fees ───────────────────────────────────────────────────────

class TestFees:

    def test_zone_fee(self):
        assert F.fee_for(M.DELIVERY, TAUNTON) == Ok(399)

    def test_explicit_zero_is_honoured(self):
        assert F.fee_for(M.DELIVERY, BROAD) == Ok(0)
        assert F.fee_for(M.COLLECTION, SHOP) == Ok(0)

    def test_missing_zone_fee_uses_default(self):
        assert F.fee_for(M.DELIVERY, LONDON, default_delivery_fee=599) == Ok(599)

    def test_missing_fee_without_default_is_an_error(self):
        result = F.fee_for(M.DELIVERY, LONDON)
        assert result.error.kind is EligibilityErrorKind.FEE_UNCONFIGURED

    def test_no_zone_is_not_free(self):
        result = F.fee_for(M.DELIVERY, None, default_delivery_fee=599)
        assert result.error.kind is EligibilityErrorKind.NO_ZONE

    def test_collection_point_without_fee(self):
        point = F.CollectionPoint("p2", "Pop-up", collection_days=("monday",))
        assert F.fee_for(M.COLLECTION, point).error.kind is EligibilityErrorKind.FEE_UNCONFIGURED

    def test_minimum_order(self):
        assert F.meets_minimum_order(M.DELIVERY, TAUNTON, 2500) == Ok(2500)
        below = F.meets_minimum_order(M.DELIVERY, TAUNTON, 1500)
        assert below.error.kind is EligibilityErrorKind.BELOW_MINIMUM
        assert "£5.00" in below.error.message
        assert F.meets_minimum_order(M.COLLECTION, SHOP, 100) == Ok(100)


# ── Lookups ────────────────────────────────────────────────────

class TestReferenceData:

    async def test_loads_active_zones_and_points(self):
        closed = F.CollectionPoint("p0", "Closed", is_active=False)
        gateway = FakeFulfillment([TAUNTON, LONDON], [SHOP, closed])
        match await F.load_reference_data(gateway):
            case Ok(data):
                assert data.zones == (TAUNTON, LONDON)
                assert data.collection_points == (SHOP,)
                assert data.collection_point("p1") is SHOP
            case Error(e):
                pytest.fail(e.message)

    async def test_failure_is_a_lookup_error(self):
        gateway = FakeFulfillment([TAUNTON], [SHOP])
        gateway.fail_zones = True
        result = await F.load_reference_data(gateway)
        assert result.error.kind is EligibilityErrorKind.LOOKUP_FAILED


class TestPostcodeChecker:

    async def test_short_postcode_skips_lookup(self):
        gateway = FakeFulfillment([TAUNTON])
        gateway.fail_zones = True
        checker = F.PostcodeChecker(gateway)
        assert await checker.check("TA") == Ok(F.InsufficientPostcode("TA"))

    async def test_match(self):
        checker = F.PostcodeChecker(FakeFulfillment([TAUNTON, LONDON]))
        assert await checker.check("sw1a 1aa") == Ok(F.ZoneMatched("SW1A1AA", LONDON))

    async def test_superseded_response_is_stale(self):
        gateway = FakeFulfillment([TAUNTON, LONDON])
        first_gate, second_gate = asyncio.Event(), asyncio.Event()
        gateway.gates = [first_gate, second_gate]
        checker = F.PostcodeChecker(gateway)

        first = asyncio.create_task(checker.check("TA6 5LT"))
        await asyncio.sleep(0)
        second = asyncio.create_task(checker.check("SW1A 1AA"))
        await asyncio.sleep(0)

        # the newer lookup answers first, then the older one arrives late
        second_gate.set()
        assert await second == Ok(F.ZoneMatched("SW1A1AA", LONDON))
        first_gate.set()
        assert await first == Ok(F.StaleLookup(1))

    async def test_lookup_failure(self):
        gateway = FakeFulfillment([TAUNTON])
        gateway.fail_zones = True
        result = await F.PostcodeChecker(gateway).check("TA6 5LT")
        assert result.error.kind is EligibilityErrorKind.LOOKUP_FAILED
