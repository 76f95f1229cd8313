"""
Eligibility rules as pure functions over zones, points and calendar dates.

Dates are calendar days (datetime.date), never instants. "Today" is an
explicit parameter defaulting to the local calendar day.
"""

import re
from collections.abc import Iterable
from datetime import date, timedelta

from kungfu import Result, Ok, Error, is_ok

from mealcart._types import Money
from mealcart.pricing import format_money
from mealcart.errors import EligibilityError, EligibilityErrorKind as K, InputError, InputErrorKind
from mealcart.fulfillment._types import (
    WEEKDAYS,
    FulfillmentMethod,
    DeliveryZone,
    CollectionPoint,
    FulfillmentTarget,
    InsufficientPostcode,
    NoDeliveryZone,
    ZoneMatched,
    PostcodeCheck,
)

_NON_ALNUM = re.compile(r"[^A-Z0-9]")
_UK_POSTCODE = re.compile(r"^([A-Z]{1,2}\d[A-Z\d]?)(\d[A-Z]{2})$")


# ═══════════════════════════════════════════════════════════════════════════════
# Postcodes
# ═══════════════════════════════════════════════════════════════════════════════

def normalize_postcode(postcode: str) -> str:
    """'ta6 5lt' -> 'TA65LT'"""
    return _NON_ALNUM.sub("", postcode.upper())


def outward_code(postcode: str) -> str:
    """
    Area part of a UK postcode: 'TA6 5LT' -> 'TA6'.

    Falls back to the whole normalized postcode when it does not look
    like a UK postcode.
    """
    normalized = normalize_postcode(postcode)
    match = _UK_POSTCODE.match(normalized)
    return match.group(1) if match else normalized


def resolve_zone(postcode: str, zones: Iterable[DeliveryZone]) -> DeliveryZone | None:
    """
    Find the zone delivering to `postcode`.

    An exact postcode match in any zone beats a prefix match in any zone.
    A prefix matches when it leads either the full postcode or its
    outward code; prefixes longer than the outward code (e.g. 'TA65')
    can only ever match the full postcode.
    """
    zones = tuple(zones)
    normalized = normalize_postcode(postcode)
    if not normalized:
        return None
    outward = outward_code(normalized)

    for zone in zones:
        if any(normalize_postcode(p) == normalized for p in zone.postcodes):
            return zone

    for zone in zones:
        for prefix in zone.postcode_prefixes:
            clean = normalize_postcode(prefix)
            if clean and (normalized.startswith(clean) or outward.startswith(clean)):
                return zone

    return None


def check_postcode(
    postcode: str,
    zones: Iterable[DeliveryZone],
    *,
    min_length: int = 4,
) -> PostcodeCheck:
    normalized = normalize_postcode(postcode)
    if len(normalized) < min_length:
        return InsufficientPostcode(normalized)
    zone = resolve_zone(normalized, zones)
    if zone is None:
        return NoDeliveryZone(normalized)
    return ZoneMatched(normalized, zone)


def zone_from_check(check: PostcodeCheck) -> Result[DeliveryZone, InputError | EligibilityError]:
    """Collapse a postcode check into the zone, or why there is none."""
    match check:
        case ZoneMatched(_, zone):
            return Ok(zone)
        case NoDeliveryZone(postcode):
            return Error(EligibilityError(K.NO_ZONE, f"We don't deliver to {postcode} yet"))
        case InsufficientPostcode(_):
            return Error(InputError(InputErrorKind.POSTCODE_INCOMPLETE, "Please enter your full postcode"))


# ═══════════════════════════════════════════════════════════════════════════════
# Dates
# ═══════════════════════════════════════════════════════════════════════════════

def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def earliest_date(today: date | None = None) -> date:
    """Tomorrow. Nothing is fulfilled same-day."""
    return (today or date.today()) + timedelta(days=1)


def check_date(
    method: FulfillmentMethod,
    target: FulfillmentTarget,
    day: date,
    *,
    today: date | None = None,
) -> Result[date, EligibilityError]:
    """Ok(day) if `target` fulfils `method` on `day`, else the reason why not."""
    match method:
        case FulfillmentMethod.DELIVERY:
            if not isinstance(target, DeliveryZone):
                return Error(EligibilityError(K.NO_ZONE, "We don't deliver to this postcode yet"))
            offered = target.delivers_on(weekday_name(day))
        case FulfillmentMethod.COLLECTION:
            if not isinstance(target, CollectionPoint) or not target.is_active:
                return Error(EligibilityError(K.NO_COLLECTION_POINT, "Please select a collection point"))
            offered = target.collects_on(weekday_name(day))

    if day < earliest_date(today):
        return Error(EligibilityError(
            K.DATE_TOO_EARLY,
            f"Earliest available date is {earliest_date(today).isoformat()}",
        ))
    if not offered:
        return Error(EligibilityError(
            K.DATE_UNAVAILABLE,
            f"{method.value.capitalize()} is not available on {weekday_name(day).capitalize()}s",
        ))
    return Ok(day)


def is_eligible_for_date(
    method: FulfillmentMethod,
    target: FulfillmentTarget,
    day: date,
    *,
    today: date | None = None,
) -> bool:
    return is_ok(check_date(method, target, day, today=today))


def available_dates(
    method: FulfillmentMethod,
    target: FulfillmentTarget,
    *,
    today: date | None = None,
    window: int = 14,
) -> list[date]:
    """Eligible days from tomorrow through `window` days ahead."""
    start = today or date.today()
    days = (start + timedelta(days=offset) for offset in range(1, window + 1))
    return [d for d in days if is_eligible_for_date(method, target, d, today=start)]


# ═══════════════════════════════════════════════════════════════════════════════
# Fees
# ═══════════════════════════════════════════════════════════════════════════════

def fee_for(
    method: FulfillmentMethod,
    target: FulfillmentTarget,
    *,
    default_delivery_fee: Money | None = None,
) -> Result[Money, EligibilityError]:
    """
    Fee for fulfilling via `target`.

    A zero fee is only ever returned when it was configured as zero;
    missing data is an error, not a free delivery.
    """
    match method:
        case FulfillmentMethod.DELIVERY:
            if not isinstance(target, DeliveryZone):
                return Error(EligibilityError(K.NO_ZONE, "No delivery zone resolved"))
            if target.delivery_fee is not None:
                return Ok(target.delivery_fee)
            if default_delivery_fee is not None:
                return Ok(default_delivery_fee)
            return Error(EligibilityError(
                K.FEE_UNCONFIGURED,
                f"No delivery fee configured for zone {target.zone_name!r}",
            ))
        case FulfillmentMethod.COLLECTION:
            if not isinstance(target, CollectionPoint):
                return Error(EligibilityError(K.NO_COLLECTION_POINT, "No collection point selected"))
            if target.collection_fee is None:
                return Error(EligibilityError(
                    K.FEE_UNCONFIGURED,
                    f"No collection fee configured for {target.point_name!r}",
                ))
            return Ok(target.collection_fee)


def meets_minimum_order(
    method: FulfillmentMethod,
    target: FulfillmentTarget,
    subtotal: Money,
) -> Result[Money, EligibilityError]:
    """Delivery zones may require a minimum subtotal. Collection never does."""
    if method is FulfillmentMethod.DELIVERY and isinstance(target, DeliveryZone):
        if subtotal < target.minimum_order:
            shortfall = target.minimum_order - subtotal
            return Error(EligibilityError(
                K.BELOW_MINIMUM,
                f"Add {format_money(shortfall)} more to reach the minimum order for {target.zone_name}",
            ))
    return Ok(subtotal)


__all__ = (
    "normalize_postcode",
    "outward_code",
    "resolve_zone",
    "check_postcode",
    "zone_from_check",
    "weekday_name",
    "earliest_date",
    "check_date",
    "is_eligible_for_date",
    "available_dates",
    "fee_for",
    "meets_minimum_order",
)
