"""
Fulfillment: delivery zones, collection points, date and fee eligibility.

    from mealcart import fulfillment as F

    F.resolve_zone("ta6 5lt", zones)                  # DeliveryZone | None
    F.check_date(F.FulfillmentMethod.DELIVERY, zone, day)   # Result[date, EligibilityError]
    F.fee_for(F.FulfillmentMethod.COLLECTION, point)        # Result[Money, EligibilityError]

    data = await F.load_reference_data(gateway)       # zones + points, concurrently
"""

from mealcart.fulfillment._types import (
    WEEKDAYS,
    FulfillmentMethod,
    DeliveryZone,
    CollectionPoint,
    FulfillmentTarget,
    InsufficientPostcode,
    NoDeliveryZone,
    ZoneMatched,
    StaleLookup,
    PostcodeCheck,
    FulfillmentGateway,
)
from mealcart.fulfillment._resolve import (
    normalize_postcode,
    outward_code,
    resolve_zone,
    check_postcode,
    zone_from_check,
    weekday_name,
    earliest_date,
    check_date,
    is_eligible_for_date,
    available_dates,
    fee_for,
    meets_minimum_order,
)
from mealcart.fulfillment._lookup import (
    ReferenceData,
    load_reference_data,
    PostcodeChecker,
)

__all__ = (
    # Types
    "WEEKDAYS",
    "FulfillmentMethod",
    "DeliveryZone",
    "CollectionPoint",
    "FulfillmentTarget",
    "InsufficientPostcode",
    "NoDeliveryZone",
    "ZoneMatched",
    "StaleLookup",
    "PostcodeCheck",
    "FulfillmentGateway",
    # Rules
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
    # Lookups
    "ReferenceData",
    "load_reference_data",
    "PostcodeChecker",
)
