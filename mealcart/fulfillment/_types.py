"""
Zones, collection points and postcode lookup outcomes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from mealcart._types import Money

# date.weekday() order
WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class FulfillmentMethod(Enum):
    DELIVERY = "delivery"
    COLLECTION = "collection"


# ═══════════════════════════════════════════════════════════════════════════════
# Reference data (read-only)
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class DeliveryZone:
    """
    A delivery area. Postcodes match exactly, prefixes match the leading
    part of the postcode or its outward code.

    delivery_fee=None means the zone defers to the configured default fee.
    """
    id: str
    zone_name: str
    postcodes: tuple[str, ...] = ()
    postcode_prefixes: tuple[str, ...] = ()
    delivery_days: tuple[str, ...] = ()
    delivery_fee: Money | None = None
    minimum_order: Money = 0
    is_active: bool = True

    def delivers_on(self, weekday: str) -> bool:
        return _offers(self.delivery_days, weekday)


@dataclass(frozen=True, slots=True)
class CollectionPoint:
    id: str
    point_name: str
    collection_days: tuple[str, ...] = ()
    collection_fee: Money | None = None
    address: str = ""
    postcode: str = ""
    is_active: bool = True

    def collects_on(self, weekday: str) -> bool:
        return _offers(self.collection_days, weekday)


def _offers(days: Sequence[str], weekday: str) -> bool:
    wanted = weekday.strip().lower()
    return any(day.strip().lower() == wanted for day in days)


type FulfillmentTarget = DeliveryZone | CollectionPoint | None
"""Resolved zone (delivery) or selected point (collection); None if unresolved."""


# ═══════════════════════════════════════════════════════════════════════════════
# Postcode lookup outcomes
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class InsufficientPostcode:
    """Too short to check yet. Not the same thing as "no zone"."""
    postcode: str


@dataclass(frozen=True, slots=True)
class NoDeliveryZone:
    """Checked, and no zone delivers there."""
    postcode: str


@dataclass(frozen=True, slots=True)
class ZoneMatched:
    postcode: str
    zone: DeliveryZone


@dataclass(frozen=True, slots=True)
class StaleLookup:
    """Response to a lookup that a newer lookup has superseded. Discard it."""
    token: int


type PostcodeCheck = InsufficientPostcode | NoDeliveryZone | ZoneMatched


# ═══════════════════════════════════════════════════════════════════════════════
# Collaborator
# ═══════════════════════════════════════════════════════════════════════════════

class FulfillmentGateway(Protocol):
    """Reference-data source for zones and collection points."""

    async def list_active_delivery_zones(self) -> Sequence[DeliveryZone]:
        ...

    async def list_active_collection_points(self) -> Sequence[CollectionPoint]:
        ...


__all__ = (
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
)
