"""
Lookups against the fulfillment collaborator.

Zones and collection points are independent, so they are fetched
together. Postcode checks are token-stamped: when the user edits the
postcode again before a check returns, the older response is reported as
StaleLookup and must be dropped by the caller.
"""

import logging
from dataclasses import dataclass, field

from kungfu import Ok, Error, Result, LazyCoroResult

import combinators as C
from mealcart.errors import EligibilityError
from mealcart.lift import guarded
from mealcart.fulfillment._types import (
    DeliveryZone,
    CollectionPoint,
    FulfillmentGateway,
    InsufficientPostcode,
    PostcodeCheck,
    StaleLookup,
)
from mealcart.fulfillment._resolve import check_postcode, normalize_postcode

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReferenceData:
    """Snapshot of active zones and collection points."""
    zones: tuple[DeliveryZone, ...]
    collection_points: tuple[CollectionPoint, ...]

    def collection_point(self, point_id: str) -> CollectionPoint | None:
        for point in self.collection_points:
            if point.id == point_id:
                return point
        return None


def load_reference_data(
    gateway: FulfillmentGateway,
) -> LazyCoroResult[ReferenceData, EligibilityError]:
    """
    Fetch zones and collection points concurrently.

        match await load_reference_data(gateway):
            case Ok(data): ...
            case Error(e): ...  # e.kind is LOOKUP_FAILED
    """
    fetch_zones = guarded(
        gateway.list_active_delivery_zones,
        on_error=lambda e: EligibilityError.lookup_failed(str(e)),
        what="delivery zones",
    )
    fetch_points = guarded(
        gateway.list_active_collection_points,
        on_error=lambda e: EligibilityError.lookup_failed(str(e)),
        what="collection points",
    )
    return C.parallel(fetch_zones, fetch_points).map(_build_reference_data)


def _build_reference_data(results: list) -> ReferenceData:
    zones, points = results
    data = ReferenceData(
        zones=tuple(z for z in zones if z.is_active),
        collection_points=tuple(
            sorted((p for p in points if p.is_active), key=lambda p: p.point_name)
        ),
    )
    log.info(
        f"Loaded {len(data.zones)} delivery zones, "
        f"{len(data.collection_points)} collection points"
    )
    return data


@dataclass
class PostcodeChecker:
    """
    Resolve postcodes against live zones, discarding superseded responses.

    Every call to check() takes a new token. A response is only returned
    as-is if its token is still the latest issued when it arrives.
    """
    gateway: FulfillmentGateway
    min_length: int = 4
    _latest: int = field(default=0, init=False)

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest

    async def check(
        self, postcode: str
    ) -> Result[PostcodeCheck | StaleLookup, EligibilityError]:
        token = self.issue()
        normalized = normalize_postcode(postcode)
        if len(normalized) < self.min_length:
            return Ok(InsufficientPostcode(normalized))

        result = await guarded(
            self.gateway.list_active_delivery_zones,
            on_error=lambda e: EligibilityError.lookup_failed(str(e)),
            what="delivery zones",
        )

        if not self.is_current(token):
            log.debug(f"Discarding stale postcode lookup #{token} for {normalized}")
            return Ok(StaleLookup(token))

        match result:
            case Ok(zones):
                active = [z for z in zones if z.is_active]
                return Ok(check_postcode(normalized, active, min_length=self.min_length))
            case Error(e):
                return Error(e)


__all__ = (
    "ReferenceData",
    "load_reference_data",
    "PostcodeChecker",
)
