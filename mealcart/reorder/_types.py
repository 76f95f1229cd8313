"""
Historical orders, reorder outcomes and the order-history collaborator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from mealcart._types import Money, MealId
from mealcart.errors import ReconciliationFetchError
from mealcart.cart import CartItem, OrderType, UnavailableItem


class ReorderStatus(Enum):
    """
    idle -> fetching -> applied
                     -> awaiting_replacement -> applied
                     -> failed
    """
    IDLE = auto()
    FETCHING = auto()
    APPLIED = auto()
    AWAITING_REPLACEMENT = auto()
    FAILED = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Historical Order
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class OrderLine:
    """An order item (regular) or a meal selection (package)."""
    meal_id: MealId
    meal_name: str
    quantity: int
    unit_price: Money | None = None


@dataclass(frozen=True, slots=True)
class PackageSnapshot:
    package_id: str
    package_name: str
    meal_count: int
    price: Money
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class HistoricalOrder:
    id: str
    order_type: OrderType
    lines: tuple[OrderLine, ...]
    package: PackageSnapshot | None = None
    coupon_code: str | None = None


class OrderHistoryGateway(Protocol):
    async def get_order(self, order_id: str, order_type: OrderType) -> HistoricalOrder | None:
        """None when no such order exists."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Outcome
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class CouponAdvisory:
    """Whether the original order's coupon would still apply. Never blocking."""
    code: str
    still_valid: bool
    message: str


@dataclass(frozen=True, slots=True)
class ReorderOutcome:
    status: ReorderStatus
    order_id: str
    message: str
    added: tuple[CartItem, ...] = ()
    unavailable: tuple[UnavailableItem, ...] = ()
    coupon_advisory: CouponAdvisory | None = None
    error: ReconciliationFetchError | None = None

    @property
    def success(self) -> bool:
        return self.status in (ReorderStatus.APPLIED, ReorderStatus.AWAITING_REPLACEMENT)

    @property
    def needs_replacements(self) -> bool:
        return self.status is ReorderStatus.AWAITING_REPLACEMENT


__all__ = (
    "ReorderStatus",
    "OrderLine",
    "PackageSnapshot",
    "HistoricalOrder",
    "OrderHistoryGateway",
    "CouponAdvisory",
    "ReorderOutcome",
)
