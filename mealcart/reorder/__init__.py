"""
Rebuild a cart from a past order against the live catalog.

    from mealcart import reorder as R

    outcome = await R.ReorderReconciler(cart, orders, catalog).start("ord-42")
    outcome.status        # APPLIED | AWAITING_REPLACEMENT | FAILED
"""

from mealcart.cart import OrderType
from mealcart.reorder._types import (
    ReorderStatus,
    OrderLine,
    PackageSnapshot,
    HistoricalOrder,
    OrderHistoryGateway,
    CouponAdvisory,
    ReorderOutcome,
)
from mealcart.reorder._reconcile import partition, ReorderReconciler, ALL_ADDED

__all__ = (
    "OrderType",
    "ReorderStatus",
    "OrderLine",
    "PackageSnapshot",
    "HistoricalOrder",
    "OrderHistoryGateway",
    "CouponAdvisory",
    "ReorderOutcome",
    "partition",
    "ReorderReconciler",
    "ALL_ADDED",
)
