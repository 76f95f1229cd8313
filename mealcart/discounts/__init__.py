"""
Coupon and gift card composition into one payable total.

    from mealcart import discounts as D

    summary = D.compose_total(
        5394, 399,
        method=FulfillmentMethod.DELIVERY,
        coupon=D.Coupon("SAVE5", D.FixedAmountOff(500)),
    )
    summary.total2   # 5293
"""

from mealcart.discounts._types import (
    PercentageOff,
    FixedAmountOff,
    FreeDelivery,
    FreeItem,
    CouponBenefit,
    Coupon,
    free_item_line_id,
    CouponRecord,
    GiftCard,
    GiftCardRedemption,
    DiscountSummary,
    CouponValidation,
    CouponGateway,
    GiftCardBalance,
    GiftCardGateway,
)
from mealcart.discounts._compose import (
    waives_fee,
    apply_benefit,
    compose_total,
    coupon_label,
    expiry_warning,
)
from mealcart.discounts._apply import AppliedCoupon, DiscountComposer

__all__ = (
    # Coupon union
    "PercentageOff",
    "FixedAmountOff",
    "FreeDelivery",
    "FreeItem",
    "CouponBenefit",
    "Coupon",
    "free_item_line_id",
    "CouponRecord",
    # Gift cards
    "GiftCard",
    "GiftCardRedemption",
    # Pipeline
    "DiscountSummary",
    "waives_fee",
    "apply_benefit",
    "compose_total",
    "coupon_label",
    "expiry_warning",
    # Service
    "AppliedCoupon",
    "DiscountComposer",
    # Collaborators
    "CouponValidation",
    "CouponGateway",
    "GiftCardBalance",
    "GiftCardGateway",
)
