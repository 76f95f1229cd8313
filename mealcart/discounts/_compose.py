"""
Discount pipeline. Pure arithmetic, applied in a fixed order:

    1. total0 = subtotal + fee      (fee is 0 under free delivery, delivery only)
    2. total1 = total0 - coupon     (one mechanism; free item is already priced 0)
    3. total2 = total1 - gift card  (always last)

Each step floors at zero and works on the output of the previous one.
"""

import math
from datetime import datetime
from decimal import Decimal

from mealcart._types import Money
from mealcart.pricing import apply_percentage, apply_fixed, clamp, format_money
from mealcart.fulfillment import FulfillmentMethod
from mealcart.discounts._types import (
    Coupon,
    CouponBenefit,
    PercentageOff,
    FixedAmountOff,
    FreeDelivery,
    FreeItem,
    GiftCardRedemption,
    DiscountSummary,
)


def waives_fee(coupon: Coupon | None, method: FulfillmentMethod) -> bool:
    return (
        coupon is not None
        and isinstance(coupon.benefit, FreeDelivery)
        and method is FulfillmentMethod.DELIVERY
    )


def apply_benefit(total: Money, benefit: CouponBenefit) -> Money:
    match benefit:
        case PercentageOff(percentage):
            return apply_percentage(total, percentage)
        case FixedAmountOff(amount):
            return apply_fixed(total, amount)
        case FreeDelivery() | FreeItem():
            return clamp(total)


def compose_total(
    subtotal: Money,
    fee: Money,
    *,
    method: FulfillmentMethod,
    coupon: Coupon | None = None,
    gift_card: GiftCardRedemption | None = None,
) -> DiscountSummary:
    fee_waived = waives_fee(coupon, method)
    total0 = clamp(subtotal + (0 if fee_waived else fee))
    total1 = apply_benefit(total0, coupon.benefit) if coupon else total0
    total2 = apply_fixed(total1, gift_card.amount_to_apply) if gift_card else total1

    return DiscountSummary(
        subtotal=subtotal,
        fee=fee,
        fee_waived=fee_waived,
        total0=total0,
        total1=total1,
        total2=total2,
        coupon=coupon,
        gift_card=gift_card,
        label=coupon_label(coupon) if coupon else None,
    )


def _percent(value: Decimal) -> str:
    # Decimal("10.00") -> "10", Decimal("12.50") -> "12.5"
    return f"{value.normalize():f}"


def coupon_label(coupon: Coupon) -> str:
    match coupon.benefit:
        case PercentageOff(percentage):
            return f"Discount ({_percent(percentage)}%)"
        case FixedAmountOff(amount):
            return f"Discount ({format_money(amount)} off)"
        case FreeDelivery():
            return "Free Delivery"
        case FreeItem():
            return "Free Item"


def expiry_warning(
    expires_at: datetime | None,
    now: datetime,
    *,
    window_days: int = 3,
) -> str | None:
    """Advisory only; never blocks applying the coupon or checking out."""
    if expires_at is None:
        return None
    days = math.ceil((expires_at - now).total_seconds() / 86400)
    if days <= 0 or days > window_days:
        return None
    if days == 1:
        return "Expires tomorrow!"
    return f"Expires in {days} days!"


__all__ = (
    "waives_fee",
    "apply_benefit",
    "compose_total",
    "coupon_label",
    "expiry_warning",
)
