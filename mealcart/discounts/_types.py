"""
Discount types: the coupon benefit union, gift cards and the summary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from decimal import Decimal
from typing import Protocol

from mealcart._types import Money, MealId

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Coupon Benefit (one mechanism per coupon)
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class PercentageOff:
    percentage: Decimal


@dataclass(frozen=True, slots=True)
class FixedAmountOff:
    amount: Money


@dataclass(frozen=True, slots=True)
class FreeDelivery:
    pass


@dataclass(frozen=True, slots=True)
class FreeItem:
    meal_id: MealId


type CouponBenefit = PercentageOff | FixedAmountOff | FreeDelivery | FreeItem


@dataclass(frozen=True, slots=True)
class Coupon:
    code: str
    benefit: CouponBenefit
    expires_at: datetime | None = None
    active: bool = True

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    @property
    def free_item_id(self) -> MealId | None:
        match self.benefit:
            case FreeItem(meal_id):
                return meal_id
            case _:
                return None


def free_item_line_id(meal_id: MealId) -> str:
    """Cart line id for a coupon's free item: free-<mealId>."""
    return f"free-{meal_id}"


# ═══════════════════════════════════════════════════════════════════════════════
# Coupon Record (raw collaborator shape)
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class CouponRecord:
    """
    Coupon row as stored upstream, where several mechanisms can be set at
    once. to_coupon() narrows it to a single benefit by fixed priority:
    percentage > fixed amount > free delivery > free item.
    """
    code: str
    discount_percentage: Decimal | int | None = None
    discount_amount: Money | None = None
    free_delivery: bool = False
    free_item_id: MealId | None = None
    expires_at: datetime | None = None
    active: bool = True

    def benefits(self) -> list[CouponBenefit]:
        found: list[CouponBenefit] = []
        if self.discount_percentage:
            found.append(PercentageOff(Decimal(self.discount_percentage)))
        if self.discount_amount:
            found.append(FixedAmountOff(self.discount_amount))
        if self.free_delivery:
            found.append(FreeDelivery())
        if self.free_item_id:
            found.append(FreeItem(self.free_item_id))
        return found

    def to_coupon(self) -> Coupon | None:
        """None when the record grants nothing at all."""
        found = self.benefits()
        if not found:
            return None
        if len(found) > 1:
            # data-quality signal, not a user-facing error
            log.warning(
                f"Coupon {self.code!r} sets {len(found)} discount mechanisms; "
                f"using {type(found[0]).__name__}"
            )
        return Coupon(
            code=self.code,
            benefit=found[0],
            expires_at=_as_utc(self.expires_at),
            active=self.active,
        )


def _as_utc(moment: datetime | None) -> datetime | None:
    """Upstream timestamps without a zone are UTC."""
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


# ═══════════════════════════════════════════════════════════════════════════════
# Gift Cards
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class GiftCard:
    """A validated gift card and its remaining balance."""
    code: str
    gift_card_id: str
    balance: Money


@dataclass(frozen=True, slots=True)
class GiftCardRedemption:
    """
    Provisional use of a gift card against one total.

    amount_to_apply <= balance and <= the total after other discounts.
    The balance is only deducted upstream once the order is persisted.
    """
    code: str
    gift_card_id: str
    amount_to_apply: Money

    @classmethod
    def against(cls, card: GiftCard, total: Money) -> GiftCardRedemption:
        return cls(card.code, card.gift_card_id, max(0, min(card.balance, total)))


# ═══════════════════════════════════════════════════════════════════════════════
# Summary
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class DiscountSummary:
    """
    Every intermediate of the discount pipeline:

        total0 = subtotal + fee            (fee waived by free delivery)
        total1 = total0 after the coupon
        total2 = total1 after the gift card
    """
    subtotal: Money
    fee: Money
    fee_waived: bool
    total0: Money
    total1: Money
    total2: Money
    coupon: Coupon | None = None
    gift_card: GiftCardRedemption | None = None
    label: str | None = None
    expiry_warning: str | None = None

    @property
    def coupon_discount(self) -> Money:
        return self.total0 - self.total1

    @property
    def gift_card_amount(self) -> Money:
        return self.total1 - self.total2

    @property
    def charged_fee(self) -> Money:
        return 0 if self.fee_waived else self.fee

    @property
    def is_free_order(self) -> bool:
        return self.total2 == 0


# ═══════════════════════════════════════════════════════════════════════════════
# Collaborators
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class CouponValidation:
    valid: bool
    coupon: CouponRecord | None = None
    error: str | None = None


class CouponGateway(Protocol):
    async def validate_coupon(self, code: str, subtotal: Money) -> CouponValidation:
        """Authority on expiry and minimum-order rules."""
        ...


@dataclass(frozen=True, slots=True)
class GiftCardBalance:
    valid: bool
    balance: Money = 0
    gift_card_id: str | None = None
    error: str | None = None


class GiftCardGateway(Protocol):
    async def check_gift_card_balance(self, code: str) -> GiftCardBalance:
        ...


__all__ = (
    "PercentageOff",
    "FixedAmountOff",
    "FreeDelivery",
    "FreeItem",
    "CouponBenefit",
    "Coupon",
    "free_item_line_id",
    "CouponRecord",
    "GiftCard",
    "GiftCardRedemption",
    "DiscountSummary",
    "CouponValidation",
    "CouponGateway",
    "GiftCardBalance",
    "GiftCardGateway",
)
