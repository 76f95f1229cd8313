"""
DiscountComposer applies a coupon and a gift card to the cart.

    composer = DiscountComposer(cart, coupons, gift_cards, catalog)

    match await composer.apply_coupon("SAVE5"):
        case Ok(applied): show(applied.label, applied.expiry_warning)
        case Error(e): show_inline(e.message)   # nothing changed

    summary = composer.summarize(fee=399, method=FulfillmentMethod.DELIVERY)
    summary.total2, summary.is_free_order

Applying is provisional: the coupon is only spent, and the gift card only
debited, when the order is persisted upstream.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, UTC

from kungfu import Result, Ok, Error

from mealcart._types import Money, MealId
from mealcart.config import Settings
from mealcart.errors import (
    CouponError,
    CouponErrorKind,
    GiftCardError,
    GiftCardErrorKind,
)
from mealcart.lift import guarded
from mealcart.catalog import CatalogGateway
from mealcart.cart import CartStore, CartItem, AddItem, RemoveItem
from mealcart.fulfillment import FulfillmentMethod
from mealcart.discounts._types import (
    Coupon,
    GiftCard,
    GiftCardRedemption,
    DiscountSummary,
    CouponGateway,
    GiftCardGateway,
    free_item_line_id,
)
from mealcart.discounts._compose import compose_total, coupon_label, expiry_warning

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class AppliedCoupon:
    coupon: Coupon
    label: str
    expiry_warning: str | None = None
    free_item_added: bool = False


@dataclass
class DiscountComposer:
    cart: CartStore
    coupons: CouponGateway
    gift_cards: GiftCardGateway
    catalog: CatalogGateway
    settings: Settings = field(default_factory=Settings)
    clock: Callable[[], datetime] = _utcnow
    _coupon: Coupon | None = field(default=None, init=False)
    _gift_card: GiftCard | None = field(default=None, init=False)

    @property
    def coupon(self) -> Coupon | None:
        return self._coupon

    @property
    def gift_card(self) -> GiftCard | None:
        return self._gift_card

    # ═══════════════════════════════════════════════════════════════════════════
    # Coupons
    # ═══════════════════════════════════════════════════════════════════════════

    async def apply_coupon(self, code: str) -> Result[AppliedCoupon, CouponError]:
        """
        Validate `code` upstream and make it the active coupon.

        A rejected code changes nothing: the previous coupon (if any) and
        the cart stay as they were.
        """
        code = code.strip()
        if not code:
            return Error(CouponError(CouponErrorKind.EMPTY_CODE, "Please enter a coupon code"))

        subtotal = self.cart.total_price
        validated = await guarded(
            lambda: self.coupons.validate_coupon(code, subtotal),
            on_error=lambda e: CouponError(CouponErrorKind.LOOKUP_FAILED, "Failed to validate coupon"),
            what="coupon validation",
        )

        match validated:
            case Error(e):
                return Error(e)
            case Ok(validation) if not validation.valid or validation.coupon is None:
                return Error(CouponError(
                    CouponErrorKind.INVALID,
                    validation.error or "Invalid coupon code",
                ))
            case Ok(validation):
                record = validation.coupon

        coupon = record.to_coupon()
        now = self.clock()
        if coupon is None:
            return Error(CouponError(CouponErrorKind.INVALID, "This coupon has no discount"))
        if not coupon.active:
            return Error(CouponError(CouponErrorKind.INACTIVE, "This coupon is no longer active"))
        if coupon.is_expired(now):
            return Error(CouponError(CouponErrorKind.EXPIRED, "This coupon has expired"))

        if self._coupon is not None and self._coupon.free_item_id != coupon.free_item_id:
            await self._remove_free_item(self._coupon)

        added = False
        if coupon.free_item_id is not None:
            added = await self._add_free_item(coupon.free_item_id)

        self._coupon = coupon
        log.info(f"Applied coupon {coupon.code!r}: {coupon_label(coupon)}")
        return Ok(AppliedCoupon(
            coupon=coupon,
            label=coupon_label(coupon),
            expiry_warning=self.expiry_warning(now),
            free_item_added=added,
        ))

    async def remove_coupon(self) -> None:
        if self._coupon is None:
            return
        await self._remove_free_item(self._coupon)
        log.info(f"Removed coupon {self._coupon.code!r}")
        self._coupon = None

    def expiry_warning(self, now: datetime | None = None) -> str | None:
        if self._coupon is None:
            return None
        return expiry_warning(
            self._coupon.expires_at,
            now or self.clock(),
            window_days=self.settings.expiry_warning_days,
        )

    async def _add_free_item(self, meal_id: MealId) -> bool:
        """Add the free meal once. True only if this call added it."""
        line_id = free_item_line_id(meal_id)
        if self.cart.contains(line_id):
            return False

        fetched = await guarded(
            lambda: self.catalog.get_meal_availability([meal_id]),
            on_error=lambda e: e,
            what="free item",
        )
        match fetched:
            case Ok(meals):
                meal = next((m for m in meals if m.id == meal_id), None)
            case Error(_):
                return False

        if meal is None or not meal.is_active:
            log.info(f"Free item {meal_id!r} is not available; coupon applied without it")
            return False

        await self.cart.dispatch(AddItem(CartItem(
            id=line_id,
            name=f"{meal.name} (FREE)",
            price=0,
            shelf_life_days=meal.shelf_life_days,
        )))
        return True

    async def _remove_free_item(self, coupon: Coupon) -> None:
        if coupon.free_item_id is not None:
            await self.cart.dispatch(RemoveItem(free_item_line_id(coupon.free_item_id)))

    # ═══════════════════════════════════════════════════════════════════════════
    # Gift cards
    # ═══════════════════════════════════════════════════════════════════════════

    async def apply_gift_card(self, code: str) -> Result[GiftCard, GiftCardError]:
        code = code.strip()
        if not code:
            return Error(GiftCardError(GiftCardErrorKind.EMPTY_CODE, "Please enter a gift card code"))

        checked = await guarded(
            lambda: self.gift_cards.check_gift_card_balance(code),
            on_error=lambda e: GiftCardError(GiftCardErrorKind.LOOKUP_FAILED, "Failed to validate gift card"),
            what="gift card",
        )
        match checked:
            case Error(e):
                return Error(e)
            case Ok(balance) if not balance.valid or balance.gift_card_id is None:
                return Error(GiftCardError(
                    GiftCardErrorKind.INVALID,
                    balance.error or "Invalid gift card code",
                ))
            case Ok(balance) if balance.balance <= 0:
                return Error(GiftCardError(GiftCardErrorKind.NO_BALANCE, "This gift card has no remaining balance"))
            case Ok(balance):
                card = GiftCard(code=code, gift_card_id=balance.gift_card_id, balance=balance.balance)

        self._gift_card = card
        log.info(f"Applied gift card {card.gift_card_id!r}")
        return Ok(card)

    def remove_gift_card(self) -> None:
        self._gift_card = None

    # ═══════════════════════════════════════════════════════════════════════════
    # Totals
    # ═══════════════════════════════════════════════════════════════════════════

    def summarize(
        self,
        *,
        fee: Money,
        method: FulfillmentMethod,
        now: datetime | None = None,
    ) -> DiscountSummary:
        subtotal = self.cart.total_price
        summary = compose_total(subtotal, fee, method=method, coupon=self._coupon)
        if self._gift_card is not None:
            redemption = GiftCardRedemption.against(self._gift_card, summary.total1)
            summary = compose_total(
                subtotal, fee, method=method, coupon=self._coupon, gift_card=redemption,
            )
        return replace(summary, expiry_warning=self.expiry_warning(now))


__all__ = ("AppliedCoupon", "DiscountComposer")
