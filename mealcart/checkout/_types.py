"""
Checkout request, quote, order draft and payment collaborator shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Protocol

from mealcart._types import Money
from mealcart.cart import CartItem
from mealcart.discounts import (
    DiscountSummary,
    PercentageOff,
    FixedAmountOff,
    FreeDelivery,
    FreeItem,
)
from mealcart.fulfillment import (
    FulfillmentMethod,
    FulfillmentTarget,
    DeliveryZone,
    CollectionPoint,
)


@dataclass(frozen=True, slots=True)
class CheckoutRequest:
    method: FulfillmentMethod
    target: FulfillmentTarget
    delivery_date: date | None
    customer_email: str | None = None
    customer_name: str | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class CheckoutQuote:
    request: CheckoutRequest
    items: tuple[CartItem, ...]
    summary: DiscountSummary
    production_date: date | None

    @property
    def total(self) -> Money:
        return self.summary.total2

    @property
    def is_free_order(self) -> bool:
        return self.summary.is_free_order


# ═══════════════════════════════════════════════════════════════════════════════
# Order Draft
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class OrderDraft:
    """Everything order persistence needs, free or paid."""
    items: tuple[CartItem, ...]
    method: FulfillmentMethod
    delivery_date: date
    production_date: date | None
    summary: DiscountSummary
    currency: str
    zone_id: str | None = None
    collection_point_id: str | None = None
    customer_email: str | None = None
    customer_name: str | None = None
    notes: str | None = None
    payment_intent_id: str | None = None

    @classmethod
    def from_quote(
        cls,
        quote: CheckoutQuote,
        *,
        currency: str,
        payment_intent_id: str | None = None,
    ) -> OrderDraft:
        target = quote.request.target
        assert quote.request.delivery_date is not None
        return cls(
            items=quote.items,
            method=quote.request.method,
            delivery_date=quote.request.delivery_date,
            production_date=quote.production_date,
            summary=quote.summary,
            currency=currency,
            zone_id=target.id if isinstance(target, DeliveryZone) else None,
            collection_point_id=target.id if isinstance(target, CollectionPoint) else None,
            customer_email=quote.request.customer_email,
            customer_name=quote.request.customer_name,
            notes=(quote.request.notes or "").strip() or None,
            payment_intent_id=payment_intent_id,
        )

    @property
    def total(self) -> Money:
        return self.summary.total2

    @property
    def is_package_order(self) -> bool:
        return any(item.is_package for item in self.items)

    def coupon_metadata(self) -> dict[str, Any]:
        """Coupon columns stored with the order."""
        coupon = self.summary.coupon
        meta: dict[str, Any] = {
            "coupon_type": coupon.code if coupon else None,
            "coupon_discount_percentage": 0,
            "coupon_discount_amount": 0,
            "coupon_free_delivery": False,
            "coupon_free_item_id": None,
        }
        if coupon is None:
            return meta
        match coupon.benefit:
            case PercentageOff(percentage):
                meta["coupon_discount_percentage"] = percentage
            case FixedAmountOff(amount):
                meta["coupon_discount_amount"] = amount
            case FreeDelivery():
                meta["coupon_free_delivery"] = True
            case FreeItem(meal_id):
                meta["coupon_free_item_id"] = meal_id
        return meta


# ═══════════════════════════════════════════════════════════════════════════════
# Payment
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class PaymentLine:
    meal_id: str
    name: str
    amount: Money
    quantity: int
    type: str


@dataclass(frozen=True, slots=True)
class PaymentIntentRequest:
    currency: str
    amount: Money
    items: tuple[PaymentLine, ...]
    delivery_fee: Money
    delivery_method: str
    requested_delivery_date: date
    production_date: date | None = None
    collection_point_id: str | None = None
    coupon_code: str | None = None
    gift_card_code: str | None = None
    gift_card_id: str | None = None
    gift_card_amount_used: Money = 0
    customer_email: str | None = None


@dataclass(frozen=True, slots=True)
class PaymentIntent:
    intent_id: str
    client_secret: str


class PaymentGateway(Protocol):
    async def create_payment_intent(self, request: PaymentIntentRequest) -> PaymentIntent:
        ...


class OrderGateway(Protocol):
    async def create_order(self, draft: OrderDraft) -> str:
        """Persist the order, return its id."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Result
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class FreeOrderPlaced:
    order_id: str
    quote: CheckoutQuote


@dataclass(frozen=True, slots=True)
class PaymentRequired:
    intent: PaymentIntent
    quote: CheckoutQuote


type CheckoutOutcome = FreeOrderPlaced | PaymentRequired


__all__ = (
    "CheckoutRequest",
    "CheckoutQuote",
    "OrderDraft",
    "PaymentLine",
    "PaymentIntentRequest",
    "PaymentIntent",
    "PaymentGateway",
    "OrderGateway",
    "FreeOrderPlaced",
    "PaymentRequired",
    "CheckoutOutcome",
)
