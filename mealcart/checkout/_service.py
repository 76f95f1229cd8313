"""
CheckoutService routes a priced cart to the free-order or paid path.

    service = CheckoutService(cart, composer, payments, orders, settings)

    match await service.checkout(request):
        case Ok(FreeOrderPlaced(order_id)): cart is cleared, done
        case Ok(PaymentRequired(intent)): hand intent.client_secret to the payment UI
        case Error(e): show e.message

    # after the processor confirms
    await service.complete_paid_order(quote, intent)

A fully covered order (total2 == 0) never reaches the payment processor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from kungfu import Result, Ok, Error

from mealcart.config import Settings
from mealcart.errors import CheckoutError, CheckoutErrorKind, CheckoutFailure, QuoteError
from mealcart.lift import guarded
from mealcart.cart import CartStore, ClearCart
from mealcart.discounts import DiscountComposer
from mealcart.fulfillment import CollectionPoint
from mealcart.checkout._types import (
    CheckoutRequest,
    CheckoutQuote,
    OrderDraft,
    PaymentLine,
    PaymentIntentRequest,
    PaymentIntent,
    PaymentGateway,
    OrderGateway,
    FreeOrderPlaced,
    PaymentRequired,
    CheckoutOutcome,
)
from mealcart.checkout._graph import QuoteInput, run_quote

log = logging.getLogger(__name__)


@dataclass
class CheckoutService:
    cart: CartStore
    composer: DiscountComposer
    payments: PaymentGateway
    orders: OrderGateway
    settings: Settings = field(default_factory=Settings)

    async def quote(
        self,
        request: CheckoutRequest,
        *,
        today: date | None = None,
    ) -> Result[CheckoutQuote, QuoteError]:
        return await run_quote(QuoteInput(
            request=request,
            items=self.cart.items,
            composer=self.composer,
            settings=self.settings,
            today=today,
        ))

    async def checkout(
        self,
        request: CheckoutRequest,
        *,
        today: date | None = None,
    ) -> Result[CheckoutOutcome, CheckoutFailure]:
        match await self.quote(request, today=today):
            case Error(e):
                return Error(e)
            case Ok(quote):
                pass

        if quote.is_free_order:
            return await self._place_free_order(quote)

        match await self._create_intent(quote):
            case Error(e):
                return Error(e)
            case Ok(intent):
                log.info(f"Payment intent {intent.intent_id} created for {quote.total}p")
                return Ok(PaymentRequired(intent, quote))

    async def complete_paid_order(
        self,
        quote: CheckoutQuote,
        intent: PaymentIntent,
    ) -> Result[str, CheckoutError]:
        """Persist an order once its payment has been confirmed."""
        draft = OrderDraft.from_quote(
            quote, currency=self.settings.currency, payment_intent_id=intent.intent_id,
        )
        return await self._persist(draft)

    # ─── Internals ────────────────────────────────────────────────────────────

    async def _place_free_order(self, quote: CheckoutQuote) -> Result[CheckoutOutcome, CheckoutFailure]:
        draft = OrderDraft.from_quote(quote, currency=self.settings.currency)
        match await self._persist(draft):
            case Error(e):
                return Error(e)
            case Ok(order_id):
                log.info(f"Free order {order_id} placed (discounts cover {quote.summary.total0}p)")
                return Ok(FreeOrderPlaced(order_id, quote))

    async def _persist(self, draft: OrderDraft) -> Result[str, CheckoutError]:
        match await guarded(
            lambda: self.orders.create_order(draft),
            on_error=lambda e: CheckoutError(CheckoutErrorKind.ORDER_FAILED, "Failed to create order"),
            what="order creation",
        ):
            case Error(e):
                return Error(e)
            case Ok(order_id):
                await self.cart.dispatch(ClearCart())
                await self.composer.remove_coupon()
                self.composer.remove_gift_card()
                return Ok(order_id)

    async def _create_intent(self, quote: CheckoutQuote) -> Result[PaymentIntent, CheckoutError]:
        request = payment_request(quote, currency=self.settings.currency)
        return await guarded(
            lambda: self.payments.create_payment_intent(request),
            on_error=lambda e: CheckoutError(CheckoutErrorKind.PAYMENT_FAILED, "Failed to start payment"),
            what="payment intent",
        )


def payment_request(quote: CheckoutQuote, *, currency: str) -> PaymentIntentRequest:
    summary = quote.summary
    target = quote.request.target
    assert quote.request.delivery_date is not None
    return PaymentIntentRequest(
        currency=currency,
        amount=summary.total2,
        items=tuple(
            PaymentLine(
                meal_id=item.id,
                name=item.name,
                amount=item.price,
                quantity=item.quantity,
                type=item.type.value,
            )
            for item in quote.items
        ),
        delivery_fee=summary.charged_fee,
        delivery_method=quote.request.method.value,
        requested_delivery_date=quote.request.delivery_date,
        production_date=quote.production_date,
        collection_point_id=target.id if isinstance(target, CollectionPoint) else None,
        coupon_code=summary.coupon.code if summary.coupon else None,
        gift_card_code=summary.gift_card.code if summary.gift_card else None,
        gift_card_id=summary.gift_card.gift_card_id if summary.gift_card else None,
        gift_card_amount_used=summary.gift_card_amount,
        customer_email=quote.request.customer_email,
    )


__all__ = ("CheckoutService", "payment_request")
