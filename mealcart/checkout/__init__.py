"""
Quote a cart and route it to payment or a free order.

    from mealcart import checkout as CO

    quote = await service.quote(CO.CheckoutRequest(method, zone, delivery_date))
    outcome = await service.checkout(request)    # FreeOrderPlaced | PaymentRequired
"""

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
from mealcart.checkout._graph import (
    QuoteFailed,
    QuoteInput,
    QuoteNode,
    run_quote,
)
from mealcart.checkout._service import CheckoutService, payment_request

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
    "QuoteFailed",
    "QuoteInput",
    "QuoteNode",
    "run_quote",
    "CheckoutService",
    "payment_request",
)
