"""
Quote graph: nodnod nodes that price a checkout.

    QuoteInputNode ─┬─> ItemsNode ────────┬─> ProductionDateNode ─┐
                    ├─> DeliveryDateNode ─┘                       ├─> QuoteNode
                    └─> FeeNode ──> DiscountNode ─────────────────┘

A node that cannot proceed raises QuoteFailed carrying a typed error;
run_quote() turns it back into Error(...).
"""

import logging
from dataclasses import dataclass
from datetime import date

from nodnod import scalar_node as node, Scope, Value, EventLoopAgent
from kungfu import Result, Ok, Error

from mealcart._types import Money
from mealcart.config import Settings
from mealcart.errors import InputError, InputErrorKind, QuoteError
from mealcart.production import compute_production_date
from mealcart.cart import CartItem
from mealcart.discounts import DiscountComposer, DiscountSummary
from mealcart.fulfillment import check_date, fee_for, meets_minimum_order
from mealcart.pricing import subtotal
from mealcart.checkout._types import CheckoutRequest, CheckoutQuote

log = logging.getLogger(__name__)


class QuoteFailed(Exception):
    def __init__(self, error: QuoteError) -> None:
        super().__init__(error.message)
        self.error = error


def _unwrap[T](result: Result[T, QuoteError]) -> T:
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise QuoteFailed(e)


@dataclass(frozen=True, slots=True)
class QuoteInput:
    request: CheckoutRequest
    items: tuple[CartItem, ...]
    composer: DiscountComposer
    settings: Settings
    today: date | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Nodes
# ═══════════════════════════════════════════════════════════════════════════════

@node
class QuoteInputNode:
    """Entry point: wraps the quote input."""

    def __init__(self, data: QuoteInput) -> None:
        self.data = data

    @classmethod
    def __compose__(cls, data: QuoteInput) -> "QuoteInputNode":
        return cls(data)


@node
class ItemsNode:
    def __init__(self, items: tuple[CartItem, ...], subtotal: Money) -> None:
        self.items = items
        self.subtotal = subtotal

    @classmethod
    def __compose__(cls, quote: QuoteInputNode) -> "ItemsNode":
        items = quote.data.items
        if not items:
            raise QuoteFailed(InputError(InputErrorKind.EMPTY_CART, "Your cart is empty"))
        return cls(items, subtotal(items))


@node
class DeliveryDateNode:
    def __init__(self, day: date) -> None:
        self.day = day

    @classmethod
    def __compose__(cls, quote: QuoteInputNode) -> "DeliveryDateNode":
        request = quote.data.request
        if request.delivery_date is None:
            raise QuoteFailed(InputError(
                InputErrorKind.DELIVERY_DATE_MISSING, "Please choose a delivery date",
            ))
        day = _unwrap(check_date(
            request.method, request.target, request.delivery_date, today=quote.data.today,
        ))
        return cls(day)


@node
class FeeNode:
    """Fulfillment fee, after checking the zone's minimum order."""

    def __init__(self, fee: Money) -> None:
        self.fee = fee

    @classmethod
    def __compose__(cls, quote: QuoteInputNode, items: ItemsNode) -> "FeeNode":
        request = quote.data.request
        _unwrap(meets_minimum_order(request.method, request.target, items.subtotal))
        fee = _unwrap(fee_for(
            request.method,
            request.target,
            default_delivery_fee=quote.data.settings.default_delivery_fee,
        ))
        return cls(fee)


@node
class DiscountNode:
    def __init__(self, summary: DiscountSummary) -> None:
        self.summary = summary

    @classmethod
    def __compose__(cls, quote: QuoteInputNode, fee: FeeNode) -> "DiscountNode":
        summary = quote.data.composer.summarize(fee=fee.fee, method=quote.data.request.method)
        return cls(summary)


@node
class ProductionDateNode:
    def __init__(self, day: date | None) -> None:
        self.day = day

    @classmethod
    def __compose__(cls, items: ItemsNode, delivery: DeliveryDateNode) -> "ProductionDateNode":
        return cls(compute_production_date(delivery.day, items.items))


@node
class QuoteNode:
    """Terminal node: the complete quote."""

    def __init__(self, data: CheckoutQuote) -> None:
        self.data = data

    @classmethod
    def __compose__(
        cls,
        quote: QuoteInputNode,
        items: ItemsNode,
        discount: DiscountNode,
        production: ProductionDateNode,
    ) -> "QuoteNode":
        return cls(CheckoutQuote(
            request=quote.data.request,
            items=items.items,
            summary=discount.summary,
            production_date=production.day,
        ))


# ═══════════════════════════════════════════════════════════════════════════════
# Run
# ═══════════════════════════════════════════════════════════════════════════════

async def run_quote(data: QuoteInput) -> Result[CheckoutQuote, QuoteError]:
    agent = EventLoopAgent.build({QuoteNode})
    try:
        async with Scope(detail="quote") as scope:
            scope.push(Value(QuoteInput, data))
            await getattr(agent, "run")(scope, {})
            return Ok(scope[QuoteNode].value.data)
    except QuoteFailed as e:
        log.info(f"Quote rejected: {e.error.message}")
        return Error(e.error)


__all__ = (
    "QuoteFailed",
    "QuoteInput",
    "QuoteInputNode",
    "ItemsNode",
    "DeliveryDateNode",
    "FeeNode",
    "DiscountNode",
    "ProductionDateNode",
    "QuoteNode",
    "run_quote",
)
