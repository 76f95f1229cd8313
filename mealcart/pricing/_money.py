"""
Money arithmetic on integer pence.

Intermediate values go through Decimal and are rounded half-up back to
whole pence, matching how a payment processor rounds `amount * 100`.
"""

from collections.abc import Iterable
from decimal import Decimal, ROUND_HALF_UP
from typing import Protocol

from mealcart._types import Money

_ONE = Decimal(1)
_HUNDRED = Decimal(100)


class Priced(Protocol):
    @property
    def price(self) -> Money: ...

    @property
    def quantity(self) -> int: ...


def _round(value: Decimal) -> Money:
    return int(value.quantize(_ONE, rounding=ROUND_HALF_UP))


def to_pence(pounds: Decimal | str | int | float) -> Money:
    """
    Convert a pound amount to pence.

        to_pence("53.94")  # 5394
        to_pence(3.99)     # 399
    """
    # str() first so 3.99 does not turn into 3.98999...
    return _round(Decimal(str(pounds)) * _HUNDRED)


def clamp(amount: Money) -> Money:
    """Floor at zero. Totals are never negative."""
    return max(0, amount)


def line_total(item: Priced) -> Money:
    return item.price * item.quantity


def subtotal(items: Iterable[Priced]) -> Money:
    return sum((line_total(item) for item in items), 0)


def percent_of(amount: Money, percentage: Decimal | int) -> Money:
    """Share of `amount` that `percentage` represents, rounded to pence."""
    return _round(Decimal(amount) * Decimal(percentage) / _HUNDRED)


def apply_percentage(amount: Money, percentage: Decimal | int) -> Money:
    """amount × (1 − pct/100), floored at zero."""
    return clamp(_round(Decimal(amount) * (_HUNDRED - Decimal(percentage)) / _HUNDRED))


def apply_fixed(amount: Money, reduction: Money) -> Money:
    return clamp(amount - reduction)


def format_money(amount: Money, symbol: str = "£") -> str:
    """format_money(5293) -> '£52.93'"""
    sign = "-" if amount < 0 else ""
    pounds, pence = divmod(abs(amount), 100)
    return f"{sign}{symbol}{pounds}.{pence:02d}"
