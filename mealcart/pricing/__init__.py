"""
Money primitives on integer pence.

    from mealcart import pricing as P

    P.subtotal(cart.items)            # sum of price × quantity
    P.apply_percentage(2400, 100)     # 0
    P.apply_fixed(5793, 500)          # 5293
    P.format_money(5293)              # '£52.93'
"""

from mealcart.pricing._money import (
    Priced,
    to_pence,
    clamp,
    line_total,
    subtotal,
    percent_of,
    apply_percentage,
    apply_fixed,
    format_money,
)

__all__ = (
    "Priced",
    "to_pence",
    "clamp",
    "line_total",
    "subtotal",
    "percent_of",
    "apply_percentage",
    "apply_fixed",
    "format_money",
)
