"""
mealcart: order reconstruction & fulfillment-eligibility engine for a
meal-subscription storefront.

    from mealcart import cart as K          # Cart state + persistence
    from mealcart import fulfillment as F   # Zones, dates, fees
    from mealcart import discounts as D     # Coupon + gift card totals
    from mealcart import reorder as R       # Past order -> cart
    from mealcart import checkout as CO     # Quote + free/paid routing
    from mealcart import Engine, Gateways   # Everything wired from Settings

All amounts are integer pence.
"""

from mealcart import pricing
from mealcart import fulfillment
from mealcart import cart
from mealcart import discounts
from mealcart import reorder
from mealcart import checkout
from mealcart import lift
from mealcart.config import Settings
from mealcart.logging_config import setup_logging
from mealcart.production import compute_production_date
from mealcart.engine import Engine, Gateways
from mealcart._types import Money, MealId

__version__ = "0.1.0"

__all__ = (
    "pricing",
    "fulfillment",
    "cart",
    "discounts",
    "reorder",
    "checkout",
    "lift",
    "Settings",
    "setup_logging",
    "compute_production_date",
    "Engine",
    "Gateways",
    "Money",
    "MealId",
)
