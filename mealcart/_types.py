"""
Core types for mealcart: money and catalog identifiers.
"""

from __future__ import annotations

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Money = int
"""Amount in minor units (pence). Never a float."""

type MealId = str
"""Catalog meal identifier."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Money",
    "MealId",
)
