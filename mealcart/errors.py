"""
Error taxonomy.

Errors are values: engine operations return Result[T, <Error>] and never
raise across the caller boundary. Each error carries a kind (for branching)
and a human-readable message (for display).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


# ═══════════════════════════════════════════════════════════════════════════════
# Input
# ═══════════════════════════════════════════════════════════════════════════════

class InputErrorKind(Enum):
    POSTCODE_INCOMPLETE = auto()
    DELIVERY_DATE_MISSING = auto()
    EMPTY_CART = auto()


@dataclass(frozen=True, slots=True)
class InputError:
    """Malformed or incomplete user input. Shown inline, never fatal."""
    kind: InputErrorKind
    message: str


# ═══════════════════════════════════════════════════════════════════════════════
# Eligibility
# ═══════════════════════════════════════════════════════════════════════════════

class EligibilityErrorKind(Enum):
    NO_ZONE = auto()
    NO_COLLECTION_POINT = auto()
    DATE_TOO_EARLY = auto()
    DATE_UNAVAILABLE = auto()
    BELOW_MINIMUM = auto()
    FEE_UNCONFIGURED = auto()
    LOOKUP_FAILED = auto()


@dataclass(frozen=True, slots=True)
class EligibilityError:
    """The chosen method/address/date cannot be fulfilled."""
    kind: EligibilityErrorKind
    message: str

    @classmethod
    def lookup_failed(cls, detail: str) -> EligibilityError:
        return cls(EligibilityErrorKind.LOOKUP_FAILED, f"Could not load fulfillment data: {detail}")


# ═══════════════════════════════════════════════════════════════════════════════
# Coupons and gift cards
# ═══════════════════════════════════════════════════════════════════════════════

class CouponErrorKind(Enum):
    EMPTY_CODE = auto()
    INVALID = auto()
    INACTIVE = auto()
    EXPIRED = auto()
    LOOKUP_FAILED = auto()


@dataclass(frozen=True, slots=True)
class CouponError:
    """Coupon rejected. The cart and existing discounts are left untouched."""
    kind: CouponErrorKind
    message: str


class GiftCardErrorKind(Enum):
    EMPTY_CODE = auto()
    INVALID = auto()
    NO_BALANCE = auto()
    LOOKUP_FAILED = auto()


@dataclass(frozen=True, slots=True)
class GiftCardError:
    kind: GiftCardErrorKind
    message: str


# ═══════════════════════════════════════════════════════════════════════════════
# Reorder
# ═══════════════════════════════════════════════════════════════════════════════

class ReconciliationErrorKind(Enum):
    NOT_FOUND = auto()
    FETCH_FAILED = auto()
    PACKAGE_UNAVAILABLE = auto()


@dataclass(frozen=True, slots=True)
class ReconciliationFetchError:
    """Historical order could not be loaded. No cart mutation happened."""
    kind: ReconciliationErrorKind
    order_id: str
    message: str


class ReplacementErrorKind(Enum):
    NO_PENDING_REORDER = auto()
    UNKNOWN_ITEM = auto()
    ALREADY_REPLACED = auto()
    REPLACEMENT_UNAVAILABLE = auto()
    UNRESOLVED = auto()
    LOOKUP_FAILED = auto()


@dataclass(frozen=True, slots=True)
class ReplacementError:
    kind: ReplacementErrorKind
    message: str


# ═══════════════════════════════════════════════════════════════════════════════
# Storage / Checkout
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class StorageError:
    """Cart persistence error."""
    message: str
    cause: Exception | None = None


class CheckoutErrorKind(Enum):
    PAYMENT_FAILED = auto()
    ORDER_FAILED = auto()


@dataclass(frozen=True, slots=True)
class CheckoutError:
    kind: CheckoutErrorKind
    message: str


type QuoteError = InputError | EligibilityError
"""Anything that stops a quote from being computed."""

type CheckoutFailure = InputError | EligibilityError | CheckoutError


__all__ = (
    "InputErrorKind",
    "InputError",
    "EligibilityErrorKind",
    "EligibilityError",
    "CouponErrorKind",
    "CouponError",
    "GiftCardErrorKind",
    "GiftCardError",
    "ReconciliationErrorKind",
    "ReconciliationFetchError",
    "ReplacementErrorKind",
    "ReplacementError",
    "StorageError",
    "CheckoutErrorKind",
    "CheckoutError",
    "QuoteError",
    "CheckoutFailure",
)
