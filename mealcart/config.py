"""
Environment-driven settings.

    from mealcart.config import Settings

    settings = Settings.from_env()     # reads .env + MEALCART_* variables
    settings = Settings(default_delivery_fee=399)   # explicit, for tests
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from mealcart._types import Money

PREFIX = "MEALCART_"


def _optional_int(name: str) -> int | None:
    raw = os.getenv(PREFIX + name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{PREFIX}{name} must be an integer, got {raw!r}") from None


def _int(name: str, default: int) -> int:
    value = _optional_int(name)
    return default if value is None else value


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Engine configuration.

    default_delivery_fee is in pence. None means "not configured": a zone
    without its own fee is then reported as FEE_UNCONFIGURED instead of
    being charged zero.
    """
    default_delivery_fee: Money | None = None
    min_postcode_length: int = 4
    expiry_warning_days: int = 3
    collection_window_days: int = 14
    cart_storage_url: str = "sqlite+aiosqlite:///:memory:"
    cart_storage_key: str = "cart"
    currency: str = "gbp"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv_path: str | os.PathLike[str] | None = None) -> Settings:
        load_dotenv(dotenv_path)
        defaults = cls()
        return cls(
            default_delivery_fee=_optional_int("DEFAULT_DELIVERY_FEE"),
            min_postcode_length=_int("MIN_POSTCODE_LENGTH", defaults.min_postcode_length),
            expiry_warning_days=_int("EXPIRY_WARNING_DAYS", defaults.expiry_warning_days),
            collection_window_days=_int("COLLECTION_WINDOW_DAYS", defaults.collection_window_days),
            cart_storage_url=os.getenv(PREFIX + "CART_STORAGE_URL", defaults.cart_storage_url),
            cart_storage_key=os.getenv(PREFIX + "CART_STORAGE_KEY", defaults.cart_storage_key),
            currency=os.getenv(PREFIX + "CURRENCY", defaults.currency).lower(),
            log_level=os.getenv(PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
        )


__all__ = ("Settings",)
