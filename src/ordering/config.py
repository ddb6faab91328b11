"""Storefront settings read from the environment."""

import os
from dataclasses import dataclass

from shared.money import DEFAULT_CURRENCY


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


@dataclass(frozen=True)
class StorefrontSettings:
    paystack_public_key: str = ""
    currency: str = DEFAULT_CURRENCY
    free_shipping_threshold: int = 50000
    flat_shipping_cost: int = 2500
    cart_storage_dir: str | None = None
    order_number_prefix: str = "LTL"

    @classmethod
    def from_env(cls) -> "StorefrontSettings":
        return cls(
            paystack_public_key=os.getenv("PAYSTACK_PUBLIC_KEY", ""),
            currency=os.getenv("STORE_CURRENCY", DEFAULT_CURRENCY),
            free_shipping_threshold=_int_env("FREE_SHIPPING_THRESHOLD", 50000),
            flat_shipping_cost=_int_env("FLAT_SHIPPING_COST", 2500),
            cart_storage_dir=os.getenv("CART_STORAGE_DIR") or None,
            order_number_prefix=os.getenv("ORDER_NUMBER_PREFIX", "LTL"),
        )


_settings: StorefrontSettings | None = None


def get_settings() -> StorefrontSettings:
    global _settings
    if _settings is None:
        _settings = StorefrontSettings.from_env()
    return _settings


def set_settings(settings: StorefrontSettings) -> None:
    """Override the active settings (useful for tests)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    global _settings
    _settings = None
