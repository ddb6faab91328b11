"""Identifiers generated at checkout."""

import hashlib
import random
import string
import time

_BASE36 = string.digits + string.ascii_lowercase


def _random_base36(length: int) -> str:
    return "".join(random.choices(_BASE36, k=length))


def _now_millis() -> int:
    return int(time.time() * 1000)


def generate_order_number(prefix: str = "LTL") -> str:
    """``LTL-1718000000000-X7QK``: timestamp plus a short random suffix.

    Unique enough for a handful of orders per minute; collisions are caught
    by the unique constraint on ``Order.order_number``.
    """
    return f"{prefix}-{_now_millis()}-{_random_base36(4).upper()}"


def generate_payment_reference(prefix: str = "LTL") -> str:
    return f"{prefix}_{_now_millis()}_{_random_base36(7)}"


def checkout_key(session_id: str, lines, shopper: tuple = ()) -> str:
    """Idempotency key for one checkout of one cart session.

    Derived from the session, the priced contents of the cart and the shopper
    details, so a retry of the same checkout maps to the same pending order
    while any change to the cart or the form starts a new one.
    """
    parts = sorted(f"{line.product.id}:{line.quantity}:{line.product.price}" for line in lines)
    digest = hashlib.sha256("|".join([session_id, *parts, *map(str, shopper)]).encode("utf-8"))
    return digest.hexdigest()
