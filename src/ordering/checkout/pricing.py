"""Checkout totals.

Shipping is a flat fee, waived once the subtotal reaches the free-shipping
threshold. Both constants are store settings.
"""

from dataclasses import dataclass

FREE_SHIPPING_THRESHOLD = 50000
FLAT_SHIPPING_COST = 2500


@dataclass(frozen=True)
class OrderTotals:
    subtotal: int
    shipping_cost: int
    total: int


def shipping_cost_for(
    subtotal: int,
    threshold: int = FREE_SHIPPING_THRESHOLD,
    flat_cost: int = FLAT_SHIPPING_COST,
) -> int:
    return 0 if subtotal >= threshold else flat_cost


def compute_totals(
    subtotal: int,
    threshold: int = FREE_SHIPPING_THRESHOLD,
    flat_cost: int = FLAT_SHIPPING_COST,
) -> OrderTotals:
    shipping_cost = shipping_cost_for(subtotal, threshold, flat_cost)
    return OrderTotals(subtotal=subtotal, shipping_cost=shipping_cost, total=subtotal + shipping_cost)
