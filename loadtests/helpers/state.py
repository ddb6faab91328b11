"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks the identifiers returned by earlier requests so follow-up
requests can reference them.
"""

from dataclasses import dataclass, field

from loadtests.data_generators import session_id


@dataclass
class ShopperState:
    """Tracks one shopper's cart session and checkout attempt."""

    session_id: str = field(default_factory=session_id)
    product_ids: list[str] = field(default_factory=list)
    item_count: int = 0
    payment_reference: str | None = None
    order_number: str | None = None
    email: str | None = None


@dataclass
class AdminState:
    """Tracks what an admin user has touched."""

    product_id: str | None = None
    order_ids: list[str] = field(default_factory=list)
