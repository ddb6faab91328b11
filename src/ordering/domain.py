"""Ordering bounded context — shopping cart, checkout and order management.

Holds the per-session Cart Engine, the Checkout Orchestrator that turns a
cart into a paid order, and the order records with their status history.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

ordering = Domain(name="ordering")

logger = get_logger(__name__)
