"""Admin dashboard figures for orders."""

from protean.utils.globals import current_domain

from ordering.order.order import Order

RECENT_ORDERS = 5


def order_dashboard(product_counts=None):
    """Order counts, revenue and the most recent orders.

    ``product_counts`` comes from the catalogue and is merged in as is.
    """
    repo = current_domain.repository_for(Order)
    summary = repo.summary()
    product_counts = product_counts or {}
    return {
        "total_products": product_counts.get("total", 0),
        "visible_products": product_counts.get("visible", 0),
        **summary,
        "recent_orders": repo.newest_first(limit=RECENT_ORDERS),
    }
