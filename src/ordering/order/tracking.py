"""Order lookups for shoppers: confirmation page and order tracking."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from ordering.order.history import OrderStatusHistory
from ordering.order.order import Order


@dataclass(frozen=True)
class TrackedOrder:
    order: Order
    history: list


def _with_history(order):
    history = current_domain.repository_for(OrderStatusHistory).for_order(order.id)
    return TrackedOrder(order=order, history=history)


def order_confirmation(order_number):
    """The order behind ``/orders/{order_number}`` with its status history."""
    return _with_history(current_domain.repository_for(Order).by_order_number(order_number))


def track_order(order_number, email):
    """Find an order by exact number and case-insensitive email.

    Raises ObjectNotFoundError when no order matches both.
    """
    return _with_history(current_domain.repository_for(Order).for_tracking(order_number, email))
