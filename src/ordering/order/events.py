"""Domain events for the Order aggregate.

Events are immutable facts about an order. They are raised by the aggregate
and published after the unit of work that persisted the change commits.
"""

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A pending order was created from the shopper's cart at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_email = String(required=True)
    item_count = Integer(required=True)
    subtotal = Integer(required=True)
    shipping_cost = Integer()
    total = Integer(required=True)
    payment_reference = String()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaymentConfirmed:
    """The payment processor reported success and the order was confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    payment_reference = String(required=True)
    amount = Integer(required=True)
    confirmed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order moved from one lifecycle status to another."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderTrackingUpdated:
    """The carrier tracking number of the order was set, changed or cleared."""

    __version__ = 1

    order_id = Identifier(required=True)
    tracking_number = String()
