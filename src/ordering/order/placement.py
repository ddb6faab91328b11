"""Order placement — command and handler.

Placement is idempotent per checkout attempt: when a still-unpaid order
already exists for the same ``checkout_key`` it is returned instead of a
second order being created. The reused order takes the new attempt's payment
reference.
"""

import json

from protean import handle
from protean.fields import Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.order import Order
from shared.money import DEFAULT_CURRENCY


@ordering.command(part_of="Order")
class PlaceOrder:
    order_number = String(required=True, max_length=50)
    checkout_key = String(max_length=64)
    session_id = String(max_length=128)
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=255)
    customer_phone = String(required=True, max_length=50)
    shipping_address = Text(required=True)  # JSON: address dict
    items = Text(required=True)  # JSON: list of item dicts
    shipping_cost = Integer(default=0, min_value=0)
    payment_reference = String(max_length=255)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    notes = Text()


def _placed(order, reused):
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "payment_reference": order.payment_reference,
        "customer_email": order.customer_email,
        "subtotal": order.subtotal,
        "shipping_cost": order.shipping_cost,
        "total": order.total,
        "currency": order.currency,
        "reused": reused,
    }


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        repo = current_domain.repository_for(Order)

        existing = repo.pending_for_checkout(command.checkout_key)
        if existing is not None:
            # The gateway refuses a reference an earlier popup already opened
            if command.payment_reference and command.payment_reference != existing.payment_reference:
                existing.reissue_reference(command.payment_reference)
                repo.add(existing)
            logger.info(
                "order_placement_reused",
                order_number=existing.order_number,
                checkout_key=command.checkout_key,
                reference=existing.payment_reference,
            )
            return _placed(existing, reused=True)

        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )

        order = Order.place(
            order_number=command.order_number,
            customer_name=command.customer_name,
            customer_email=command.customer_email,
            customer_phone=command.customer_phone,
            shipping_address=shipping_address,
            items_data=items_data,
            shipping_cost=command.shipping_cost or 0,
            payment_reference=command.payment_reference,
            checkout_key=command.checkout_key,
            session_id=command.session_id,
            currency=command.currency or DEFAULT_CURRENCY,
            notes=command.notes,
        )
        repo.add(order)
        logger.info("order_placed", order_number=order.order_number, total=order.total)
        return _placed(order, reused=False)
