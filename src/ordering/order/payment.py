"""Order payment — command and handler.

Confirms a pending order once the payment widget reports success. The status
change and its history row are written in the same unit of work; a repeated
confirmation with the same reference writes nothing.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.history import OrderStatusHistory
from ordering.order.order import Order

PAYMENT_SUCCESSFUL_NOTE = "Payment successful"


@ordering.command(part_of="Order")
class ConfirmOrderPayment:
    order_id = Identifier(required=True)
    payment_reference = String(required=True, max_length=255)
    gateway_status = String(max_length=50)


@ordering.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(ConfirmOrderPayment)
    def confirm_order_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        confirmed = order.confirm_payment(command.payment_reference)
        if confirmed:
            repo.add(order)
            current_domain.repository_for(OrderStatusHistory).add(
                OrderStatusHistory.record(order.id, order.status, PAYMENT_SUCCESSFUL_NOTE)
            )
            logger.info(
                "order_payment_confirmed",
                order_number=order.order_number,
                reference=command.payment_reference,
                gateway_status=command.gateway_status,
            )
        else:
            logger.info(
                "order_payment_already_confirmed",
                order_number=order.order_number,
                reference=command.payment_reference,
            )

        return {"order_number": order.order_number, "confirmed": confirmed}
