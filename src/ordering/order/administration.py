"""Order administration — changeset, command and handler.

An admin edit is reduced to an ``OrderChangeset`` holding only the fields
whose values differ from the stored order. The order is written only when the
changeset is non-empty, and a status history row is appended only when the
status itself changed.
"""

from dataclasses import dataclass

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.domain import logger, ordering
from ordering.order.history import OrderStatusHistory
from ordering.order.order import Order, OrderStatus

_STATUSES = {status.value for status in OrderStatus}


@dataclass(frozen=True)
class OrderChangeset:
    """Differences between an order and the values submitted for it.

    ``status`` is the new status, or None when it is unchanged. Because a
    tracking number may be cleared, its change is flagged separately.
    """

    status: str | None = None
    tracking_number: str | None = None
    tracking_number_changed: bool = False
    notes: str | None = None

    @classmethod
    def diff(cls, order, status=None, tracking_number=None, notes=None):
        """Compare submitted values to ``order``.

        ``None`` for ``status`` or ``tracking_number`` means "not submitted".
        An empty tracking number clears the stored one.
        """
        if status is not None and status not in _STATUSES:
            raise ValidationError({"status": [f"Unknown order status '{status}'"]})

        new_status = status if status is not None and status != order.status else None

        changed_tracking = False
        new_tracking = None
        if tracking_number is not None:
            new_tracking = tracking_number.strip() or None
            changed_tracking = new_tracking != (order.tracking_number or None)

        return cls(
            status=new_status,
            tracking_number=new_tracking if changed_tracking else None,
            tracking_number_changed=changed_tracking,
            notes=(notes or "").strip() or None,
        )

    @property
    def is_empty(self):
        return self.status is None and not self.tracking_number_changed

    @property
    def changed_fields(self):
        fields = []
        if self.status is not None:
            fields.append("status")
        if self.tracking_number_changed:
            fields.append("tracking_number")
        return fields


@ordering.command(part_of="Order")
class UpdateOrder:
    order_id = Identifier(required=True)
    status = String(max_length=20)
    tracking_number = String(max_length=255)
    clear_tracking_number = Boolean(default=False)
    notes = Text()


@ordering.command_handler(part_of=Order)
class UpdateOrderHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        changeset = OrderChangeset.diff(
            order,
            status=command.status,
            tracking_number="" if command.clear_tracking_number else command.tracking_number,
            notes=command.notes,
        )
        if changeset.is_empty:
            return []

        order.apply_changes(changeset)
        repo.add(order)

        if changeset.status is not None:
            current_domain.repository_for(OrderStatusHistory).add(
                OrderStatusHistory.record(order.id, changeset.status, changeset.notes)
            )

        logger.info(
            "order_updated",
            order_number=order.order_number,
            changed_fields=changeset.changed_fields,
        )
        return changeset.changed_fields
