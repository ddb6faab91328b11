"""Order status history — append-only audit trail of status changes.

One record is written every time an order's status changes. Records are
never updated or deleted; the aggregate offers no mutating behaviour.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String, Text

from ordering.domain import ordering
from ordering.order.order import OrderStatus


@ordering.aggregate
class OrderStatusHistory:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    notes = Text()
    created_at = DateTime(required=True)

    @classmethod
    def record(cls, order_id, status, notes=None):
        return cls(
            order_id=str(order_id),
            status=status,
            notes=notes or None,
            created_at=datetime.now(UTC),
        )


@ordering.repository(part_of=OrderStatusHistory)
class OrderStatusHistoryRepository:
    def for_order(self, order_id):
        """History of one order, most recent first."""
        return self._dao.query.filter(order_id=str(order_id)).order_by("-created_at").all().items
