"""Order queries for checkout, tracking and the admin console."""

from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.order.order import OPEN_STATUSES, Order, PaymentStatus

_PAGE_SIZE = 100


def _every(query):
    """Fetch all matches of ``query`` page by page."""
    offset = 0
    while True:
        page = query.offset(offset).limit(_PAGE_SIZE).all().items
        yield from page
        if len(page) < _PAGE_SIZE:
            return
        offset += _PAGE_SIZE


@ordering.repository(part_of=Order)
class OrderRepository:
    def by_order_number(self, order_number):
        """Return the order with ``order_number`` or raise ObjectNotFoundError."""
        return self._dao.find_by(order_number=order_number)

    def for_tracking(self, order_number, email):
        """Exact order number match; email compared case-insensitively."""
        order = self._dao.find_by(order_number=(order_number or "").strip())
        if not order.belongs_to(email):
            raise ObjectNotFoundError(f"Order {order_number} not found")
        return order

    def pending_for_checkout(self, checkout_key):
        """The still-unpaid order created for this cart contents, if any."""
        if not checkout_key:
            return None
        matches = self._dao.query.filter(checkout_key=checkout_key).all().items
        return next((order for order in matches if order.is_awaiting_payment), None)

    def by_payment_reference(self, payment_reference):
        return self._dao.find_by(payment_reference=payment_reference)

    def newest_first(self, status=None, limit=None):
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        query = query.order_by("-created_at")
        if limit:
            query = query.limit(limit)
        return query.all().items

    def summary(self):
        """Order counts and revenue for the admin dashboard."""
        open_orders = sum(self._dao.query.filter(status=status).all().total for status in OPEN_STATUSES)
        paid = _every(self._dao.query.filter(payment_status=PaymentStatus.PAID.value).order_by("created_at"))
        return {
            "total_orders": self._dao.query.all().total,
            "pending_orders": open_orders,
            "total_revenue": sum(order.total for order in paid),
        }
