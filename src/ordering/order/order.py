"""Order aggregate — a placed order and its lifecycle.

An order is created once, from a snapshot of the shopper's cart, with
``status=pending`` and ``payment_status=pending``. Amounts are fixed at that
moment: ``total == subtotal + shipping_cost`` and neither is ever recomputed,
so later catalogue edits never reach a placed order.

Payment confirmation is a conditional transition: it only applies to an
order that is still pending/pending and carries the same payment reference.
Administrative status changes are unrestricted (any status to any status).
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Integer, String, Text, ValueObject

from ordering.domain import ordering
from ordering.order.events import (
    OrderPaymentConfirmed,
    OrderPlaced,
    OrderStatusChanged,
    OrderTrackingUpdated,
)
from shared.money import DEFAULT_CURRENCY


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


# Statuses counted as "needing attention" on the admin dashboard
OPEN_STATUSES = {OrderStatus.PENDING.value, OrderStatus.CONFIRMED.value}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, as typed at checkout."""

    full_name = String(required=True, max_length=255)
    phone = String(required=True, max_length=50)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    country = String(max_length=100, default="Nigeria")
    postal_code = String(max_length=20)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A frozen copy of one cart line, independent of the live product."""

    product_id = String(required=True, max_length=255)
    product_name = String(required=True, max_length=255)
    product_slug = String(max_length=255)
    product_image = String(max_length=500)
    quantity = Integer(required=True, min_value=1)
    price = Integer(required=True, min_value=0)

    @property
    def line_total(self):
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    checkout_key = String(max_length=64)
    session_id = String(max_length=128)
    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=255)
    customer_phone = String(required=True, max_length=50)
    shipping_address = ValueObject(ShippingAddress)
    items = HasMany(OrderItem)
    subtotal = Integer(required=True, min_value=0)
    shipping_cost = Integer(default=0, min_value=0)
    total = Integer(required=True, min_value=0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    payment_reference = String(max_length=255)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    tracking_number = String(max_length=255)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_is_subtotal_plus_shipping(self):
        if self.total != self.subtotal + (self.shipping_cost or 0):
            raise ValidationError({"total": ["Order total must equal subtotal plus shipping"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        customer_name,
        customer_email,
        customer_phone,
        shipping_address,
        items_data,
        shipping_cost,
        payment_reference=None,
        checkout_key=None,
        session_id=None,
        currency=DEFAULT_CURRENCY,
        notes=None,
    ):
        """Create a pending order from checkout data.

        Args:
            shipping_address: Dict with full_name, phone, address_line1,
                address_line2, city, state, country, postal_code.
            items_data: List of dicts with product_id, product_name,
                product_slug, product_image, quantity, price.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        subtotal = sum(int(item["price"]) * int(item["quantity"]) for item in items_data)
        now = datetime.now(UTC)

        order = cls(
            order_number=order_number,
            checkout_key=checkout_key,
            session_id=session_id,
            customer_name=customer_name,
            customer_email=customer_email.strip().lower(),
            customer_phone=customer_phone,
            shipping_address=ShippingAddress(**shipping_address),
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            total=subtotal + shipping_cost,
            currency=currency,
            payment_reference=payment_reference,
            payment_status=PaymentStatus.PENDING.value,
            status=OrderStatus.PENDING.value,
            notes=notes or None,
            created_at=now,
            updated_at=now,
        )
        order.add_items(
            [
                OrderItem(
                    product_id=str(item["product_id"]),
                    product_name=item["product_name"],
                    product_slug=item.get("product_slug") or "",
                    product_image=item.get("product_image") or "",
                    quantity=int(item["quantity"]),
                    price=int(item["price"]),
                )
                for item in items_data
            ]
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_email=order.customer_email,
                item_count=len(items_data),
                subtotal=subtotal,
                shipping_cost=shipping_cost,
                total=order.total,
                payment_reference=payment_reference,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_awaiting_payment(self):
        return self.status == OrderStatus.PENDING.value and self.payment_status == PaymentStatus.PENDING.value

    def belongs_to(self, email):
        return (email or "").strip().lower() == self.customer_email

    def placed_by(self, session_id):
        """Whether the cart session ``session_id`` placed this order."""
        return bool(session_id) and self.session_id == session_id

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def reissue_reference(self, payment_reference):
        """Give a still-unpaid order a fresh reference for another payment attempt."""
        if not self.is_awaiting_payment:
            raise ValidationError(
                {"status": [f"Cannot start a new payment for an order in {self.status}/{self.payment_status} state"]}
            )
        self.payment_reference = payment_reference
        self.updated_at = datetime.now(UTC)

    def confirm_payment(self, payment_reference):
        """Mark the order paid and confirmed.

        Returns False when the order was already confirmed with this same
        reference, so repeated success callbacks leave no trace. Any other
        prior state is rejected.
        """
        if (
            self.payment_status == PaymentStatus.PAID.value
            and self.status == OrderStatus.CONFIRMED.value
            and self.payment_reference == payment_reference
        ):
            return False

        if not self.is_awaiting_payment:
            raise ValidationError(
                {"status": [f"Cannot confirm payment for an order in {self.status}/{self.payment_status} state"]}
            )
        if self.payment_reference and self.payment_reference != payment_reference:
            raise ValidationError({"payment_reference": ["Payment reference does not match this order"]})

        previous_status = self.status
        self.payment_reference = payment_reference
        self.payment_status = PaymentStatus.PAID.value
        self.status = OrderStatus.CONFIRMED.value
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderPaymentConfirmed(
                order_id=str(self.id),
                order_number=self.order_number,
                payment_reference=payment_reference,
                amount=self.total,
                confirmed_at=now,
            )
        )
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=self.status,
                changed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def apply_changes(self, changeset):
        """Write the fields named in ``changeset``; untouched fields stay as they are."""
        if changeset.is_empty:
            return

        now = datetime.now(UTC)

        if changeset.status is not None:
            previous_status = self.status
            self.status = changeset.status
            self.raise_(
                OrderStatusChanged(
                    order_id=str(self.id),
                    previous_status=previous_status,
                    new_status=changeset.status,
                    changed_at=now,
                )
            )

        if changeset.tracking_number_changed:
            self.tracking_number = changeset.tracking_number
            self.raise_(
                OrderTrackingUpdated(
                    order_id=str(self.id),
                    tracking_number=changeset.tracking_number,
                )
            )

        self.updated_at = now
