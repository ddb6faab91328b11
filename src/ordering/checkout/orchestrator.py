"""Checkout orchestrator — turns a session's cart into a paid order.

One checkout attempt runs through these states::

    IDLE -> VALIDATING -> VALIDATION_FAILED -> IDLE
    VALIDATING -> ORDER_PENDING_CREATE -> ORDER_CREATED -> AWAITING_PAYMENT
    AWAITING_PAYMENT -> PAYMENT_SUCCESS -> RECONCILING -> DONE
    AWAITING_PAYMENT -> PAYMENT_CANCELLED -> IDLE

The pending order is written once, before the payment widget opens, so an
abandoned payment still leaves an auditable pending order behind. A retry of
the same cart and form in the same session reuses that order through its
checkout key. Payment success confirms the order and appends its history row
in one unit of work, then clears the cart; a replayed success callback
confirms nothing and leaves the cart as it is. A cancelled payment changes
nothing: the order stays pending/pending and the cart keeps its lines.

Every failure at a boundary (form, widget configuration, order store) ends
the attempt with a ``CheckoutResult`` carrying a notice for the shopper;
nothing propagates to the caller.
"""

import json
from dataclasses import dataclass, field
from enum import Enum

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.checkout.errors import (
    CHECKOUT_FAILED,
    EMPTY_CART,
    PAYMENT_CANCELLED,
    RECONCILIATION_FAILED,
    PaymentConfigurationError,
)
from ordering.checkout.form import ShopperDetails, validate_shopper
from ordering.checkout.pricing import compute_totals
from ordering.checkout.references import checkout_key, generate_order_number, generate_payment_reference
from ordering.config import StorefrontSettings, get_settings
from ordering.order.order import Order
from ordering.order.payment import ConfirmOrderPayment
from ordering.order.placement import PlaceOrder
from payments.gateway.port import PaymentOutcome, PaymentRequest, PaymentWidget

logger = structlog.get_logger(__name__)


class CheckoutState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    VALIDATION_FAILED = "validation_failed"
    ORDER_PENDING_CREATE = "order_pending_create"
    ORDER_CREATED = "order_created"
    AWAITING_PAYMENT = "awaiting_payment"
    PAYMENT_SUCCESS = "payment_success"
    PAYMENT_CANCELLED = "payment_cancelled"
    RECONCILING = "reconciling"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PendingCheckout:
    """A pending order waiting for the shopper to pay."""

    order_id: str
    order_number: str
    subtotal: int
    shipping_cost: int
    total: int
    payment_request: PaymentRequest

    @property
    def reference(self) -> str:
        return self.payment_request.reference


@dataclass(frozen=True)
class CheckoutResult:
    state: CheckoutState
    order_number: str | None = None
    redirect_to: str | None = None
    notice: str | None = None
    errors: dict = field(default_factory=dict)
    pending: PendingCheckout | None = None

    @property
    def ok(self) -> bool:
        return self.state in (CheckoutState.AWAITING_PAYMENT, CheckoutState.DONE)


def confirmation_path(order_number: str) -> str:
    return f"/orders/{order_number}"


def _order_items(cart: Cart) -> list[dict]:
    return [
        {
            "product_id": line.product.id,
            "product_name": line.product.name,
            "product_slug": line.product.slug,
            "product_image": line.product.primary_image,
            "quantity": line.quantity,
            "price": line.product.price,
        }
        for line in cart.lines
    ]


def _metadata(details: ShopperDetails, order_number: str) -> dict:
    return {
        "order_number": order_number,
        "custom_fields": [
            {"display_name": "Customer Name", "variable_name": "customer_name", "value": details.customer_name},
            {"display_name": "Phone Number", "variable_name": "phone_number", "value": details.customer_phone},
        ],
    }


class CheckoutOrchestrator:
    """Runs checkout attempts for one cart session.

    Requires an active ``ordering`` domain context.
    """

    def __init__(self, cart: Cart, widget: PaymentWidget, settings: StorefrontSettings | None = None) -> None:
        self.cart = cart
        self.widget = widget
        self.settings = settings or get_settings()
        self.state = CheckoutState.IDLE
        self.transitions: list[CheckoutState] = []

    def _enter(self, state: CheckoutState) -> None:
        logger.debug("checkout_state", session_id=self.cart.session_id, previous=self.state.value, state=state.value)
        self.state = state
        self.transitions.append(state)

    def _fail(self, notice: str, **extra) -> CheckoutResult:
        self._enter(CheckoutState.IDLE)
        return CheckoutResult(state=CheckoutState.FAILED, notice=notice, **extra)

    # -------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------
    def begin(self, details: ShopperDetails) -> CheckoutResult:
        """Validate the form and create the pending order.

        On success the result is in AWAITING_PAYMENT and carries the
        ``PendingCheckout`` whose payment request opens the widget.
        """
        self._enter(CheckoutState.VALIDATING)
        try:
            if self.cart.is_empty:
                raise ValidationError({"cart": [EMPTY_CART]})
            validate_shopper(details)
        except ValidationError as exc:
            self._enter(CheckoutState.VALIDATION_FAILED)
            self._enter(CheckoutState.IDLE)
            return CheckoutResult(state=CheckoutState.VALIDATION_FAILED, errors=exc.messages)

        try:
            self.widget.ensure_configured()
        except PaymentConfigurationError as exc:
            logger.warning("checkout_payment_not_configured", session_id=self.cart.session_id, reason=str(exc))
            return self._fail(exc.notice)

        totals = compute_totals(
            self.cart.get_total_price(),
            self.settings.free_shipping_threshold,
            self.settings.flat_shipping_cost,
        )
        key = checkout_key(self.cart.session_id, self.cart.lines, details.fingerprint())

        self._enter(CheckoutState.ORDER_PENDING_CREATE)
        try:
            placed = current_domain.process(
                PlaceOrder(
                    order_number=generate_order_number(self.settings.order_number_prefix),
                    checkout_key=key,
                    session_id=self.cart.session_id,
                    customer_name=details.customer_name,
                    customer_email=details.customer_email,
                    customer_phone=details.customer_phone,
                    shipping_address=json.dumps(details.shipping_address()),
                    items=json.dumps(_order_items(self.cart)),
                    shipping_cost=totals.shipping_cost,
                    payment_reference=generate_payment_reference(self.settings.order_number_prefix),
                    currency=self.settings.currency,
                    notes=details.notes or None,
                ),
                asynchronous=False,
            )
        except ValidationError as exc:
            logger.warning("checkout_order_rejected", session_id=self.cart.session_id, errors=exc.messages)
            self._enter(CheckoutState.VALIDATION_FAILED)
            self._enter(CheckoutState.IDLE)
            return CheckoutResult(state=CheckoutState.VALIDATION_FAILED, errors=exc.messages)
        except Exception:
            logger.exception("checkout_order_creation_failed", session_id=self.cart.session_id)
            return self._fail(CHECKOUT_FAILED)

        self._enter(CheckoutState.ORDER_CREATED)
        pending = PendingCheckout(
            order_id=placed["order_id"],
            order_number=placed["order_number"],
            subtotal=placed["subtotal"],
            shipping_cost=placed["shipping_cost"],
            total=placed["total"],
            payment_request=PaymentRequest(
                public_key=self.settings.paystack_public_key,
                email=placed["customer_email"],
                amount=placed["total"],
                currency=placed["currency"],
                reference=placed["payment_reference"],
                metadata=_metadata(details, placed["order_number"]),
            ),
        )
        self._enter(CheckoutState.AWAITING_PAYMENT)
        logger.info(
            "checkout_awaiting_payment",
            order_number=pending.order_number,
            reference=pending.reference,
            total=pending.total,
            reused=placed["reused"],
        )
        return CheckoutResult(state=CheckoutState.AWAITING_PAYMENT, order_number=pending.order_number, pending=pending)

    def resume(self, payment_reference: str) -> PendingCheckout:
        """Pick up the pending order behind ``payment_reference``.

        Raises ObjectNotFoundError when no order carries the reference, or when
        the order was placed from another cart session.
        """
        order = current_domain.repository_for(Order).by_payment_reference(payment_reference)
        if not order.placed_by(self.cart.session_id):
            logger.warning(
                "checkout_resume_foreign_session",
                session_id=self.cart.session_id,
                order_number=order.order_number,
            )
            raise ObjectNotFoundError(f"No pending checkout for reference {payment_reference}")
        pending = PendingCheckout(
            order_id=str(order.id),
            order_number=order.order_number,
            subtotal=order.subtotal,
            shipping_cost=order.shipping_cost,
            total=order.total,
            payment_request=PaymentRequest(
                public_key=self.settings.paystack_public_key,
                email=order.customer_email,
                amount=order.total,
                currency=order.currency,
                reference=order.payment_reference,
            ),
        )
        self._enter(CheckoutState.AWAITING_PAYMENT)
        return pending

    def complete(self, pending: PendingCheckout, outcome: PaymentOutcome) -> CheckoutResult:
        """Settle a checkout with the widget's outcome."""
        if not outcome.is_success:
            self._enter(CheckoutState.PAYMENT_CANCELLED)
            self._enter(CheckoutState.IDLE)
            logger.info("checkout_payment_cancelled", order_number=pending.order_number, reference=pending.reference)
            return CheckoutResult(
                state=CheckoutState.PAYMENT_CANCELLED,
                order_number=pending.order_number,
                notice=PAYMENT_CANCELLED,
            )

        self._enter(CheckoutState.PAYMENT_SUCCESS)
        self._enter(CheckoutState.RECONCILING)
        try:
            settled = current_domain.process(
                ConfirmOrderPayment(
                    order_id=pending.order_id,
                    payment_reference=outcome.reference or pending.reference,
                    gateway_status=outcome.status,
                ),
                asynchronous=False,
            )
        except Exception:
            logger.exception(
                "checkout_reconciliation_failed",
                order_number=pending.order_number,
                reference=outcome.reference,
            )
            return self._fail(RECONCILIATION_FAILED, order_number=pending.order_number)

        # Only the confirming callback empties the cart; a replay leaves it alone
        if settled["confirmed"]:
            self.cart.clear_cart()
        self._enter(CheckoutState.DONE)
        logger.info(
            "checkout_completed",
            order_number=pending.order_number,
            reference=outcome.reference,
            replayed=not settled["confirmed"],
        )
        return CheckoutResult(
            state=CheckoutState.DONE,
            order_number=pending.order_number,
            redirect_to=confirmation_path(pending.order_number),
        )

    async def checkout(self, details: ShopperDetails) -> CheckoutResult:
        """Run a full attempt: create the order, await the widget, settle."""
        started = self.begin(details)
        if started.state is not CheckoutState.AWAITING_PAYMENT:
            return started

        try:
            outcome = await self.widget.collect(started.pending.payment_request)
        except PaymentConfigurationError as exc:
            logger.warning("checkout_payment_not_configured", order_number=started.order_number, reason=str(exc))
            return self._fail(exc.notice, order_number=started.order_number)
        except Exception:
            logger.exception("checkout_payment_widget_failed", order_number=started.order_number)
            return self._fail(CHECKOUT_FAILED, order_number=started.order_number)
        return self.complete(started.pending, outcome)
