"""Application tests for the checkout orchestrator."""

import asyncio

import pytest
from ordering.cart.cart import Cart, CartProduct
from ordering.cart.storage import InMemoryCartStorage
from ordering.checkout.errors import CHECKOUT_FAILED, PAYMENT_NOT_CONFIGURED, RECONCILIATION_FAILED
from ordering.checkout.form import ShopperDetails
from ordering.checkout.orchestrator import CheckoutOrchestrator, CheckoutState
from ordering.config import StorefrontSettings
from ordering.order.history import OrderStatusHistory
from ordering.order.order import Order
from ordering.order.repository import OrderRepository
from payments.gateway.fake_adapter import FakePaymentWidget
from payments.gateway.paystack_adapter import PaystackPopup
from payments.gateway.port import PaymentOutcome
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

SETTINGS = StorefrontSettings(paystack_public_key="pk_test_storefront")

SHOPPER = {
    "customer_name": "Amaka Obi",
    "customer_email": "Amaka@Example.com",
    "customer_phone": "+2348012345678",
    "address_line1": "12 Admiralty Way",
    "city": "Lekki",
    "state": "Lagos",
}


def _product(product_id, price, stock=10):
    return CartProduct(id=product_id, name=f"Product {product_id}", price=price, inventory_count=stock, slug=product_id)


@pytest.fixture()
def storage():
    return InMemoryCartStorage()


@pytest.fixture()
def cart(storage):
    return Cart.load("session-1", storage)


@pytest.fixture()
def widget():
    return FakePaymentWidget()


def _orchestrator(cart, widget):
    return CheckoutOrchestrator(cart, widget, SETTINGS)


def _orders():
    return current_domain.repository_for(Order)._dao.query.all().items


def _history(order_id):
    return current_domain.repository_for(OrderStatusHistory).for_order(order_id)


class TestSuccessfulCheckout:
    @pytest.mark.asyncio
    async def test_free_shipping_over_threshold(self, cart, widget):
        cart.add_item(_product("p1", 40000), 1)
        cart.add_item(_product("p2", 12500), 2)

        result = await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        assert result.state is CheckoutState.DONE
        assert result.redirect_to == f"/orders/{result.order_number}"
        [order] = _orders()
        assert (order.subtotal, order.shipping_cost, order.total) == (65000, 0, 65000)
        assert order.status == "confirmed"
        assert order.payment_status == "paid"
        assert order.customer_email == "amaka@example.com"

    @pytest.mark.asyncio
    async def test_flat_shipping_below_threshold(self, cart, widget):
        cart.add_item(_product("p1", 20000), 1)

        await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        [order] = _orders()
        assert (order.subtotal, order.shipping_cost, order.total) == (20000, 2500, 22500)
        assert widget.calls[0]["amount_minor"] == 2250000

    @pytest.mark.asyncio
    async def test_clears_cart_and_records_history(self, cart, storage, widget):
        cart.add_item(_product("p1", 20000), 1)

        await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        assert cart.is_empty
        assert storage.load("session-1") == {"items": []}
        [order] = _orders()
        assert [(h.status, h.notes) for h in _history(order.id)] == [("confirmed", "Payment successful")]

    @pytest.mark.asyncio
    async def test_order_items_snapshot_cart_lines(self, cart, widget):
        cart.add_item(_product("p1", 20000), 3)

        await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        [order] = _orders()
        [item] = order.items
        assert (item.product_id, item.quantity, item.price) == ("p1", 3, 20000)

    @pytest.mark.asyncio
    async def test_walks_through_states(self, cart, widget):
        cart.add_item(_product("p1", 20000), 1)
        orchestrator = _orchestrator(cart, widget)

        await orchestrator.checkout(ShopperDetails.from_dict(SHOPPER))

        assert orchestrator.transitions == [
            CheckoutState.VALIDATING,
            CheckoutState.ORDER_PENDING_CREATE,
            CheckoutState.ORDER_CREATED,
            CheckoutState.AWAITING_PAYMENT,
            CheckoutState.PAYMENT_SUCCESS,
            CheckoutState.RECONCILING,
            CheckoutState.DONE,
        ]


class TestRejectedCheckout:
    def test_invalid_form_writes_nothing(self, cart, widget):
        cart.add_item(_product("p1", 20000), 1)
        details = ShopperDetails.from_dict({**SHOPPER, "customer_email": "not-an-email", "city": ""})

        result = _orchestrator(cart, widget).begin(details)

        assert result.state is CheckoutState.VALIDATION_FAILED
        assert result.errors["customer_email"] == ["Please enter a valid email address"]
        assert result.errors["city"] == ["Please fill in city"]
        assert _orders() == []
        assert widget.calls == []

    def test_empty_cart(self, cart, widget):
        result = _orchestrator(cart, widget).begin(ShopperDetails.from_dict(SHOPPER))

        assert result.state is CheckoutState.VALIDATION_FAILED
        assert result.errors == {"cart": ["Your cart is empty"]}
        assert _orders() == []

    def test_validation_failure_returns_to_idle(self, cart, widget):
        orchestrator = _orchestrator(cart, widget)
        orchestrator.begin(ShopperDetails.from_dict(SHOPPER))
        assert orchestrator.state is CheckoutState.IDLE

    @pytest.mark.asyncio
    async def test_unconfigured_widget_writes_nothing(self, cart, widget):
        cart.add_item(_product("p1", 20000), 1)
        widget.configure(is_configured=False)

        result = await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        assert result.state is CheckoutState.FAILED
        assert result.notice == PAYMENT_NOT_CONFIGURED
        assert _orders() == []
        assert widget.calls == []
        assert not cart.is_empty

    @pytest.mark.asyncio
    async def test_paystack_without_key_is_not_configured(self, cart):
        cart.add_item(_product("p1", 20000), 1)

        result = await _orchestrator(cart, PaystackPopup("")).checkout(ShopperDetails.from_dict(SHOPPER))

        assert result.notice == PAYMENT_NOT_CONFIGURED
        assert _orders() == []

    @pytest.mark.asyncio
    async def test_widget_crash_leaves_order_pending(self, cart, widget, monkeypatch):
        cart.add_item(_product("p1", 20000), 1)

        async def _boom(request):
            raise RuntimeError("popup blew up")

        monkeypatch.setattr(widget, "collect", _boom)
        result = await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        assert result.state is CheckoutState.FAILED
        assert result.notice == CHECKOUT_FAILED
        [order] = _orders()
        assert order.is_awaiting_payment

    @pytest.mark.asyncio
    async def test_order_store_failure_keeps_cart_and_skips_widget(self, cart, widget, monkeypatch):
        cart.add_item(_product("p1", 20000), 2)

        def _unavailable(self, item):
            raise ConnectionError("order store unavailable")

        monkeypatch.setattr(OrderRepository, "add", _unavailable)
        orchestrator = _orchestrator(cart, widget)
        result = await orchestrator.checkout(ShopperDetails.from_dict(SHOPPER))

        assert result.state is CheckoutState.FAILED
        assert result.notice == CHECKOUT_FAILED
        assert orchestrator.transitions[-1] is CheckoutState.IDLE
        assert CheckoutState.ORDER_CREATED not in orchestrator.transitions
        assert cart.get_total_items() == 2
        assert widget.calls == []
        monkeypatch.undo()
        assert _orders() == []


class TestCancelledPayment:
    @pytest.mark.asyncio
    async def test_order_stays_pending_and_cart_intact(self, cart, widget):
        cart.add_item(_product("p1", 20000), 2)
        widget.configure(should_succeed=False)

        result = await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        assert result.state is CheckoutState.PAYMENT_CANCELLED
        assert result.notice == "Payment cancelled"
        [order] = _orders()
        assert (order.status, order.payment_status) == ("pending", "pending")
        assert _history(order.id) == []
        assert cart.get_total_items() == 2

    @pytest.mark.asyncio
    async def test_retry_reuses_pending_order_with_fresh_reference(self, cart, widget):
        cart.add_item(_product("p1", 20000), 1)
        widget.configure(should_succeed=False)
        first = await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        widget.configure(should_succeed=True)
        second = await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        assert second.state is CheckoutState.DONE
        assert second.order_number == first.order_number
        [order] = _orders()
        assert order.status == "confirmed"
        assert widget.calls[0]["reference"] != widget.calls[1]["reference"]
        assert order.payment_reference == widget.calls[1]["reference"]

    @pytest.mark.asyncio
    async def test_changed_form_starts_new_order(self, cart, widget):
        cart.add_item(_product("p1", 20000), 1)
        widget.configure(should_succeed=False)
        await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        corrected = ShopperDetails.from_dict({**SHOPPER, "address_line1": "14 Admiralty Way"})
        await _orchestrator(cart, widget).checkout(corrected)

        assert len(_orders()) == 2

    def test_cancel_returns_to_idle(self, cart, widget):
        cart.add_item(_product("p1", 20000), 1)
        orchestrator = _orchestrator(cart, widget)
        started = orchestrator.begin(ShopperDetails.from_dict(SHOPPER))

        orchestrator.complete(started.pending, PaymentOutcome.cancelled())

        assert orchestrator.state is CheckoutState.IDLE
        assert orchestrator.transitions[-2:] == [CheckoutState.PAYMENT_CANCELLED, CheckoutState.IDLE]


class TestReconciliation:
    @pytest.mark.asyncio
    async def test_failure_keeps_cart_and_reports(self, cart, widget):
        cart.add_item(_product("p1", 20000), 1)
        widget.configure(reference_override="LTL_forged_reference")

        result = await _orchestrator(cart, widget).checkout(ShopperDetails.from_dict(SHOPPER))

        assert result.state is CheckoutState.FAILED
        assert result.notice == RECONCILIATION_FAILED
        assert result.order_number is not None
        assert not cart.is_empty
        [order] = _orders()
        assert order.is_awaiting_payment

    def test_duplicate_success_confirms_once(self, cart, widget):
        cart.add_item(_product("p1", 20000), 1)
        orchestrator = _orchestrator(cart, widget)
        pending = orchestrator.begin(ShopperDetails.from_dict(SHOPPER)).pending
        outcome = PaymentOutcome.succeeded(pending.reference)

        first = orchestrator.complete(pending, outcome)
        cart.add_item(_product("p2", 65000), 1)
        second = orchestrator.complete(pending, outcome)

        assert first.state is CheckoutState.DONE
        assert second.state is CheckoutState.DONE
        assert second.redirect_to == f"/orders/{pending.order_number}"
        assert len(_history(pending.order_id)) == 1
        assert [line.product.id for line in cart.lines] == ["p2"]

    def test_resume_by_payment_reference(self, cart, widget):
        cart.add_item(_product("p1", 20000), 1)
        started = _orchestrator(cart, widget).begin(ShopperDetails.from_dict(SHOPPER))

        resumed = _orchestrator(cart, widget).resume(started.pending.reference)

        assert resumed.order_id == started.pending.order_id
        assert resumed.total == 22500

    def test_resume_from_another_session_is_not_found(self, cart, storage, widget):
        cart.add_item(_product("p1", 20000), 1)
        started = _orchestrator(cart, widget).begin(ShopperDetails.from_dict(SHOPPER))
        other_cart = Cart.load("other-tab", storage)
        other_cart.add_item(_product("p2", 9000), 1)

        with pytest.raises(ObjectNotFoundError):
            _orchestrator(other_cart, widget).resume(started.pending.reference)

        assert other_cart.get_total_items() == 1
        [order] = _orders()
        assert order.is_awaiting_payment


class TestPaystackPopupCheckout:
    @pytest.mark.asyncio
    async def test_success_callback_completes_checkout(self, cart):
        cart.add_item(_product("p1", 20000), 1)
        popup = PaystackPopup("pk_test_storefront")
        orchestrator = _orchestrator(cart, popup)

        task = asyncio.create_task(orchestrator.checkout(ShopperDetails.from_dict(SHOPPER)))
        await asyncio.sleep(0)
        [order] = _orders()
        assert orchestrator.state is CheckoutState.AWAITING_PAYMENT
        assert popup.on_success(order.payment_reference, {"status": "success"})

        result = await task
        assert result.state is CheckoutState.DONE
        assert result.order_number == order.order_number

    @pytest.mark.asyncio
    async def test_close_callback_cancels_checkout(self, cart):
        cart.add_item(_product("p1", 20000), 1)
        popup = PaystackPopup("pk_test_storefront")

        task = asyncio.create_task(_orchestrator(cart, popup).checkout(ShopperDetails.from_dict(SHOPPER)))
        await asyncio.sleep(0)
        [order] = _orders()
        popup.on_close(order.payment_reference)

        result = await task
        assert result.state is CheckoutState.PAYMENT_CANCELLED
        assert not cart.is_empty
