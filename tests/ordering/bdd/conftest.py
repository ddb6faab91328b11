"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.cart import Cart, CartProduct
from ordering.cart.storage import InMemoryCartStorage
from ordering.checkout.form import ShopperDetails
from ordering.checkout.orchestrator import CheckoutOrchestrator
from ordering.config import StorefrontSettings
from ordering.order.order import Order
from payments.gateway.fake_adapter import FakePaymentWidget
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then

SHOPPER = {
    "customer_name": "Amaka Obi",
    "customer_email": "amaka@example.com",
    "customer_phone": "+2348012345678",
    "address_line1": "12 Admiralty Way",
    "city": "Lekki",
    "state": "Lagos",
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalogue():
    """Products the scenario has put on the shelf, by name."""
    return {}


@pytest.fixture()
def cart():
    return Cart.load("bdd-session", InMemoryCartStorage())


@pytest.fixture()
def widget():
    return FakePaymentWidget()


@pytest.fixture()
def orchestrator(cart, widget):
    return CheckoutOrchestrator(cart, widget, StorefrontSettings(paystack_public_key="pk_test_bdd"))


@pytest.fixture()
def shopper():
    return ShopperDetails.from_dict(SHOPPER)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced at {price:d} with {stock:d} in stock'))
def _(catalogue, name, price, stock):
    catalogue[name] = CartProduct(id=f"prod-{len(catalogue) + 1}", name=name, price=price, inventory_count=stock)


@given(parsers.cfparse('a sold out product "{name}" priced at {price:d}'))
def _(catalogue, name, price):
    catalogue[name] = CartProduct(
        id=f"prod-{len(catalogue) + 1}", name=name, price=price, inventory_count=5, is_sold_out=True
    )


@given(parsers.cfparse('the cart holds {quantity:d} of "{name}"'))
def _(cart, catalogue, quantity, name):
    cart.add_item(catalogue[name], quantity)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the cart holds {quantity:d} of "{name}"'))
def _(cart, catalogue, quantity, name):
    line = cart.line_for(catalogue[name].id)
    assert line is not None
    assert line.quantity == quantity


@then(parsers.cfparse("the cart total is {total:d}"))
def _(cart, total):
    assert cart.get_total_price() == total


@then("the cart is empty")
def _(cart):
    assert cart.is_empty


@then(parsers.cfparse("{count:d} order exists"))
@then(parsers.cfparse("{count:d} orders exist"))
def _(count):
    assert current_domain.repository_for(Order)._dao.query.all().total == count
