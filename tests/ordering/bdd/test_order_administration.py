"""BDD tests for order administration and tracking."""

import json

import pytest
from ordering.order.administration import UpdateOrder
from ordering.order.history import OrderStatusHistory
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from ordering.order.tracking import track_order
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/order_administration.feature")


@pytest.fixture()
def lookup():
    return {"tracked": None, "missing": False}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a placed order "{order_number}" for "{email}"'), target_fixture="order_id")
def _(order_number, email):
    placed = current_domain.process(
        PlaceOrder(
            order_number=order_number,
            customer_name="Amaka Obi",
            customer_email=email,
            customer_phone="+2348012345678",
            shipping_address=json.dumps(
                {
                    "full_name": "Amaka Obi",
                    "phone": "+2348012345678",
                    "address_line1": "12 Admiralty Way",
                    "city": "Lekki",
                    "state": "Lagos",
                }
            ),
            items=json.dumps([{"product_id": "prod-1", "product_name": "Ankara Tote", "quantity": 1, "price": 9000}]),
            shipping_cost=2500,
            payment_reference="LTL_1718000000000_abc1234",
        ),
        asynchronous=False,
    )
    return placed["order_id"]


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.cfparse('the admin sets the status to "{status}" with notes "{notes}"'),
    target_fixture="changed_fields",
)
def _(order_id, status, notes):
    return current_domain.process(UpdateOrder(order_id=order_id, status=status, notes=notes), asynchronous=False)


@when(parsers.cfparse('the admin sets the tracking number to "{tracking_number}"'), target_fixture="changed_fields")
def _(order_id, tracking_number):
    return current_domain.process(
        UpdateOrder(order_id=order_id, status="pending", tracking_number=tracking_number),
        asynchronous=False,
    )


@when("the admin saves the order unchanged", target_fixture="changed_fields")
def _(order_id):
    return current_domain.process(UpdateOrder(order_id=order_id, status="pending"), asynchronous=False)


@when(parsers.cfparse('the shopper tracks "{order_number}" with "{email}"'))
def _(lookup, order_number, email):
    try:
        lookup["tracked"] = track_order(order_number, email)
    except ObjectNotFoundError:
        lookup["missing"] = True


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse('the order tracking number is "{tracking_number}"'))
def _(order_id, tracking_number):
    assert current_domain.repository_for(Order).get(order_id).tracking_number == tracking_number


@then(parsers.cfparse('the history reads "{status}"'))
def _(order_id, status):
    assert [entry.status for entry in current_domain.repository_for(OrderStatusHistory).for_order(order_id)] == [
        status
    ]


@then("the history is empty")
def _(order_id):
    assert current_domain.repository_for(OrderStatusHistory).for_order(order_id) == []


@then("no fields changed")
def _(changed_fields):
    assert changed_fields == []


@then(parsers.cfparse('the tracked order is "{order_number}"'))
def _(lookup, order_number):
    assert lookup["tracked"].order.order_number == order_number


@then("no order is found")
def _(lookup):
    assert lookup["missing"] is True
