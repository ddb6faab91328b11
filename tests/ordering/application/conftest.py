"""Helpers shared by the ordering application tests."""

import json

import pytest
from ordering.order.placement import PlaceOrder
from protean.utils.globals import current_domain

ADDRESS = {
    "full_name": "Amaka Obi",
    "phone": "+2348012345678",
    "address_line1": "12 Admiralty Way",
    "city": "Lekki",
    "state": "Lagos",
}


@pytest.fixture()
def place_order():
    """Place a pending order through the command and return the handler result."""

    def _place(**overrides):
        defaults = {
            "order_number": "LTL-1718000000000-AB12",
            "checkout_key": None,
            "customer_name": "Amaka Obi",
            "customer_email": "Amaka@Example.com",
            "customer_phone": "+2348012345678",
            "shipping_address": json.dumps(ADDRESS),
            "items": json.dumps(
                [
                    {
                        "product_id": "prod-1",
                        "product_name": "Beaded Leather Sandals",
                        "product_slug": "beaded-leather-sandals",
                        "quantity": 1,
                        "price": 20000,
                    }
                ]
            ),
            "shipping_cost": 2500,
            "payment_reference": "LTL_1718000000000_abc1234",
        }
        defaults.update(overrides)
        return current_domain.process(PlaceOrder(**defaults), asynchronous=False)

    return _place
