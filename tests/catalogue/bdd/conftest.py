"""Shared BDD fixtures and step definitions for the Catalogue domain."""

import pytest
from catalogue.product.product import Product
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a product "{name}" priced at {price:d} with {stock:d} in stock'),
    target_fixture="product",
)
def existing_product(name, price, stock):
    product = Product.create(name=name, price=price, inventory_count=stock)
    product._events.clear()
    return product


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the product slug is "{slug}"'))
def product_slug_is(product, slug):
    assert product.slug == slug


@then(parsers.cfparse('a "{event_type}" product event is raised'))
def product_event_raised(product, event_type):
    assert event_type in [type(e).__name__ for e in product._events]


@then("the product action fails with a validation error")
def product_action_fails(error):
    assert isinstance(error["exc"], ValidationError)
