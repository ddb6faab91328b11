"""Tests for the Product aggregate root."""

import json

import pytest
from catalogue.product.events import ProductCreated, ProductUpdated, ProductVisibilityChanged
from catalogue.product.product import Product
from protean.exceptions import ValidationError
from protean.utils.reflection import declared_fields


def _product(**overrides):
    defaults = {
        "name": "Beaded Leather Sandals",
        "price": 18500,
        "inventory_count": 12,
        "images": ["https://cdn.example.com/sandals-front.jpg", "https://cdn.example.com/sandals-back.jpg"],
        "category": "footwear",
    }
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductConstruction:
    def test_element_type(self):
        from protean.utils import DomainObjects

        assert Product.element_type == DomainObjects.AGGREGATE

    def test_declared_fields(self):
        fields = declared_fields(Product)
        for name in ("name", "price", "images", "inventory_count", "is_sold_out", "slug", "category"):
            assert name in fields

    def test_create_derives_slug(self):
        product = _product()
        assert product.slug == "beaded-leather-sandals"

    def test_create_defaults(self):
        product = Product.create(name="Ankara Tote", price=9000)
        assert product.is_visible is True
        assert product.is_sold_out is False
        assert product.inventory_count == 0
        assert product.currency == "NGN"
        assert product.image_urls() == []

    def test_blank_image_urls_are_dropped(self):
        product = _product(images=["https://cdn.example.com/a.jpg", "  ", ""])
        assert product.image_urls() == ["https://cdn.example.com/a.jpg"]

    def test_images_given_as_lines(self):
        product = _product(images="https://cdn.example.com/a.jpg\n\nhttps://cdn.example.com/b.jpg\n")
        assert product.image_urls() == ["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"]

    def test_primary_image_is_first(self):
        assert _product().primary_image() == "https://cdn.example.com/sandals-front.jpg"

    def test_name_without_letters_or_digits_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Product.create(name="***", price=100)
        assert "name" in exc_info.value.messages

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            Product.create(name="Ankara Tote", price=-1)

    def test_create_raises_event(self):
        product = _product()
        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, ProductCreated)
        assert event.slug == "beaded-leather-sandals"
        assert event.price == 18500


class TestSlugInvariant:
    def test_slug_must_follow_name(self):
        product = _product()
        with pytest.raises(ValidationError) as exc_info:
            product.slug = "something-else"
        assert "slug" in exc_info.value.messages


class TestUpdateDetails:
    def test_rename_moves_slug(self):
        product = _product()
        product.update_details(name="Beaded Sandals II", price=19000, inventory_count=3)
        assert product.name == "Beaded Sandals II"
        assert product.slug == "beaded-sandals-ii"
        assert product.price == 19000
        assert product.inventory_count == 3

    def test_update_replaces_images(self):
        product = _product()
        product.update_details(name=product.name, price=product.price, images=["https://cdn.example.com/new.jpg"])
        assert json.loads(product.images) == ["https://cdn.example.com/new.jpg"]

    def test_update_raises_event(self):
        product = _product()
        product._events.clear()
        product.update_details(name=product.name, price=20000, is_sold_out=True)
        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, ProductUpdated)
        assert event.price == 20000
        assert event.is_sold_out is True


class TestVisibility:
    def test_toggle_hides_and_shows(self):
        product = _product()
        product.toggle_visibility()
        assert product.is_visible is False
        product.toggle_visibility()
        assert product.is_visible is True

    def test_toggle_raises_event(self):
        product = _product()
        product._events.clear()
        product.toggle_visibility()
        event = product._events[0]
        assert isinstance(event, ProductVisibilityChanged)
        assert event.is_visible is False


class TestCartProduct:
    def test_to_cart_product(self):
        product = _product()
        data = product.to_cart_product()
        assert data["id"] == str(product.id)
        assert data["name"] == "Beaded Leather Sandals"
        assert data["price"] == 18500
        assert data["images"][0] == "https://cdn.example.com/sandals-front.jpg"
        assert data["inventory_count"] == 12
        assert data["is_sold_out"] is False
        assert data["slug"] == "beaded-leather-sandals"
