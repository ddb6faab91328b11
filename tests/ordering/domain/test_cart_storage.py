"""Tests for cart storage backends."""

import pytest
from ordering.cart.cart import Cart, CartProduct
from ordering.cart.storage import (
    InMemoryCartStorage,
    JsonFileCartStorage,
    get_cart_storage,
    set_cart_storage,
)
from ordering.config import StorefrontSettings, set_settings


def _product():
    return CartProduct(id="prod-1", name="Ankara Tote", price=9000, inventory_count=5, slug="ankara-tote")


class TestInMemoryCartStorage:
    def test_missing_session(self):
        assert InMemoryCartStorage().load("nobody") is None

    def test_saved_document_is_a_copy(self):
        storage = InMemoryCartStorage()
        data = {"items": []}
        storage.save("s1", data)
        data["items"].append("mutated")
        assert storage.load("s1") == {"items": []}


class TestJsonFileCartStorage:
    def test_round_trip(self, tmp_path):
        storage = JsonFileCartStorage(tmp_path / "carts")
        cart = Cart.load("s1", storage)
        cart.add_item(_product(), 2)

        assert (tmp_path / "carts" / "s1.json").exists()
        assert Cart.load("s1", JsonFileCartStorage(tmp_path / "carts")).get_total_items() == 2

    def test_missing_file(self, tmp_path):
        assert JsonFileCartStorage(tmp_path).load("s1") is None

    def test_corrupt_file_is_an_empty_cart(self, tmp_path):
        (tmp_path / "s1.json").write_text("{not json", encoding="utf-8")
        assert JsonFileCartStorage(tmp_path).load("s1") is None

    @pytest.mark.parametrize("document", ['["stray"]', '"text"', '{"items": [{"quantity": 2}]}'])
    def test_unexpected_document_loads_as_empty_cart(self, tmp_path, document):
        (tmp_path / "s1.json").write_text(document, encoding="utf-8")
        assert Cart.load("s1", JsonFileCartStorage(tmp_path)).is_empty

    @pytest.mark.parametrize("session_id", ["../etc/passwd", "a/b", "", "x" * 129])
    def test_unsafe_session_ids_rejected(self, tmp_path, session_id):
        with pytest.raises(ValueError):
            JsonFileCartStorage(tmp_path).load(session_id)


class TestStorageFactory:
    def test_defaults_to_memory(self):
        set_settings(StorefrontSettings())
        assert isinstance(get_cart_storage(), InMemoryCartStorage)

    def test_file_storage_when_directory_configured(self, tmp_path):
        set_settings(StorefrontSettings(cart_storage_dir=str(tmp_path)))
        storage = get_cart_storage()
        assert isinstance(storage, JsonFileCartStorage)
        assert storage.directory == tmp_path

    def test_override(self):
        storage = InMemoryCartStorage()
        set_cart_storage(storage)
        assert get_cart_storage() is storage
