"""FastAPI dependencies for the Ordering API.

Each request gets its own ``Cart`` for the session in the path; the cart is
never shared through module state. Product lookups cross into the catalogue
domain, so they run inside its domain context.
"""

from fastapi import Depends, Path
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from ordering.cart.cart import Cart, CartProduct
from ordering.cart.storage import CartStorage, get_cart_storage
from ordering.config import StorefrontSettings, get_settings
from payments.gateway import get_widget
from payments.gateway.port import PaymentWidget

SESSION_ID_PATTERN = r"^[A-Za-z0-9_-]{1,128}$"


class CatalogueProducts:
    """Reads storefront products for the cart."""

    def get(self, product_id: str) -> CartProduct:
        with catalogue.domain_context():
            product = current_domain.repository_for(Product).get(product_id)
            if not product.is_visible:
                raise ObjectNotFoundError(f"Product {product_id} not found")
            return CartProduct.from_dict(product.to_cart_product())

    def counts(self) -> dict:
        with catalogue.domain_context():
            return current_domain.repository_for(Product).counts()


def catalogue_products() -> CatalogueProducts:
    return CatalogueProducts()


def cart_storage() -> CartStorage:
    return get_cart_storage()


def storefront_settings() -> StorefrontSettings:
    return get_settings()


def payment_widget() -> PaymentWidget:
    return get_widget()


def session_cart(
    session_id: str = Path(..., pattern=SESSION_ID_PATTERN),
    storage: CartStorage = Depends(cart_storage),
) -> Cart:
    return Cart.load(session_id, storage)
