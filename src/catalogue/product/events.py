"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    price: Integer(required=True)
    created_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductUpdated:
    """The admin console replaced a product's editable details."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    price: Integer(required=True)
    inventory_count: Integer(required=True)
    is_sold_out: Boolean()


@catalogue.event(part_of="Product")
class ProductVisibilityChanged:
    """A product was shown in or hidden from the storefront."""

    __version__ = 1

    product_id: Identifier(required=True)
    is_visible: Boolean()
