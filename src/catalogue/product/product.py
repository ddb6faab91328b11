"""Product aggregate root.

Products are the rows shoppers browse and add to their carts. Prices are whole
Naira amounts. The slug is always derived from the product name so that a
rename moves the product page along with it.
"""

import json
from datetime import datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String, Text

from catalogue.domain import catalogue
from catalogue.shared.slug import slugify
from shared.money import DEFAULT_CURRENCY


def _clean_images(images):
    if images is None:
        return []
    if isinstance(images, str):
        images = images.split("\n")
    return [url.strip() for url in images if url and url.strip()]


@catalogue.aggregate
class Product:
    """A sellable item in the store's catalogue."""

    name: String(required=True, max_length=255)
    description: Text()
    price: Integer(required=True, min_value=0)
    currency: String(max_length=3, default=DEFAULT_CURRENCY)
    images: Text()  # JSON array of image URLs, primary image first
    category: String(max_length=100)
    inventory_count: Integer(default=0, min_value=0)
    is_visible: Boolean(default=True)
    is_sold_out: Boolean(default=False)
    slug: String(required=True, max_length=255)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def slug_must_match_name(self):
        if self.slug != slugify(self.name):
            raise ValidationError({"slug": ["Slug must be derived from the product name"]})

    @classmethod
    def create(
        cls,
        name,
        price,
        description=None,
        category=None,
        inventory_count=0,
        images=None,
        is_visible=True,
        is_sold_out=False,
        currency=DEFAULT_CURRENCY,
    ):
        from catalogue.product.events import ProductCreated

        slug = slugify(name)
        if not slug:
            raise ValidationError({"name": ["Product name must contain letters or digits"]})

        now = datetime.now()
        product = cls(
            name=name,
            description=description or None,
            price=price,
            currency=currency,
            images=json.dumps(_clean_images(images)),
            category=category or None,
            inventory_count=inventory_count or 0,
            is_visible=is_visible,
            is_sold_out=is_sold_out,
            slug=slug,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                slug=slug,
                price=price,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def image_urls(self):
        return json.loads(self.images) if self.images else []

    def primary_image(self):
        urls = self.image_urls()
        return urls[0] if urls else ""

    # -------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------
    def update_details(
        self,
        name,
        price,
        description=None,
        category=None,
        inventory_count=0,
        images=None,
        is_visible=True,
        is_sold_out=False,
    ):
        """Replace the editable attributes, as the admin product form does."""
        from catalogue.product.events import ProductUpdated

        slug = slugify(name)
        if not slug:
            raise ValidationError({"name": ["Product name must contain letters or digits"]})

        # Name and slug move together so the slug invariant holds throughout
        with atomic_change(self):
            self.name = name
            self.slug = slug
        self.price = price
        self.description = description or None
        self.category = category or None
        self.inventory_count = inventory_count or 0
        self.images = json.dumps(_clean_images(images))
        self.is_visible = is_visible
        self.is_sold_out = is_sold_out
        self.updated_at = datetime.now()

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                name=self.name,
                slug=self.slug,
                price=self.price,
                inventory_count=self.inventory_count,
                is_sold_out=self.is_sold_out,
            )
        )

    def toggle_visibility(self):
        from catalogue.product.events import ProductVisibilityChanged

        self.is_visible = not self.is_visible
        self.updated_at = datetime.now()

        self.raise_(
            ProductVisibilityChanged(
                product_id=self.id,
                is_visible=self.is_visible,
            )
        )

    def to_cart_product(self):
        """Serialise the fields the shopping cart keeps for a product."""
        return {
            "id": str(self.id),
            "name": self.name,
            "price": self.price,
            "images": self.image_urls(),
            "inventory_count": self.inventory_count,
            "is_sold_out": self.is_sold_out,
            "slug": self.slug,
            "category": self.category,
        }


@catalogue.repository(part_of=Product)
class ProductRepository:
    """Catalogue queries used by the storefront and the admin console."""

    def visible(self, category=None):
        """Visible products, newest first, optionally within one category."""
        filters = {"is_visible": True}
        if category:
            filters["category"] = category
        return self._dao.query.filter(**filters).order_by("-created_at").all().items

    def newest_first(self):
        return self._dao.query.order_by("-created_at").all().items

    def visible_by_slug(self, slug):
        """Return the visible product with ``slug``, or raise ObjectNotFoundError."""
        return self._dao.find_by(slug=slug, is_visible=True)

    def slug_taken(self, slug, exclude_id=None):
        matches = self._dao.query.filter(slug=slug).all().items
        return any(str(p.id) != str(exclude_id) for p in matches)

    def counts(self):
        """Product totals for the admin dashboard."""
        return {
            "total": self._dao.query.all().total,
            "visible": self._dao.query.filter(is_visible=True).all().total,
        }
