"""Product maintenance from the admin console — commands and handler.

The admin form always regenerates the slug from the product name, so two
products whose names slugify identically are rejected.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.shared.slug import slugify


@catalogue.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    price: Integer(required=True, min_value=0)
    description: Text()
    category: String(max_length=100)
    inventory_count: Integer(default=0, min_value=0)
    images: Text()  # JSON: list of image URLs
    is_visible: Boolean(default=True)
    is_sold_out: Boolean(default=False)


@catalogue.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    price: Integer(required=True, min_value=0)
    description: Text()
    category: String(max_length=100)
    inventory_count: Integer(default=0, min_value=0)
    images: Text()  # JSON: list of image URLs
    is_visible: Boolean(default=True)
    is_sold_out: Boolean(default=False)


@catalogue.command(part_of="Product")
class ToggleProductVisibility:
    product_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def _images(command):
    if not command.images:
        return []
    return json.loads(command.images) if isinstance(command.images, str) else command.images


def _flag(value, default):
    return default if value is None else value


@catalogue.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        if repo.slug_taken(slugify(command.name)):
            raise ValidationError({"name": ["A product with this name already exists"]})

        product = Product.create(
            name=command.name,
            price=command.price,
            description=command.description,
            category=command.category,
            inventory_count=command.inventory_count,
            images=_images(command),
            is_visible=_flag(command.is_visible, True),
            is_sold_out=_flag(command.is_sold_out, False),
        )
        repo.add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if repo.slug_taken(slugify(command.name), exclude_id=product.id):
            raise ValidationError({"name": ["A product with this name already exists"]})

        product.update_details(
            name=command.name,
            price=command.price,
            description=command.description,
            category=command.category,
            inventory_count=command.inventory_count,
            images=_images(command),
            is_visible=_flag(command.is_visible, True),
            is_sold_out=_flag(command.is_sold_out, False),
        )
        repo.add(product)

    @handle(ToggleProductVisibility)
    def toggle_visibility(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.toggle_visibility()
        repo.add(product)
        return product.is_visible

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)
