"""FastAPI endpoints for the Catalogue domain — storefront browsing and admin maintenance."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from catalogue.api.schemas import (
    CategoryIdResponse,
    CategoryResponse,
    CreateCategoryRequest,
    ProductFormRequest,
    ProductIdResponse,
    ProductResponse,
    StatusResponse,
    VisibilityResponse,
)
from catalogue.category.category import Category
from catalogue.category.management import CreateCategory
from catalogue.product.management import (
    CreateProduct,
    DeleteProduct,
    ToggleProductVisibility,
    UpdateProduct,
)
from catalogue.product.product import Product
from shared.money import format_currency

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        price_display=format_currency(product.price, product.currency),
        currency=product.currency,
        images=product.image_urls(),
        category=product.category,
        inventory_count=product.inventory_count,
        is_visible=product.is_visible,
        is_sold_out=product.is_sold_out,
        slug=product.slug,
        created_at=product.created_at,
    )


# --- Storefront endpoints ---


@product_router.get("", response_model=list[ProductResponse])
async def list_products(category: str | None = None) -> list[ProductResponse]:
    products = current_domain.repository_for(Product).visible(category=category)
    return [_product_response(p) for p in products]


@product_router.get("/{slug}", response_model=ProductResponse)
async def get_product(slug: str) -> ProductResponse:
    product = current_domain.repository_for(Product).visible_by_slug(slug)
    return _product_response(product)


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories() -> list[CategoryResponse]:
    categories = current_domain.repository_for(Category).visible()
    return [
        CategoryResponse(
            id=str(c.id),
            name=c.name,
            slug=c.slug,
            description=c.description,
            image_url=c.image_url,
            sort_order=c.sort_order,
        )
        for c in categories
    ]


# --- Admin endpoints ---


@admin_router.get("/products", response_model=list[ProductResponse])
async def admin_list_products() -> list[ProductResponse]:
    products = current_domain.repository_for(Product).newest_first()
    return [_product_response(p) for p in products]


@admin_router.post("/products", status_code=201, response_model=ProductIdResponse)
async def create_product(body: ProductFormRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        price=body.price,
        description=body.description,
        category=body.category,
        inventory_count=body.inventory_count,
        images=json.dumps(body.images),
        is_visible=body.is_visible,
        is_sold_out=body.is_sold_out,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@admin_router.put("/products/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: ProductFormRequest) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        price=body.price,
        description=body.description,
        category=body.category,
        inventory_count=body.inventory_count,
        images=json.dumps(body.images),
        is_visible=body.is_visible,
        is_sold_out=body.is_sold_out,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.put("/products/{product_id}/visibility", response_model=VisibilityResponse)
async def toggle_product_visibility(product_id: str) -> VisibilityResponse:
    result = current_domain.process(ToggleProductVisibility(product_id=product_id), asynchronous=False)
    return VisibilityResponse(is_visible=result)


@admin_router.delete("/products/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@admin_router.post("/categories", status_code=201, response_model=CategoryIdResponse)
async def create_category(body: CreateCategoryRequest) -> CategoryIdResponse:
    command = CreateCategory(
        name=body.name,
        description=body.description,
        image_url=body.image_url,
        is_visible=body.is_visible,
        sort_order=body.sort_order,
    )
    result = current_domain.process(command, asynchronous=False)
    return CategoryIdResponse(category_id=result)
