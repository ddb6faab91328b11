"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class ProductFormRequest(BaseModel):
    """The admin product form; used for both creating and editing."""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Beaded Leather Sandals",
                    "price": 18500,
                    "description": "Hand-stitched sandals with glass beads.",
                    "category": "footwear",
                    "inventory_count": 12,
                    "images": ["https://cdn.example.com/sandals-front.jpg"],
                    "is_visible": True,
                    "is_sold_out": False,
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=255)
    price: int = Field(..., ge=0)
    description: str | None = None
    category: str | None = Field(None, max_length=100)
    inventory_count: int = Field(0, ge=0)
    images: list[str] = Field(default_factory=list)
    is_visible: bool = True
    is_sold_out: bool = False


# --- Category Request Schemas ---


class CreateCategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    image_url: str | None = Field(None, max_length=500)
    is_visible: bool = True
    sort_order: int = 0


# --- Response Schemas ---


class ProductIdResponse(BaseModel):
    product_id: str


class CategoryIdResponse(BaseModel):
    category_id: str


class VisibilityResponse(BaseModel):
    is_visible: bool


class StatusResponse(BaseModel):
    status: str = "ok"


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    price: int
    price_display: str
    currency: str
    images: list[str]
    category: str | None = None
    inventory_count: int
    is_visible: bool
    is_sold_out: bool
    slug: str
    created_at: datetime | None = None


class CategoryResponse(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    image_url: str | None = None
    sort_order: int
