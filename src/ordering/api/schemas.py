"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands. Checkout fields are plain optional strings; the
checkout form rules produce the shopper-facing messages.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "2f1c6c1e-5d0a-4a53-9d4e-0c3c2b1f8a77",
                    "quantity": 2,
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CartLineResponse(BaseModel):
    product_id: str
    name: str
    slug: str
    image: str
    price: int
    quantity: int
    line_total: int
    available: int


class CartResponse(BaseModel):
    session_id: str
    items: list[CartLineResponse]
    total_items: int
    total_price: int
    total_display: str
    is_open: bool


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    state: str = ""
    country: str = "Nigeria"
    postal_code: str = ""
    notes: str = ""

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_name": "Amaka Obi",
                    "customer_email": "amaka@example.com",
                    "customer_phone": "+2348012345678",
                    "address_line1": "12 Admiralty Way",
                    "city": "Lekki",
                    "state": "Lagos",
                }
            ]
        }
    }


class PaymentCallbackRequest(BaseModel):
    """What the payment popup's success callback reports."""

    reference: str | None = None
    status: str | None = "success"


class PaymentRequestResponse(BaseModel):
    public_key: str
    email: str
    amount: int
    amount_minor: int
    currency: str
    reference: str
    metadata: dict = Field(default_factory=dict)


class CheckoutResponse(BaseModel):
    state: str
    order_number: str | None = None
    redirect_to: str | None = None
    notice: str | None = None
    errors: dict[str, list[str]] = Field(default_factory=dict)
    subtotal: int | None = None
    shipping_cost: int | None = None
    total: int | None = None
    total_display: str | None = None
    payment: PaymentRequestResponse | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class TrackOrderRequest(BaseModel):
    order_number: str
    email: str


class ShippingAddressResponse(BaseModel):
    full_name: str
    phone: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    country: str | None = None
    postal_code: str | None = None


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    product_slug: str | None = None
    product_image: str | None = None
    quantity: int
    price: int
    line_total: int


class StatusHistoryResponse(BaseModel):
    status: str
    notes: str | None = None
    created_at: datetime


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: ShippingAddressResponse | None = None
    items: list[OrderItemResponse]
    subtotal: int
    shipping_cost: int
    total: int
    total_display: str
    currency: str
    payment_reference: str | None = None
    payment_status: str
    status: str
    tracking_number: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    history: list[StatusHistoryResponse] = Field(default_factory=list)


class OrderSummaryResponse(BaseModel):
    id: str
    order_number: str
    customer_name: str
    customer_email: str
    total: int
    total_display: str
    payment_status: str
    status: str
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
class UpdateOrderRequest(BaseModel):
    """Omitted fields are left alone; an empty tracking number clears it."""

    status: str | None = None
    tracking_number: str | None = None
    notes: str | None = None


class UpdateOrderResponse(BaseModel):
    changed_fields: list[str]


class DashboardResponse(BaseModel):
    total_products: int
    visible_products: int
    total_orders: int
    pending_orders: int
    total_revenue: int
    total_revenue_display: str
    recent_orders: list[OrderSummaryResponse]
