"""FastAPI routes for the Ordering domain — cart, checkout, orders and admin."""

from fastapi import APIRouter, Depends, Response
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.api.dependencies import (
    CatalogueProducts,
    catalogue_products,
    payment_widget,
    session_cart,
    storefront_settings,
)
from ordering.api.schemas import (
    AddToCartRequest,
    CartLineResponse,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    DashboardResponse,
    OrderItemResponse,
    OrderResponse,
    OrderSummaryResponse,
    PaymentCallbackRequest,
    PaymentRequestResponse,
    ShippingAddressResponse,
    StatusHistoryResponse,
    TrackOrderRequest,
    UpdateCartQuantityRequest,
    UpdateOrderRequest,
    UpdateOrderResponse,
)
from ordering.cart.cart import Cart
from ordering.checkout.form import ShopperDetails
from ordering.checkout.orchestrator import CheckoutOrchestrator, CheckoutResult, CheckoutState
from ordering.config import StorefrontSettings
from ordering.order.administration import UpdateOrder
from ordering.order.dashboard import order_dashboard
from ordering.order.order import Order, OrderStatus
from ordering.order.tracking import order_confirmation, track_order
from payments.gateway.port import PaymentOutcome, PaymentWidget
from shared.money import format_currency


def _cart_response(cart: Cart, currency: str) -> CartResponse:
    return CartResponse(
        session_id=cart.session_id,
        items=[
            CartLineResponse(
                product_id=line.product.id,
                name=line.product.name,
                slug=line.product.slug,
                image=line.product.primary_image,
                price=line.product.price,
                quantity=line.quantity,
                line_total=line.line_total,
                available=line.product.available,
            )
            for line in cart.lines
        ],
        total_items=cart.get_total_items(),
        total_price=cart.get_total_price(),
        total_display=format_currency(cart.get_total_price(), currency),
        is_open=cart.is_open,
    )


def _order_summary(order) -> OrderSummaryResponse:
    return OrderSummaryResponse(
        id=str(order.id),
        order_number=order.order_number,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        total=order.total,
        total_display=format_currency(order.total, order.currency),
        payment_status=order.payment_status,
        status=order.status,
        created_at=order.created_at,
    )


def _order_response(tracked) -> OrderResponse:
    order = tracked.order
    address = order.shipping_address
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        shipping_address=(
            ShippingAddressResponse(
                full_name=address.full_name,
                phone=address.phone,
                address_line1=address.address_line1,
                address_line2=address.address_line2,
                city=address.city,
                state=address.state,
                country=address.country,
                postal_code=address.postal_code,
            )
            if address
            else None
        ),
        items=[
            OrderItemResponse(
                product_id=item.product_id,
                product_name=item.product_name,
                product_slug=item.product_slug,
                product_image=item.product_image,
                quantity=item.quantity,
                price=item.price,
                line_total=item.line_total,
            )
            for item in order.items
        ],
        subtotal=order.subtotal,
        shipping_cost=order.shipping_cost,
        total=order.total,
        total_display=format_currency(order.total, order.currency),
        currency=order.currency,
        payment_reference=order.payment_reference,
        payment_status=order.payment_status,
        status=order.status,
        tracking_number=order.tracking_number,
        notes=order.notes,
        created_at=order.created_at,
        history=[
            StatusHistoryResponse(status=entry.status, notes=entry.notes, created_at=entry.created_at)
            for entry in tracked.history
        ],
    )


def _checkout_response(result: CheckoutResult, response: Response) -> CheckoutResponse:
    if result.state is CheckoutState.VALIDATION_FAILED:
        response.status_code = 422
    elif result.state is CheckoutState.FAILED:
        response.status_code = 503
    elif result.state is CheckoutState.AWAITING_PAYMENT:
        response.status_code = 201

    body = CheckoutResponse(
        state=result.state.value,
        order_number=result.order_number,
        redirect_to=result.redirect_to,
        notice=result.notice,
        errors=result.errors,
    )
    if result.pending is not None:
        pending = result.pending
        body.subtotal = pending.subtotal
        body.shipping_cost = pending.shipping_cost
        body.total = pending.total
        body.total_display = format_currency(pending.total, pending.payment_request.currency)
        body.payment = PaymentRequestResponse(**pending.payment_request.to_dict())
    return body


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("/{session_id}", response_model=CartResponse)
async def get_cart(
    cart: Cart = Depends(session_cart),
    settings: StorefrontSettings = Depends(storefront_settings),
) -> CartResponse:
    return _cart_response(cart, settings.currency)


@cart_router.post("/{session_id}/items", response_model=CartResponse)
async def add_cart_item(
    body: AddToCartRequest,
    cart: Cart = Depends(session_cart),
    products: CatalogueProducts = Depends(catalogue_products),
    settings: StorefrontSettings = Depends(storefront_settings),
) -> CartResponse:
    cart.add_item(products.get(body.product_id), body.quantity)
    return _cart_response(cart, settings.currency)


@cart_router.put("/{session_id}/items/{product_id}", response_model=CartResponse)
async def update_cart_item_quantity(
    product_id: str,
    body: UpdateCartQuantityRequest,
    cart: Cart = Depends(session_cart),
    settings: StorefrontSettings = Depends(storefront_settings),
) -> CartResponse:
    cart.update_quantity(product_id, body.quantity)
    return _cart_response(cart, settings.currency)


@cart_router.delete("/{session_id}/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    product_id: str,
    cart: Cart = Depends(session_cart),
    settings: StorefrontSettings = Depends(storefront_settings),
) -> CartResponse:
    cart.remove_item(product_id)
    return _cart_response(cart, settings.currency)


@cart_router.delete("/{session_id}", response_model=CartResponse)
async def clear_cart(
    cart: Cart = Depends(session_cart),
    settings: StorefrontSettings = Depends(storefront_settings),
) -> CartResponse:
    cart.clear_cart()
    return _cart_response(cart, settings.currency)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("/{session_id}", response_model=CheckoutResponse)
async def begin_checkout(
    body: CheckoutRequest,
    response: Response,
    cart: Cart = Depends(session_cart),
    widget: PaymentWidget = Depends(payment_widget),
    settings: StorefrontSettings = Depends(storefront_settings),
) -> CheckoutResponse:
    """Validate the form and create the pending order.

    The response carries the payment request the browser hands to the popup.
    """
    orchestrator = CheckoutOrchestrator(cart, widget, settings)
    result = orchestrator.begin(ShopperDetails.from_dict(body.model_dump()))
    return _checkout_response(result, response)


@checkout_router.post("/{session_id}/payments/{reference}/success", response_model=CheckoutResponse)
async def payment_succeeded(
    reference: str,
    response: Response,
    body: PaymentCallbackRequest | None = None,
    cart: Cart = Depends(session_cart),
    widget: PaymentWidget = Depends(payment_widget),
    settings: StorefrontSettings = Depends(storefront_settings),
) -> CheckoutResponse:
    body = body or PaymentCallbackRequest()
    orchestrator = CheckoutOrchestrator(cart, widget, settings)
    pending = orchestrator.resume(reference)
    outcome = PaymentOutcome.succeeded(body.reference or reference, body.status or "success")
    return _checkout_response(orchestrator.complete(pending, outcome), response)


@checkout_router.post("/{session_id}/payments/{reference}/cancel", response_model=CheckoutResponse)
async def payment_cancelled(
    reference: str,
    response: Response,
    cart: Cart = Depends(session_cart),
    widget: PaymentWidget = Depends(payment_widget),
    settings: StorefrontSettings = Depends(storefront_settings),
) -> CheckoutResponse:
    orchestrator = CheckoutOrchestrator(cart, widget, settings)
    pending = orchestrator.resume(reference)
    return _checkout_response(orchestrator.complete(pending, PaymentOutcome.cancelled()), response)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("/track", response_model=OrderResponse)
async def track(body: TrackOrderRequest) -> OrderResponse:
    return _order_response(track_order(body.order_number, body.email))


@order_router.get("/{order_number}", response_model=OrderResponse)
async def get_order(order_number: str) -> OrderResponse:
    return _order_response(order_confirmation(order_number))


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_order_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_order_router.get("/orders", response_model=list[OrderSummaryResponse])
async def list_orders(status: str | None = None) -> list[OrderSummaryResponse]:
    if status and status not in {s.value for s in OrderStatus}:
        raise ValidationError({"status": [f"Unknown order status '{status}'"]})
    orders = current_domain.repository_for(Order).newest_first(status=status)
    return [_order_summary(o) for o in orders]


@admin_order_router.put("/orders/{order_id}", response_model=UpdateOrderResponse)
async def update_order(order_id: str, body: UpdateOrderRequest) -> UpdateOrderResponse:
    command = UpdateOrder(
        order_id=order_id,
        status=body.status,
        tracking_number=body.tracking_number or None,
        clear_tracking_number=body.tracking_number == "",
        notes=body.notes,
    )
    changed_fields = current_domain.process(command, asynchronous=False)
    return UpdateOrderResponse(changed_fields=changed_fields or [])


@admin_order_router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    products: CatalogueProducts = Depends(catalogue_products),
    settings: StorefrontSettings = Depends(storefront_settings),
) -> DashboardResponse:
    figures = order_dashboard(products.counts())
    return DashboardResponse(
        total_products=figures["total_products"],
        visible_products=figures["visible_products"],
        total_orders=figures["total_orders"],
        pending_orders=figures["pending_orders"],
        total_revenue=figures["total_revenue"],
        total_revenue_display=format_currency(figures["total_revenue"], settings.currency),
        recent_orders=[_order_summary(o) for o in figures["recent_orders"]],
    )
