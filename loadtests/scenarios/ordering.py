"""Ordering load test scenarios.

Shopper journeys through the cart and checkout, and the admin side of order
handling. Payment popups are simulated by calling the success and cancel
callbacks the browser would post.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import admin_order_update, incomplete_shopper_data, shopper_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import AdminState, ShopperState


class _ShopperJourney(SequentialTaskSet):
    """Shared steps: pick products from the storefront and fill the cart."""

    def on_start(self):
        self.state = ShopperState()

    def _pick_products(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code != 200 or not resp.json():
                resp.failure(f"No products to buy: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            products = [p for p in resp.json() if not p["is_sold_out"] and p["inventory_count"] > 0]
            self.state.product_ids = [p["id"] for p in random.sample(products, min(len(products), 3))]

    def _add_to_cart(self, product_id, quantity=1):
        with self.client.post(
            f"/cart/{self.state.session_id}/items",
            json={"product_id": product_id, "quantity": quantity},
            catch_response=True,
            name="POST /cart/{session}/items",
        ) as resp:
            if resp.status_code == 200:
                self.state.item_count = resp.json()["total_items"]
            else:
                resp.failure(f"Add to cart failed: {resp.status_code} — {extract_error_detail(resp)}")

    def _begin_checkout(self, form, expected=201):
        with self.client.post(
            f"/checkout/{self.state.session_id}",
            json=form,
            catch_response=True,
            name="POST /checkout/{session}",
        ) as resp:
            if resp.status_code != expected:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
            elif expected == 201:
                body = resp.json()
                self.state.payment_reference = body["payment"]["reference"]
                self.state.order_number = body["order_number"]
                self.state.email = form["customer_email"]
            else:
                resp.success()

    def _payment_callback(self, outcome):
        with self.client.post(
            f"/checkout/{self.state.session_id}/payments/{self.state.payment_reference}/{outcome}",
            catch_response=True,
            name=f"POST /checkout/{{session}}/payments/{{ref}}/{outcome}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Payment {outcome} failed: {resp.status_code} — {extract_error_detail(resp)}")


class CartBrowsingJourney(_ShopperJourney):
    """Add Items -> Change Quantity -> Remove Item -> Leave.

    Models a shopper who fills a cart and walks away.
    """

    @task
    def pick_products(self):
        self._pick_products()

    @task
    def add_items(self):
        for product_id in self.state.product_ids:
            self._add_to_cart(product_id, random.randint(1, 3))

    @task
    def change_quantity(self):
        if not self.state.product_ids:
            self.interrupt()
        self.client.put(
            f"/cart/{self.state.session_id}/items/{self.state.product_ids[0]}",
            json={"quantity": random.randint(0, 4)},
            name="PUT /cart/{session}/items/{id}",
        )

    @task
    def remove_item(self):
        self.client.delete(
            f"/cart/{self.state.session_id}/items/{self.state.product_ids[-1]}",
            name="DELETE /cart/{session}/items/{id}",
        )

    @task
    def view_cart(self):
        self.client.get(f"/cart/{self.state.session_id}", name="GET /cart/{session}")

    @task
    def done(self):
        self.interrupt()


class CheckoutJourney(_ShopperJourney):
    """Add Items -> Checkout -> Pay -> View Confirmation -> Track Order.

    The happy path from cart to a confirmed order.
    """

    @task
    def pick_products(self):
        self._pick_products()

    @task
    def add_items(self):
        for product_id in self.state.product_ids:
            self._add_to_cart(product_id)

    @task
    def begin_checkout(self):
        self._begin_checkout(shopper_data())

    @task
    def pay(self):
        self._payment_callback("success")

    @task
    def view_confirmation(self):
        self.client.get(f"/orders/{self.state.order_number}", name="GET /orders/{number}")

    @task
    def track_order(self):
        self.client.post(
            "/orders/track",
            json={"order_number": self.state.order_number, "email": self.state.email.upper()},
            name="POST /orders/track",
        )

    @task
    def done(self):
        self.interrupt()


class AbandonedPaymentJourney(_ShopperJourney):
    """Add Items -> Bad Form -> Checkout -> Close Popup -> Checkout Again -> Pay.

    Exercises form validation and the reuse of a pending order on retry.
    """

    @task
    def pick_products(self):
        self._pick_products()

    @task
    def add_items(self):
        for product_id in self.state.product_ids:
            self._add_to_cart(product_id)

    @task
    def submit_incomplete_form(self):
        self._begin_checkout(incomplete_shopper_data(), expected=422)

    @task
    def begin_checkout(self):
        self.form = shopper_data()
        self._begin_checkout(self.form)

    @task
    def close_popup(self):
        self._payment_callback("cancel")

    @task
    def retry_checkout(self):
        self._begin_checkout(self.form)

    @task
    def pay(self):
        self._payment_callback("success")

    @task
    def done(self):
        self.interrupt()


class OrderAdminJourney(SequentialTaskSet):
    """Dashboard -> List Orders -> Update Orders.

    Models an admin working through the order queue.
    """

    def on_start(self):
        self.state = AdminState()

    @task
    def dashboard(self):
        self.client.get("/admin/dashboard", name="GET /admin/dashboard")

    @task
    def list_confirmed(self):
        with self.client.get(
            "/admin/orders",
            params={"status": "confirmed"},
            catch_response=True,
            name="GET /admin/orders?status",
        ) as resp:
            if resp.status_code == 200:
                self.state.order_ids = [o["id"] for o in resp.json()[:3]]
            else:
                resp.failure(f"List orders failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def update_orders(self):
        for order_id in self.state.order_ids:
            with self.client.put(
                f"/admin/orders/{order_id}",
                json=admin_order_update(),
                catch_response=True,
                name="PUT /admin/orders/{id}",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Update order failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class OrderingUser(HttpUser):
    """Shoppers checking out, with an admin now and then."""

    wait_time = between(1.0, 3.0)
    tasks = {CartBrowsingJourney: 4, CheckoutJourney: 3, AbandonedPaymentJourney: 2, OrderAdminJourney: 1}
