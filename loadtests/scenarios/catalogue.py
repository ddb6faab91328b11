"""Catalogue load test scenarios.

Two journeys: shoppers browsing the storefront (read heavy, the bulk of
real traffic) and admins maintaining products. Steps execute in order.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import CATEGORIES, product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import AdminState


class BrowsingJourney(SequentialTaskSet):
    """List Products -> Filter by Category -> View Product -> List Categories."""

    def on_start(self):
        self.slugs = []

    @task
    def list_products(self):
        with self.client.get("/products", catch_response=True, name="GET /products") as resp:
            if resp.status_code == 200:
                self.slugs = [p["slug"] for p in resp.json()]
            else:
                resp.failure(f"List products failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def filter_by_category(self):
        self.client.get(
            "/products",
            params={"category": random.choice(CATEGORIES)},
            name="GET /products?category",
        )

    @task
    def view_product(self):
        if not self.slugs:
            self.interrupt()
        with self.client.get(
            f"/products/{random.choice(self.slugs)}",
            catch_response=True,
            name="GET /products/{slug}",
        ) as resp:
            # A product hidden since the listing was fetched is a 404, not a failure
            if resp.status_code in (200, 404):
                resp.success()
            else:
                resp.failure(f"View product failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def list_categories(self):
        self.client.get("/categories", name="GET /categories")

    @task
    def done(self):
        self.interrupt()


class ProductMaintenanceJourney(SequentialTaskSet):
    """Create Product -> Edit Price and Stock -> Hide -> Show again.

    Models an admin adding stock to the shop.
    """

    def on_start(self):
        self.state = AdminState()
        self.form = product_data()

    @task
    def create_product(self):
        with self.client.post(
            "/admin/products",
            json=self.form,
            catch_response=True,
            name="POST /admin/products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_id = resp.json()["product_id"]
            else:
                resp.failure(f"Create product failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def edit_product(self):
        self.form = {**self.form, "price": self.form["price"] + 500, "inventory_count": random.randint(5, 50)}
        with self.client.put(
            f"/admin/products/{self.state.product_id}",
            json=self.form,
            catch_response=True,
            name="PUT /admin/products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Edit product failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def hide_product(self):
        self._toggle("Hide")

    @task
    def show_product(self):
        self._toggle("Show")

    def _toggle(self, action):
        with self.client.put(
            f"/admin/products/{self.state.product_id}/visibility",
            catch_response=True,
            name="PUT /admin/products/{id}/visibility",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"{action} product failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CatalogueUser(HttpUser):
    """Storefront browsing with occasional admin maintenance."""

    wait_time = between(0.5, 2.0)
    tasks = {BrowsingJourney: 8, ProductMaintenanceJourney: 1}
