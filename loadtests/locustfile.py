"""Storefront Load Testing — Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Mixed workload only:
    locust -f loadtests/locustfile.py MixedWorkloadUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py MixedWorkloadUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.data_generators import product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.catalogue import CatalogueUser  # noqa: F401
from loadtests.scenarios.mixed import MixedWorkloadUser  # noqa: F401
from loadtests.scenarios.ordering import OrderingUser  # noqa: F401

logger = logging.getLogger("loadtest")

SEED_PRODUCTS = 20


@events.init_command_line_parser.add_listener
def _(parser):
    parser.add_argument("--seed-products", type=int, default=SEED_PRODUCTS, help="Products to create before the run")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Fires globally for all scenarios — no per-task wiring needed.
    Extracts the API error body so you see "customer_phone: ['Please fill in phone']"
    instead of just "422".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Stock the shop so shopper journeys have something to buy."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")

    count = environment.parsed_options.seed_products if environment.parsed_options else SEED_PRODUCTS
    created = 0
    for _ in range(count):
        try:
            resp = requests.post(f"{environment.host}/admin/products", json=product_data(), timeout=5)
        except requests.RequestException as e:
            print(f"[LOADTEST] Could not seed products: {e}\n")
            return
        if resp.status_code == 201:
            created += 1
        else:
            logger.error("[SEED] %s: %s", resp.status_code, extract_error_detail(resp))
    print(f"[LOADTEST] Seeded {created} products")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the order figures the run left behind."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    try:
        resp = requests.get(f"{environment.host}/admin/dashboard", timeout=5)
        resp.raise_for_status()
    except requests.RequestException as e:
        print(f"[LOADTEST] Could not fetch dashboard: {e}\n")
        return
    figures = resp.json()
    print("\n[LOADTEST] Final storefront figures:")
    for key in ("total_orders", "pending_orders", "total_revenue_display", "visible_products"):
        print(f"  {key}: {figures[key]}")
    print()
