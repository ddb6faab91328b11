"""Mixed storefront workload scenario.

Combines catalogue and ordering journeys with weights that model a small
online shop: mostly browsing, some carts, fewer checkouts, and an admin
now and then. This is the recommended scenario for load baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.catalogue import BrowsingJourney, ProductMaintenanceJourney
from loadtests.scenarios.ordering import (
    AbandonedPaymentJourney,
    CartBrowsingJourney,
    CheckoutJourney,
    OrderAdminJourney,
)


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload simulating concurrent storefront activity.

    Weight distribution:

    Catalogue (50%):
    - Browsing: the bulk of all traffic
    - Product maintenance: admin activity

    Ordering (50%):
    - Cart browsing and abandonment (most common)
    - Checkout: the happy path
    - Abandoned payment then retry
    - Order administration

    Every request crosses the domain-context middleware, so the mix also
    exercises routing between the catalogue and ordering domains.
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        # Catalogue (50%)
        BrowsingJourney: 45,
        ProductMaintenanceJourney: 5,
        # Ordering (50%)
        CartBrowsingJourney: 20,
        CheckoutJourney: 15,
        AbandonedPaymentJourney: 10,
        OrderAdminJourney: 5,
    }
