"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's validation rules
(checkout form, admin product form) and match the exact field names expected
by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

NIGERIAN_STATES = ["Lagos", "Abuja FCT", "Rivers", "Oyo", "Kano", "Enugu", "Delta", "Ogun"]
CATEGORIES = ["footwear", "bags", "clothing", "accessories", "jewellery"]


def session_id() -> str:
    """A browser tab's cart session, like 'lt-a1b2c3d4e5f6'."""
    return f"lt-{uuid.uuid4().hex[:12]}"


# ---------- Catalogue ----------


def product_data() -> dict:
    """Generate an admin product form payload.

    Names carry a random suffix so their slugs never collide.
    """
    word = fake.word().capitalize()
    return {
        "name": f"{word} {random.choice(['Sandals', 'Tote', 'Kaftan', 'Beads', 'Wrap'])} {uuid.uuid4().hex[:6]}",
        "price": random.choice([4500, 9000, 12500, 18500, 27000, 42000, 65000]),
        "description": fake.sentence(nb_words=12),
        "category": random.choice(CATEGORIES),
        "inventory_count": random.randint(20, 500),
        "images": [f"https://cdn.example.com/{uuid.uuid4().hex[:10]}.jpg"],
        "is_visible": True,
    }


# ---------- Checkout ----------


def valid_phone() -> str:
    """Nigerian mobile number in international form."""
    return f"+234{random.choice(['803', '806', '810', '813', '816', '703', '706', '905'])}{random.randint(1000000, 9999999)}"


def valid_email() -> str:
    local = fake.user_name()[:20]
    return f"{local}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}"


def shopper_data() -> dict:
    """Generate a complete checkout form."""
    return {
        "customer_name": fake.name()[:100],
        "customer_email": valid_email(),
        "customer_phone": valid_phone(),
        "address_line1": fake.street_address()[:255],
        "address_line2": random.choice(["", "", fake.secondary_address()]),
        "city": fake.city()[:100],
        "state": random.choice(NIGERIAN_STATES),
        "country": "Nigeria",
        "postal_code": random.choice(["", f"{random.randint(100000, 999999)}"]),
        "notes": random.choice(["", "", "Please call before delivery"]),
    }


def incomplete_shopper_data() -> dict:
    """A checkout form missing a required field."""
    data = shopper_data()
    data[random.choice(["customer_phone", "address_line1", "city", "state"])] = ""
    return data


def admin_order_update() -> dict:
    """Move an order along and sometimes record a tracking number."""
    payload = {"status": random.choice(["processing", "shipped", "delivered"])}
    if payload["status"] != "processing":
        payload["tracking_number"] = f"GIG-{random.randint(10000000, 99999999)}"
        payload["notes"] = random.choice(["", "Dispatched from Lagos hub"])
    return payload
