"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's validation rules
(delivery address length, positive quantities) and match the field names
of the Pydantic request schemas.

Meal ids must exist in the catalog the server is wired to. Set
LOADTEST_MEAL_IDS to a comma-separated list.
"""

import os
import random
import uuid

from faker import Faker

from ordering.access.tokens import encode_token

fake = Faker()

MEAL_IDS = [m.strip() for m in os.getenv("LOADTEST_MEAL_IDS", "meal-001,meal-002,meal-003").split(",") if m.strip()]
CHEF_IDS = [c.strip() for c in os.getenv("LOADTEST_CHEF_IDS", "chef-001").split(",") if c.strip()]


def customer_email() -> str:
    """Unique customer email per simulated user."""
    local = fake.user_name()[:20]
    return f"{local}.{uuid.uuid4().hex[:6]}@{fake.free_email_domain()}"


def auth_headers(email: str, role: str = "user", chef_id: str | None = None) -> dict:
    return {"Authorization": f"Bearer {encode_token(email, role=role, chef_id=chef_id, ttl_minutes=240)}"}


def delivery_address() -> str:
    """A street address comfortably above the minimum length."""
    return f"{fake.building_number()} {fake.street_name()}, {fake.city()}"[:500]


def cart_item_data() -> dict:
    return {"meal_id": random.choice(MEAL_IDS), "quantity": random.randint(1, 3)}


def cart_checkout_data() -> dict:
    return {"delivery_address": delivery_address(), "source": "cart"}


def direct_checkout_data() -> dict:
    return {
        "delivery_address": delivery_address(),
        "source": "direct",
        "meal_id": random.choice(MEAL_IDS),
        "quantity": random.randint(1, 4),
    }
