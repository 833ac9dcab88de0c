import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from ordering.access.tokens import encode_token
from ordering.api.errors import register_error_handlers
from ordering.api.routes import cart_router, order_router, payment_router, stats_router
from ordering.domain import ordering

ADDRESS = "House 12, Road 5, Dhanmondi, Dhaka"


@pytest.fixture()
def client():
    app = FastAPI()

    @app.middleware("http")
    async def _domain(request: Request, call_next):
        with ordering.domain_context():
            return await call_next(request)

    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(payment_router)
    app.include_router(stats_router)
    register_error_handlers(app)
    return TestClient(app)


def bearer(email, role="user", chef_id=None):
    return {"Authorization": f"Bearer {encode_token(email, role=role, chef_id=chef_id)}"}


@pytest.fixture()
def customer_headers():
    return bearer("rina@example.com")


@pytest.fixture()
def other_customer_headers():
    return bearer("tanvir@example.com")


@pytest.fixture()
def chef_headers():
    return bearer("chef.one@example.com", role="chef", chef_id="chef-1")


@pytest.fixture()
def other_chef_headers():
    return bearer("chef.two@example.com", role="chef", chef_id="chef-2")


@pytest.fixture()
def admin_headers():
    return bearer("admin@example.com", role="admin")


@pytest.fixture()
def place_order(client, customer_headers):
    def _place(meal_id="meal-biryani", quantity=2, headers=None):
        response = client.post(
            "/orders",
            json={"delivery_address": ADDRESS, "source": "direct", "meal_id": meal_id, "quantity": quantity},
            headers=headers or customer_headers,
        )
        assert response.status_code == 201
        return response.json()

    return _place
