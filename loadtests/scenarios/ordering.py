"""Ordering load test scenarios.

Three stateful SequentialTaskSet journeys: a browsing customer editing a
cart, a customer who checks out and pays, and a chef working through the
kitchen queue.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    CHEF_IDS,
    auth_headers,
    cart_checkout_data,
    cart_item_data,
    customer_email,
    direct_checkout_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CartState, OrderState


class CartBrowsingJourney(SequentialTaskSet):
    """Add items -> change a quantity -> remove one -> clear.

    Models a customer who fills a cart and walks away.
    """

    def on_start(self):
        self.state = CartState()
        self.headers = auth_headers(customer_email())

    def _add(self):
        with self.client.post(
            "/cart", json=cart_item_data(), headers=self.headers, catch_response=True, name="POST /cart"
        ) as resp:
            if resp.status_code == 201:
                item_id = resp.json()["item_id"]
                if item_id not in self.state.item_ids:
                    self.state.item_ids.append(item_id)
            else:
                resp.failure(f"Add to cart failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def add_first_item(self):
        self._add()

    @task
    def add_second_item(self):
        self._add()

    @task
    def view_cart(self):
        self.client.get("/cart", headers=self.headers, name="GET /cart")

    @task
    def update_quantity(self):
        if not self.state.item_ids:
            self.interrupt()
        with self.client.patch(
            f"/cart/{self.state.item_ids[0]}",
            json={"quantity": random.randint(2, 5)},
            headers=self.headers,
            catch_response=True,
            name="PATCH /cart/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update quantity failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def clear_cart(self):
        with self.client.delete(
            "/cart/clear", headers=self.headers, catch_response=True, name="DELETE /cart/clear"
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Clear cart failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CheckoutAndPayJourney(SequentialTaskSet):
    """Fill cart -> checkout -> create intent -> confirm -> read history.

    Confirmation only succeeds against a gateway that settles intents on
    creation (the fake gateway's default).
    """

    def on_start(self):
        self.state = OrderState()
        self.headers = auth_headers(customer_email())

    @task
    def fill_cart(self):
        for _ in range(random.randint(1, 3)):
            self.client.post("/cart", json=cart_item_data(), headers=self.headers, name="POST /cart")

    @task
    def checkout(self):
        payload = cart_checkout_data() if random.random() < 0.7 else direct_checkout_data()
        with self.client.post(
            "/orders", json=payload, headers=self.headers, catch_response=True, name="POST /orders"
        ) as resp:
            if resp.status_code == 201:
                self.state.order_ids.append(resp.json()["order_id"])
            else:
                resp.failure(f"Checkout failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_intents(self):
        for order_id in self.state.order_ids:
            with self.client.post(
                "/payments/create-intent",
                json={"order_id": order_id},
                headers=self.headers,
                catch_response=True,
                name="POST /payments/create-intent",
            ) as resp:
                if resp.status_code == 200:
                    self.state.intent_refs[order_id] = resp.json()["intent_ref"]
                else:
                    resp.failure(f"Create intent failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def confirm_payments(self):
        for order_id, intent_ref in self.state.intent_refs.items():
            with self.client.post(
                "/payments/success",
                json={"order_id": order_id, "transaction_reference": intent_ref},
                headers=self.headers,
                catch_response=True,
                name="POST /payments/success",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Confirm payment failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def read_back(self):
        self.client.get("/orders/my", headers=self.headers, name="GET /orders/my")
        self.client.get("/payments/history", headers=self.headers, name="GET /payments/history")

    @task
    def done(self):
        self.interrupt()


class KitchenQueueJourney(SequentialTaskSet):
    """A chef reads their queue, accepts the oldest pending order and delivers it."""

    def on_start(self):
        self.chef_id = random.choice(CHEF_IDS)
        self.headers = auth_headers(f"{self.chef_id}@kitchen.example.com", role="chef", chef_id=self.chef_id)
        self.pending: list[str] = []

    @task
    def read_queue(self):
        with self.client.get(
            f"/orders/chef/{self.chef_id}",
            headers=self.headers,
            catch_response=True,
            name="GET /orders/chef/{chef_id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read queue failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()
            self.pending = [o["order_id"] for o in resp.json() if o["order_status"] == "pending"]

    @task
    def accept_and_deliver(self):
        if not self.pending:
            self.interrupt()
        order_id = self.pending[-1]
        for status in ("accepted", "delivered"):
            with self.client.patch(
                f"/orders/status/{order_id}",
                json={"status": status},
                headers=self.headers,
                catch_response=True,
                name="PATCH /orders/status/{id}",
            ) as resp:
                # Another simulated chef may have moved it first
                if resp.status_code == 409:
                    resp.success()
                    break
                if resp.status_code != 200:
                    resp.failure(f"Transition failed: {resp.status_code}: {extract_error_detail(resp)}")
                    break

    @task
    def done(self):
        self.interrupt()


class OrderingUser(HttpUser):
    """Customers browsing, ordering and paying, with chefs fulfilling."""

    wait_time = between(0.5, 2.0)
    tasks = {
        CartBrowsingJourney: 3,
        CheckoutAndPayJourney: 5,
        KitchenQueueJourney: 2,
    }


class AdminStatsUser(HttpUser):
    """An administrator polling the revenue ledger."""

    wait_time = between(2.0, 5.0)

    def on_start(self):
        self.headers = auth_headers("admin@homeplate.example.com", role="admin")

    @task
    def stats(self):
        self.client.get("/stats", headers=self.headers, name="GET /stats")
