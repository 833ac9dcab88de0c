"""Domain tests for PaymentIntent and PaymentRecord."""

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest
from ordering.gateway import IntentResult
from ordering.order.order import Order
from ordering.payment.events import PaymentIntentClosed, PaymentIntentOpened, PaymentRecorded
from ordering.payment.intent import IntentStatus, PaymentIntent, idempotency_key_for
from ordering.payment.record import PaymentRecord


@pytest.fixture()
def order():
    line = SimpleNamespace(meal_id="meal-biryani", meal_name="Kacchi Biryani", unit_price=150.0, quantity=2, chef_id="chef-1")
    return Order.place(
        owner_email="rina@example.com",
        lines=[line],
        delivery_address="House 12, Road 5, Dhanmondi, Dhaka",
    )


@pytest.fixture()
def result(order):
    return IntentResult(
        intent_ref="pi_abc",
        client_secret="pi_abc_secret",
        status="requires_payment_method",
        amount=order.total_amount,
        currency="bdt",
        order_id=str(order.id),
    )


class TestPaymentIntent:
    def test_idempotency_key_is_derived_from_order_and_attempt(self):
        assert idempotency_key_for("ord-1", 2) == "intent-ord-1-2"

    def test_for_order_uses_stored_total(self, order, result):
        intent = PaymentIntent.for_order(order, result, idempotency_key="intent-x-1", attempt=1)

        assert intent.amount == 360.0
        assert intent.status == IntentStatus.OPEN.value
        assert intent.expires_at > intent.created_at
        assert isinstance(intent._events[-1], PaymentIntentOpened)

    def test_open_unexpired_intent_is_reusable(self, order, result):
        intent = PaymentIntent.for_order(order, result, idempotency_key="intent-x-1", attempt=1)
        assert intent.is_reusable_for(order, datetime.now(UTC))

    def test_expired_intent_is_not_reusable(self, order, result):
        intent = PaymentIntent.for_order(order, result, idempotency_key="intent-x-1", attempt=1)
        later = datetime.now(UTC) + timedelta(days=2)
        assert not intent.is_reusable_for(order, later)

    def test_closed_intent_is_not_reusable(self, order, result):
        intent = PaymentIntent.for_order(order, result, idempotency_key="intent-x-1", attempt=1)
        intent.close(IntentStatus.FAILED)

        assert not intent.is_reusable_for(order, datetime.now(UTC))
        assert isinstance(intent._events[-1], PaymentIntentClosed)


class TestPaymentRecord:
    def test_record_copies_order_total(self, order):
        record = PaymentRecord.record(order, "pi_abc", currency="bdt")

        assert record.order_id == str(order.id)
        assert record.owner_email == "rina@example.com"
        assert record.amount == 360.0
        assert record.transaction_reference == "pi_abc"
        assert isinstance(record._events[-1], PaymentRecorded)
