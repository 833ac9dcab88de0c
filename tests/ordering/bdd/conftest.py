"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.access.principal import Principal, Role
from ordering.checkout.aggregator import CheckoutLine
from ordering.exceptions import AuthorizationError, ConflictError
from ordering.order.events import OrderAccepted, OrderCancelled, OrderDelivered, OrderPaid, OrderPlaced
from ordering.order.order import Order
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup in Then steps
_ORDER_EVENT_CLASSES = {
    "OrderPlaced": OrderPlaced,
    "OrderAccepted": OrderAccepted,
    "OrderDelivered": OrderDelivered,
    "OrderCancelled": OrderCancelled,
    "OrderPaid": OrderPaid,
}

_ERROR_CLASSES = {
    "validation": ValidationError,
    "conflict": ConflictError,
    "authorization": AuthorizationError,
}


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------
@pytest.fixture()
def actors():
    return {
        "the customer": Principal(email="rina@example.com", role=Role.USER),
        "another customer": Principal(email="tanvir@example.com", role=Role.USER),
        "the chef": Principal(email="chef.one@example.com", role=Role.CHEF, chef_id="chef-1"),
        "another chef": Principal(email="chef.two@example.com", role=Role.CHEF, chef_id="chef-2"),
        "an admin": Principal(email="admin@example.com", role=Role.ADMIN),
    }


@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an order was placed", target_fixture="order")
def _(actors):
    order = Order.place(
        owner_email=actors["the customer"].email,
        lines=[
            CheckoutLine(
                meal_id="meal-biryani",
                meal_name="Kacchi Biryani",
                unit_price=150.0,
                quantity=2,
                chef_id="chef-1",
            )
        ],
        delivery_address="House 12, Road 5, Dhanmondi, Dhaka",
    )
    order._events.clear()
    return order


@given("the order was accepted", target_fixture="order")
def _(order, actors):
    order.accept(actors["the chef"])
    order._events.clear()
    return order


@given("the order was delivered", target_fixture="order")
def _(order, actors):
    order.deliver(actors["the chef"])
    order._events.clear()
    return order


@given("the order was cancelled", target_fixture="order")
def _(order, actors):
    order.cancel(actors["the customer"])
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order, status):
    assert order.order_status == status


@then(parsers.cfparse('the payment status is "{status}"'))
def _(order, status):
    assert order.payment_status == status


@then(parsers.cfparse("a {event_type} order event is raised"))
def _(order, event_type):
    event_cls = _ORDER_EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in order._events)


@then("no order event is raised")
def _(order):
    assert order._events == []


@then(parsers.cfparse("the change is rejected as a {kind} error"))
def _(error, kind):
    assert isinstance(error["exc"], _ERROR_CLASSES[kind])
