"""Checkout: turn a cart or a direct purchase into a single order.

Flow:
    1. PlaceOrder re-resolves every line against the catalog and writes the
       order in a single unit of work. This is the commit point.
    2. Only after that commit does checkout() clear the cart. A failure there
       is logged and leaves a harmless, non-empty cart behind.

Checkout is not deduplicated; submitting twice places two orders.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from ordering.access.principal import Principal, Role
from ordering.cart.items import ClearCart, cart_items
from ordering.catalog import get_catalog
from ordering.domain import ordering
from ordering.exceptions import RoleConflictError
from ordering.order.order import Order
from ordering.utils import settings

logger = structlog.get_logger(__name__)


class OrderSource(Enum):
    CART = "cart"
    DIRECT = "direct"


@dataclass(frozen=True)
class CheckoutLine:
    """A line priced from the catalog at checkout time."""

    meal_id: str
    meal_name: str
    unit_price: float
    quantity: int
    chef_id: str


@ordering.command(part_of="Order")
class PlaceOrder:
    owner_email = String(required=True, max_length=255)
    actor_role = String(required=True, max_length=20)
    source = String(choices=OrderSource, default=OrderSource.CART.value)
    meal_id = String(max_length=100)
    quantity = Integer()
    delivery_address = String(max_length=500)


def _requested_lines(command) -> list[tuple[str, int]]:
    """(meal_id, quantity) pairs the customer asked for, before pricing."""
    if command.source == OrderSource.DIRECT.value:
        if not command.meal_id:
            raise ValidationError({"meal_id": ["A meal is required for a direct purchase"]})
        if command.quantity is None or command.quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        return [(command.meal_id, command.quantity)]

    items = cart_items(command.owner_email)
    if not items:
        raise ValidationError({"cart": ["Your cart is empty"]})
    return [(str(item.meal_id), item.quantity) for item in items]


def _price(meal_id, quantity) -> CheckoutLine:
    meal = get_catalog().get_meal(meal_id)
    if meal is None:
        raise ObjectNotFoundError({"meal_id": [f"Meal {meal_id} no longer exists"]})
    if not meal.available:
        raise ValidationError({"meal_id": [f"Meal {meal_id} is no longer available"]})
    return CheckoutLine(
        meal_id=str(meal.meal_id),
        meal_name=meal.name,
        unit_price=meal.price,
        quantity=quantity,
        chef_id=str(meal.chef_id),
    )


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        if command.actor_role in (Role.CHEF.value, Role.ADMIN.value):
            raise RoleConflictError({"role": [f"A {command.actor_role} account cannot place orders"]})

        address = (command.delivery_address or "").strip()
        if len(address) < settings.MIN_ADDRESS_LENGTH:
            raise ValidationError(
                {"delivery_address": [f"Delivery address must be at least {settings.MIN_ADDRESS_LENGTH} characters"]}
            )

        lines = [_price(meal_id, quantity) for meal_id, quantity in _requested_lines(command)]

        order = Order.place(owner_email=command.owner_email, lines=lines, delivery_address=address)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            owner_email=command.owner_email,
            source=command.source,
            order_id=str(order.id),
            chef_ids=order.chef_ids,
        )
        return order


def checkout(principal: Principal, delivery_address, source=OrderSource.CART.value, meal_id=None, quantity=None):
    """Place an order for ``principal`` and, for cart checkouts, empty the cart."""
    order = current_domain.process(
        PlaceOrder(
            owner_email=principal.email,
            actor_role=principal.role.value,
            source=source,
            meal_id=meal_id,
            quantity=quantity,
            delivery_address=delivery_address,
        ),
        asynchronous=False,
    )

    if source == OrderSource.CART.value:
        try:
            current_domain.process(ClearCart(owner_email=principal.email), asynchronous=False)
        except Exception:
            logger.exception(
                "cart_clear_after_checkout_failed",
                owner_email=principal.email,
                order_id=str(order.id),
            )

    return order
