"""Order aggregate: a durable, priced request for meals from one checkout.

Prices are frozen at checkout. The status lifecycle is chef-driven:

    pending -> accepted -> delivered
    pending | accepted -> cancelled

``delivered`` and ``cancelled`` are terminal. Payment status moves
independently, from ``pending`` to ``paid``, and only through a verified
payment confirmation.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String, ValueObject

from ordering.access.principal import Principal, Role
from ordering.domain import ordering
from ordering.exceptions import AuthorizationError, ConflictError
from ordering.order.events import OrderAccepted, OrderCancelled, OrderDelivered, OrderPaid, OrderPlaced
from ordering.utils import settings


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"


class CancellationActor(Enum):
    CUSTOMER = "customer"
    CHEF = "chef"
    ADMIN = "admin"


# Status reached -> permitted source statuses
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.ACCEPTED, OrderStatus.CANCELLED},
    OrderStatus.ACCEPTED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# accept and deliver each have a single source state
_DEFAULT_SOURCE = {
    OrderStatus.ACCEPTED: OrderStatus.PENDING,
    OrderStatus.DELIVERED: OrderStatus.ACCEPTED,
}

_TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def _cents(value) -> float:
    return round(float(value), 2)


def price_lines(lines) -> dict:
    """Price a list of lines carrying ``unit_price`` and ``quantity``.

    The delivery fee is flat and only charged when there is something to
    deliver.
    """
    subtotal = _cents(sum(line.unit_price * line.quantity for line in lines))
    delivery_fee = _cents(settings.DELIVERY_FEE) if subtotal > 0 else 0.0
    return {
        "subtotal": subtotal,
        "delivery_fee": delivery_fee,
        "total_amount": _cents(subtotal + delivery_fee),
    }


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class OrderPricing:
    """Money owed for an order, frozen when the order is placed."""

    subtotal = Float(default=0.0, min_value=0.0)
    delivery_fee = Float(default=0.0, min_value=0.0)
    total_amount = Float(default=0.0, min_value=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A meal line as it was priced at checkout."""

    meal_id = String(required=True, max_length=100)
    meal_name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    chef_id = String(required=True, max_length=100)

    @property
    def line_total(self) -> float:
        return _cents(self.unit_price * self.quantity)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    owner_email = String(required=True, max_length=255)
    items = HasMany(OrderItem)
    delivery_address = String(required=True, max_length=500)
    pricing = ValueObject(OrderPricing)
    order_status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    cancelled_by = String(choices=CancellationActor)
    refund_review = Boolean(default=False)
    order_time = DateTime()
    updated_at = DateTime()
    paid_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order must contain at least one item"]})

    @invariant.post
    def pricing_must_match_items(self):
        if self.pricing is None:
            raise ValidationError({"pricing": ["Order pricing is required"]})
        expected = price_lines(self.items)
        if _cents(self.pricing.subtotal) != expected["subtotal"]:
            raise ValidationError({"pricing": ["Subtotal must equal the sum of line totals"]})
        if _cents(self.pricing.total_amount) != _cents(self.pricing.subtotal + self.pricing.delivery_fee):
            raise ValidationError({"pricing": ["Total must equal subtotal plus delivery fee"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, owner_email, lines, delivery_address):
        """Create a pending order from priced lines, whichever chefs they
        come from.

        ``lines`` are objects carrying meal_id, meal_name, unit_price,
        quantity and chef_id (catalog-resolved, never client-supplied).
        """
        now = datetime.now(UTC)
        items = [
            OrderItem(
                meal_id=str(line.meal_id),
                meal_name=line.meal_name,
                unit_price=line.unit_price,
                quantity=line.quantity,
                chef_id=str(line.chef_id),
            )
            for line in lines
        ]
        order = cls(
            owner_email=owner_email,
            items=items,
            delivery_address=delivery_address,
            pricing=OrderPricing(**price_lines(items)),
            order_status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            refund_review=False,
            order_time=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                owner_email=owner_email,
                chef_ids=order.chef_ids,
                item_count=len(items),
                subtotal=order.pricing.subtotal,
                delivery_fee=order.pricing.delivery_fee,
                total_amount=order.pricing.total_amount,
                order_time=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Convenience accessors
    # -------------------------------------------------------------------
    @property
    def status(self) -> OrderStatus:
        return OrderStatus(self.order_status)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value

    @property
    def total_amount(self) -> float:
        return self.pricing.total_amount

    @property
    def chef_ids(self) -> list:
        return sorted({str(item.chef_id) for item in self.items})

    def is_owned_by(self, principal: Principal) -> bool:
        return principal.email == self.owner_email

    def is_prepared_by(self, principal: Principal) -> bool:
        """A chef prepares the order when any of its lines is theirs."""
        return any(principal.owns_kitchen(chef_id) for chef_id in self.chef_ids)

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def _authorize(self, target: OrderStatus, actor: Principal):
        """Who may fire the event at all, regardless of current state."""
        if actor.is_admin or self.is_prepared_by(actor):
            return
        if target == OrderStatus.CANCELLED and actor.role == Role.USER and self.is_owned_by(actor):
            return
        raise AuthorizationError({"order_status": [f"Not allowed to move this order to {target.value}"]})

    def transition(self, target_status, actor: Principal, expected_status=None):
        """Move the order to ``target_status`` on behalf of ``actor``.

        Checks run in a fixed order: the actor's role for the event, the
        compare-and-swap on ``expected_status``, the edge itself, then any
        edge-specific actor restriction.
        """
        try:
            target = OrderStatus(target_status)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown order status {target_status!r}"]}) from exc
        if target == OrderStatus.PENDING:
            raise ValidationError({"status": ["Orders cannot be moved back to pending"]})

        self._authorize(target, actor)

        current = self.status
        if expected_status is None:
            expected = _DEFAULT_SOURCE.get(target, current)
        else:
            try:
                expected = OrderStatus(expected_status)
            except ValueError as exc:
                raise ValidationError({"expected_status": [f"Unknown order status {expected_status!r}"]}) from exc

        if current != expected:
            raise ConflictError(
                {"order_status": [f"Order is {current.value}, expected {expected.value}; it was changed by someone else"]}
            )

        if current in _TERMINAL_STATES or target not in _VALID_TRANSITIONS[current]:
            raise ConflictError({"order_status": [f"Cannot move order from {current.value} to {target.value}"]})

        if (
            target == OrderStatus.CANCELLED
            and current != OrderStatus.PENDING
            and not (actor.is_admin or self.is_prepared_by(actor))
        ):
            raise AuthorizationError({"order_status": ["Customers may only cancel orders that are still pending"]})

        now = datetime.now(UTC)
        self.order_status = target.value
        self.updated_at = now

        if target == OrderStatus.ACCEPTED:
            self.raise_(OrderAccepted(order_id=str(self.id), chef_ids=self.chef_ids, accepted_by=actor.email, accepted_at=now))
        elif target == OrderStatus.DELIVERED:
            self.raise_(
                OrderDelivered(
                    order_id=str(self.id),
                    chef_ids=self.chef_ids,
                    total_amount=self.pricing.total_amount,
                    delivered_at=now,
                )
            )
        else:
            self.cancelled_by = _cancellation_actor(actor).value
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    previous_status=current.value,
                    cancelled_by=self.cancelled_by,
                    cancelled_at=now,
                )
            )

    def accept(self, actor: Principal):
        self.transition(OrderStatus.ACCEPTED.value, actor)

    def deliver(self, actor: Principal):
        self.transition(OrderStatus.DELIVERED.value, actor)

    def cancel(self, actor: Principal):
        self.transition(OrderStatus.CANCELLED.value, actor)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def record_payment(self, transaction_reference):
        """Mark the order paid. A cancelled order stays cancelled and is
        flagged for refund review instead."""
        if self.is_paid:
            raise ConflictError({"payment_status": ["Order is already paid"]})

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        self.paid_at = now
        self.updated_at = now
        if self.status == OrderStatus.CANCELLED:
            self.refund_review = True

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                amount=self.pricing.total_amount,
                transaction_reference=transaction_reference,
                refund_review=self.refund_review,
                paid_at=now,
            )
        )


def _cancellation_actor(actor: Principal) -> CancellationActor:
    if actor.is_admin:
        return CancellationActor.ADMIN
    if actor.is_chef:
        return CancellationActor.CHEF
    return CancellationActor.CUSTOMER
