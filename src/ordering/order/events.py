"""Domain events for the Order aggregate.

All events are versioned, immutable facts representing state changes. They
are written to the event store in the same unit of work as the order.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, List, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer checked out and an order was created for its chefs."""

    __version__ = 1

    order_id = Identifier(required=True)
    owner_email = String(required=True)
    chef_ids = List(content_type=String)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    delivery_fee = Float(required=True)
    total_amount = Float(required=True)
    order_time = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderAccepted:
    __version__ = 1

    order_id = Identifier(required=True)
    chef_ids = List(content_type=String)
    accepted_by = String(required=True)
    accepted_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    chef_ids = List(content_type=String)
    total_amount = Float(required=True)
    delivered_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled by its customer, its chef or an administrator."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_by = String(required=True)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """A confirmed payment was recorded against the order.

    ``refund_review`` is set when the order had already been cancelled.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    amount = Float(required=True)
    transaction_reference = String(required=True)
    refund_review = Boolean(default=False)
    paid_at = DateTime(required=True)
