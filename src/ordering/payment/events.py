"""Domain events for payment intents and payment records."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="PaymentIntent")
class PaymentIntentOpened:
    """A processor intent was opened for an order's stored total."""

    __version__ = 1

    intent_id = Identifier(required=True)
    order_id = Identifier(required=True)
    intent_ref = String(required=True)
    amount = Float(required=True)
    currency = String(required=True)
    attempt = Integer(required=True)
    expires_at = DateTime(required=True)


@ordering.event(part_of="PaymentIntent")
class PaymentIntentClosed:
    __version__ = 1

    intent_id = Identifier(required=True)
    order_id = Identifier(required=True)
    status = String(required=True)


@ordering.event(part_of="PaymentRecord")
class PaymentRecorded:
    """A verified payment was written to the ledger of record."""

    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    owner_email = String(required=True)
    amount = Float(required=True)
    transaction_reference = String(required=True)
    recorded_at = DateTime(required=True)
