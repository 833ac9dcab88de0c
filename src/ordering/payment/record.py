"""PaymentRecord aggregate: the immutable proof that an order was paid.

Written exactly once per order, in the same unit of work that marks the
order paid.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, Identifier, String

from ordering.domain import ordering
from ordering.payment.events import PaymentRecorded


@ordering.aggregate
class PaymentRecord:
    order_id = Identifier(required=True, unique=True)
    owner_email = String(required=True, max_length=255)
    amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3)
    transaction_reference = String(required=True, max_length=255)
    recorded_at = DateTime()

    @classmethod
    def record(cls, order, transaction_reference, currency):
        now = datetime.now(UTC)
        record = cls(
            order_id=str(order.id),
            owner_email=order.owner_email,
            amount=order.total_amount,
            currency=currency,
            transaction_reference=transaction_reference,
            recorded_at=now,
        )
        record.raise_(
            PaymentRecorded(
                payment_id=str(record.id),
                order_id=str(order.id),
                owner_email=order.owner_email,
                amount=record.amount,
                transaction_reference=transaction_reference,
                recorded_at=now,
            )
        )
        return record
