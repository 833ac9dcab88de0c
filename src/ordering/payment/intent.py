"""Payment intents: opening a processor intent for an order.

Creating an intent is idempotent by order. While an open, unexpired intent
exists for the order it is handed back unchanged. Otherwise the gateway is
called with an idempotency key derived from the order id and the attempt
number, so a client retry after a timeout lands on the same processor
intent. Gateway failures persist nothing.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.access.principal import Principal
from ordering.domain import ordering
from ordering.exceptions import AuthorizationError, PaymentFailure
from ordering.gateway import GatewayError, GatewayTimeout, get_gateway
from ordering.order.order import Order, OrderStatus
from ordering.payment.events import PaymentIntentClosed, PaymentIntentOpened
from ordering.utils import settings
from ordering.utils.queries import fetch_all

logger = structlog.get_logger(__name__)


class IntentStatus(Enum):
    OPEN = "open"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@ordering.aggregate
class PaymentIntent:
    order_id = Identifier(required=True)
    owner_email = String(required=True, max_length=255)
    amount = Float(required=True, min_value=0.0)
    currency = String(required=True, max_length=3)
    intent_ref = String(required=True, max_length=255)
    client_secret = String(max_length=255)
    idempotency_key = String(required=True, max_length=255)
    attempt = Integer(default=1, min_value=1)
    status = String(choices=IntentStatus, default=IntentStatus.OPEN.value)
    created_at = DateTime()
    expires_at = DateTime()

    @classmethod
    def for_order(cls, order, result, idempotency_key, attempt):
        now = datetime.now(UTC)
        intent = cls(
            order_id=str(order.id),
            owner_email=order.owner_email,
            amount=order.total_amount,
            currency=result.currency,
            intent_ref=result.intent_ref,
            client_secret=result.client_secret,
            idempotency_key=idempotency_key,
            attempt=attempt,
            status=IntentStatus.OPEN.value,
            created_at=now,
            expires_at=now + timedelta(hours=settings.INTENT_TTL_HOURS),
        )
        intent.raise_(
            PaymentIntentOpened(
                intent_id=str(intent.id),
                order_id=str(order.id),
                intent_ref=result.intent_ref,
                amount=intent.amount,
                currency=intent.currency,
                attempt=attempt,
                expires_at=intent.expires_at,
            )
        )
        return intent

    def is_reusable_for(self, order, now) -> bool:
        return (
            self.status == IntentStatus.OPEN.value
            and self.expires_at is not None
            and _aware(self.expires_at) > now
            and round(self.amount, 2) == round(order.total_amount, 2)
        )

    def close(self, status: IntentStatus):
        self.status = status.value
        self.raise_(PaymentIntentClosed(intent_id=str(self.id), order_id=self.order_id, status=status.value))


def _aware(value: datetime) -> datetime:
    """Stores without timezone support hand back naive UTC datetimes."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def idempotency_key_for(order_id, attempt) -> str:
    return f"intent-{order_id}-{attempt}"


@ordering.command(part_of="PaymentIntent")
class CreatePaymentIntent:
    order_id = Identifier(required=True)
    actor_email = String(required=True, max_length=255)
    actor_role = String(required=True, max_length=20)
    actor_chef_id = String(max_length=100)


@ordering.command_handler(part_of=PaymentIntent)
class CreatePaymentIntentHandler:
    @handle(CreatePaymentIntent)
    def create_payment_intent(self, command):
        actor = Principal.from_actor(command.actor_email, command.actor_role, command.actor_chef_id)
        order = current_domain.repository_for(Order).get(command.order_id)

        if not order.is_owned_by(actor):
            raise AuthorizationError({"order_id": ["Only the customer who placed the order can pay for it"]})
        if order.is_paid:
            raise ValidationError({"order_id": ["Order is already paid"]})
        if order.status == OrderStatus.CANCELLED:
            raise ValidationError({"order_id": ["Cancelled orders cannot be paid"]})

        repo = current_domain.repository_for(PaymentIntent)
        now = datetime.now(UTC)
        existing = sorted(fetch_all(PaymentIntent, order_id=str(order.id)), key=lambda i: i.attempt)

        for intent in existing:
            if intent.is_reusable_for(order, now):
                logger.info("payment_intent_reused", order_id=str(order.id), intent_ref=intent.intent_ref)
                return intent

        attempt = (existing[-1].attempt + 1) if existing else 1
        key = idempotency_key_for(order.id, attempt)

        try:
            result = get_gateway().create_intent(
                amount=order.total_amount,
                currency=settings.CURRENCY,
                order_id=str(order.id),
                idempotency_key=key,
                timeout=settings.GATEWAY_TIMEOUT_SECONDS,
            )
        except GatewayTimeout as exc:
            logger.warning("payment_intent_timeout", order_id=str(order.id), idempotency_key=key)
            raise PaymentFailure({"gateway": ["Payment processor did not respond in time"]}) from exc
        except GatewayError as exc:
            logger.warning("payment_intent_rejected", order_id=str(order.id), error=str(exc))
            raise PaymentFailure({"gateway": [str(exc)]}) from exc

        for stale in existing:
            if stale.status == IntentStatus.OPEN.value:
                stale.close(IntentStatus.FAILED)
                repo.add(stale)

        intent = PaymentIntent.for_order(order, result, idempotency_key=key, attempt=attempt)
        repo.add(intent)

        logger.info(
            "payment_intent_opened",
            order_id=str(order.id),
            intent_ref=intent.intent_ref,
            amount=intent.amount,
            attempt=attempt,
        )
        return intent
