"""Payment confirmation: verify with the processor, then record.

Confirmation is idempotent by order. A second confirmation for an order that
already has a PaymentRecord returns the order untouched and reports the
replay. A fresh confirmation is accepted only when the processor reports the
intent succeeded, for this order, for exactly the order's stored total.
The PaymentRecord and the order's payment status are written in one unit of
work.
"""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.access.principal import Principal
from ordering.domain import ordering
from ordering.exceptions import AuthorizationError, PaymentFailure
from ordering.gateway import GatewayError, GatewayTimeout, get_gateway
from ordering.order.order import Order
from ordering.payment.intent import IntentStatus, PaymentIntent
from ordering.payment.record import PaymentRecord
from ordering.utils import settings
from ordering.utils.queries import fetch_all

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ConfirmationResult:
    order: Order
    replayed: bool = False


@ordering.command(part_of="PaymentRecord")
class ConfirmPayment:
    order_id = Identifier(required=True)
    transaction_reference = String(required=True, max_length=255)
    actor_email = String(required=True, max_length=255)
    actor_role = String(required=True, max_length=20)
    actor_chef_id = String(max_length=100)


def _verify(order, transaction_reference):
    try:
        result = get_gateway().retrieve_intent(transaction_reference, timeout=settings.GATEWAY_TIMEOUT_SECONDS)
    except GatewayTimeout as exc:
        raise PaymentFailure({"gateway": ["Payment processor did not respond in time"]}) from exc
    except GatewayError as exc:
        raise PaymentFailure({"gateway": [str(exc)]}) from exc

    if not result.succeeded:
        raise PaymentFailure({"transaction_reference": [f"Payment has not succeeded (status: {result.status})"]})
    if str(result.order_id) != str(order.id):
        raise PaymentFailure({"transaction_reference": ["Payment does not belong to this order"]})
    if round(result.amount, 2) != round(order.total_amount, 2):
        raise PaymentFailure(
            {"amount": [f"Paid amount {result.amount:.2f} does not match order total {order.total_amount:.2f}"]}
        )
    return result


@ordering.command_handler(part_of=PaymentRecord)
class ConfirmPaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        actor = Principal.from_actor(command.actor_email, command.actor_role, command.actor_chef_id)
        order_repo = current_domain.repository_for(Order)
        order = order_repo.get(command.order_id)

        if not (order.is_owned_by(actor) or actor.is_admin):
            raise AuthorizationError({"order_id": ["Not allowed to confirm payment for this order"]})

        if fetch_all(PaymentRecord, order_id=str(order.id)):
            logger.info("payment_confirmation_replayed", order_id=str(order.id))
            return ConfirmationResult(order=order, replayed=True)

        result = _verify(order, command.transaction_reference)

        record = PaymentRecord.record(order, command.transaction_reference, currency=result.currency)
        current_domain.repository_for(PaymentRecord).add(record)

        order.record_payment(command.transaction_reference)
        order_repo.add(order)

        intent_repo = current_domain.repository_for(PaymentIntent)
        for intent in fetch_all(PaymentIntent, order_id=str(order.id)):
            if intent.intent_ref == command.transaction_reference and intent.status == IntentStatus.OPEN.value:
                intent.close(IntentStatus.SUCCEEDED)
                intent_repo.add(intent)

        if order.refund_review:
            logger.warning("payment_recorded_on_cancelled_order", order_id=str(order.id), amount=record.amount)
        else:
            logger.info("payment_recorded", order_id=str(order.id), amount=record.amount)

        return ConfirmationResult(order=order)
