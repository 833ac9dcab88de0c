"""Stripe payment gateway adapter.

Talks to Stripe through stripe-python's ``StripeClient``. Amounts cross the
boundary in minor units (paisa for BDT) and come back as major units.
"""

import stripe
import structlog

from ordering.gateway.port import GatewayError, GatewayTimeout, IntentResult, PaymentGateway

logger = structlog.get_logger(__name__)


def _to_minor(amount: float) -> int:
    return int(round(amount * 100))


def _metadata_value(intent, key):
    try:
        return intent.metadata[key]
    except (KeyError, TypeError, AttributeError):
        return None


def _to_result(intent) -> IntentResult:
    return IntentResult(
        intent_ref=intent.id,
        client_secret=intent.client_secret,
        status=intent.status,
        amount=intent.amount / 100,
        currency=intent.currency,
        order_id=_metadata_value(intent, "order_id"),
    )


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    def __init__(self, api_key: str) -> None:
        if not api_key:
            raise ValueError("StripeGateway requires an API key (STRIPE_API_KEY)")
        self.api_key = api_key

    def _client(self, timeout: float) -> stripe.StripeClient:
        return stripe.StripeClient(
            self.api_key,
            http_client=stripe.RequestsClient(timeout=timeout),
            max_network_retries=0,
        )

    def create_intent(
        self,
        amount: float,
        currency: str,
        order_id: str,
        idempotency_key: str,
        timeout: float,
    ) -> IntentResult:
        try:
            intent = self._client(timeout).v1.payment_intents.create(
                params={
                    "amount": _to_minor(amount),
                    "currency": currency,
                    "payment_method_types": ["card"],
                    "metadata": {"order_id": order_id},
                },
                options={"idempotency_key": idempotency_key},
            )
        except stripe.APIConnectionError as exc:
            logger.warning("stripe_create_intent_unreachable", order_id=order_id, error=str(exc))
            raise GatewayTimeout(str(exc)) from exc
        except stripe.StripeError as exc:
            logger.warning("stripe_create_intent_failed", order_id=order_id, error=str(exc))
            raise GatewayError(str(exc)) from exc

        return _to_result(intent)

    def retrieve_intent(self, intent_ref: str, timeout: float) -> IntentResult:
        try:
            intent = self._client(timeout).v1.payment_intents.retrieve(intent_ref)
        except stripe.APIConnectionError as exc:
            logger.warning("stripe_retrieve_intent_unreachable", intent_ref=intent_ref, error=str(exc))
            raise GatewayTimeout(str(exc)) from exc
        except stripe.StripeError as exc:
            logger.warning("stripe_retrieve_intent_failed", intent_ref=intent_ref, error=str(exc))
            raise GatewayError(str(exc)) from exc

        return _to_result(intent)
