"""Configurable fake payment gateway for development and testing.

Simulates the processor without external calls. Tests configure it to
succeed, decline or time out, and can settle an intent to mimic the card
holder completing the payment in the browser.
"""

from uuid import uuid4

from ordering.gateway.port import GatewayError, GatewayTimeout, IntentResult, PaymentGateway


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.mode: str = "succeed"
        self.failure_reason: str = "Card declined"
        self.auto_settle: bool = True
        self.intents: dict[str, IntentResult] = {}
        self.keys: dict[str, str] = {}
        self.calls: list[dict] = []

    def configure(self, mode: str = "succeed", failure_reason: str = "Card declined", auto_settle: bool = True) -> None:
        """Configure gateway behavior at runtime.

        ``mode`` is one of ``succeed``, ``decline`` or ``timeout``. With
        ``auto_settle`` off, new intents stay ``requires_payment_method``
        until :meth:`settle` is called.
        """
        self.mode = mode
        self.failure_reason = failure_reason
        self.auto_settle = auto_settle

    def _raise_for_mode(self) -> None:
        if self.mode == "timeout":
            raise GatewayTimeout("Payment processor timed out")
        if self.mode == "decline":
            raise GatewayError(self.failure_reason)

    def create_intent(
        self,
        amount: float,
        currency: str,
        order_id: str,
        idempotency_key: str,
        timeout: float,
    ) -> IntentResult:
        self.calls.append(
            {
                "method": "create_intent",
                "amount": amount,
                "currency": currency,
                "order_id": order_id,
                "idempotency_key": idempotency_key,
                "timeout": timeout,
            }
        )
        self._raise_for_mode()

        # Same key, same intent, as a real processor would answer
        if idempotency_key in self.keys:
            return self.intents[self.keys[idempotency_key]]

        ref = f"pi_fake_{uuid4().hex[:16]}"
        intent = IntentResult(
            intent_ref=ref,
            client_secret=f"{ref}_secret_{uuid4().hex[:8]}",
            status="succeeded" if self.auto_settle else "requires_payment_method",
            amount=amount,
            currency=currency,
            order_id=order_id,
        )
        self.intents[ref] = intent
        self.keys[idempotency_key] = ref
        return intent

    def retrieve_intent(self, intent_ref: str, timeout: float) -> IntentResult:
        self.calls.append({"method": "retrieve_intent", "intent_ref": intent_ref, "timeout": timeout})
        self._raise_for_mode()

        intent = self.intents.get(intent_ref)
        if intent is None:
            raise GatewayError(f"No such payment intent: {intent_ref}")
        return intent

    def settle(self, intent_ref: str, status: str = "succeeded", amount: float | None = None) -> IntentResult:
        """Move an intent to a final status, optionally with a different amount."""
        current = self.intents[intent_ref]
        settled = IntentResult(
            intent_ref=current.intent_ref,
            client_secret=current.client_secret,
            status=status,
            amount=current.amount if amount is None else amount,
            currency=current.currency,
            order_id=current.order_id,
        )
        self.intents[intent_ref] = settled
        return settled

    def create_calls(self) -> list[dict]:
        return [c for c in self.calls if c["method"] == "create_intent"]
