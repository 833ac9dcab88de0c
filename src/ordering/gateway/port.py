"""Payment gateway port (abstract interface).

Defines the contract every card-processor adapter implements, so the payment
workflow can run against FakeGateway (dev/test) or StripeGateway (production)
unchanged.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class GatewayError(Exception):
    """The processor rejected the call or answered with something unusable."""


class GatewayTimeout(GatewayError):
    """The processor did not answer within the bounded timeout."""


@dataclass(frozen=True)
class IntentResult:
    """A processor-side payment intent as seen at call time."""

    intent_ref: str
    client_secret: str | None
    status: str
    amount: float
    currency: str
    order_id: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_intent(
        self,
        amount: float,
        currency: str,
        order_id: str,
        idempotency_key: str,
        timeout: float,
    ) -> IntentResult:
        """Open a payment intent for the given amount."""
        ...

    @abstractmethod
    def retrieve_intent(self, intent_ref: str, timeout: float) -> IntentResult:
        """Fetch the current state of an intent opened earlier."""
        ...
