"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- StripeGateway for production (PAYMENT_GATEWAY=stripe)
"""

from ordering.gateway.fake_adapter import FakeGateway
from ordering.gateway.port import GatewayError, GatewayTimeout, IntentResult, PaymentGateway
from ordering.gateway.stripe_adapter import StripeGateway
from ordering.utils import settings

__all__ = [
    "FakeGateway",
    "GatewayError",
    "GatewayTimeout",
    "IntentResult",
    "PaymentGateway",
    "StripeGateway",
    "get_gateway",
    "reset_gateway",
    "set_gateway",
]

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway. Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        if settings.PAYMENT_GATEWAY == "stripe":
            _current_gateway = StripeGateway(api_key=settings.STRIPE_API_KEY)
        else:
            _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
