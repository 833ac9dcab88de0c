"""Payment history reads."""

from ordering.access.principal import Principal
from ordering.payment.record import PaymentRecord
from ordering.utils.queries import fetch_all


def payment_history(principal: Principal) -> list:
    """Every record for an administrator; a customer sees their own."""
    if principal.is_admin:
        records = fetch_all(PaymentRecord)
    else:
        records = fetch_all(PaymentRecord, owner_email=principal.email)
    return sorted(records, key=lambda r: r.recorded_at, reverse=True)
