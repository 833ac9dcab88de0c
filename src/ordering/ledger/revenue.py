"""Revenue ledger: platform metrics recomputed on demand from all orders.

Revenue is recognised at delivery and is the meal subtotal only; the
delivery fee never counts. An order that is paid but not yet delivered, or
paid and then cancelled, never counts toward revenue.
Distributions and rates are taken over every order regardless of that filter.
"""

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, timedelta

import structlog

from ordering.access.principal import Principal, require_admin
from ordering.order.order import Order, OrderStatus, PaymentStatus
from ordering.utils import settings
from ordering.utils.queries import fetch_all

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Growth:
    window_days: int
    new_orders: int
    order_growth: float
    new_revenue: float
    revenue_growth: float


@dataclass(frozen=True)
class Share:
    count: int
    percentage: float


@dataclass(frozen=True)
class LedgerSnapshot:
    generated_at: datetime
    total_orders: int
    delivered_orders: int
    total_revenue: float
    average_order_value: float
    growth: Growth
    order_status_distribution: dict[str, Share]
    payment_status_distribution: dict[str, Share]
    payment_success_rate: float
    order_completion_rate: float
    revenue_by_month: list[dict] = field(default_factory=list)
    stale_pending_payments: int = 0
    refund_review_orders: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def growth_rate(new, total) -> float:
    """Growth of the trailing window over the baseline before it.

    A zero baseline reads as 100% growth when anything new arrived, else 0%.
    """
    baseline = total - new
    if baseline > 0:
        return round(new / baseline * 100, 1)
    return 100.0 if new > 0 else 0.0


def _percentage(part, whole) -> float:
    return round(part / whole * 100, 1) if whole else 0.0


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _month_keys(now: datetime, months: int) -> list[str]:
    """``YYYY-MM`` keys for the last ``months`` months, oldest first, this month included."""
    year, month = now.year, now.month
    keys = []
    for _ in range(months):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def compute_snapshot(orders, now: datetime | None = None) -> LedgerSnapshot:
    """Derive the ledger from a collection of orders."""
    now = _aware(now or datetime.now(UTC))
    window_start = now - timedelta(days=settings.GROWTH_WINDOW_DAYS)
    stale_before = now - timedelta(hours=settings.STALE_PAYMENT_HOURS)

    total_orders = len(orders)
    delivered = [o for o in orders if o.order_status == OrderStatus.DELIVERED.value]
    total_revenue = round(sum(o.pricing.subtotal for o in delivered), 2)

    recent = [o for o in orders if _aware(o.order_time) > window_start]
    new_revenue = round(
        sum(o.pricing.subtotal for o in recent if o.order_status == OrderStatus.DELIVERED.value),
        2,
    )

    status_counts = Counter(o.order_status for o in orders)
    payment_counts = Counter(o.payment_status for o in orders)

    months = _month_keys(now, settings.REVENUE_MONTHS)
    monthly = dict.fromkeys(months, 0.0)
    for order in delivered:
        key = _aware(order.order_time).strftime("%Y-%m")
        if key in monthly:
            monthly[key] = round(monthly[key] + order.pricing.subtotal, 2)

    stale = [
        o
        for o in orders
        if o.order_status == OrderStatus.PENDING.value
        and o.payment_status == PaymentStatus.PENDING.value
        and _aware(o.order_time) < stale_before
    ]

    return LedgerSnapshot(
        generated_at=now,
        total_orders=total_orders,
        delivered_orders=len(delivered),
        total_revenue=total_revenue,
        average_order_value=round(total_revenue / len(delivered), 2) if delivered else 0.0,
        growth=Growth(
            window_days=settings.GROWTH_WINDOW_DAYS,
            new_orders=len(recent),
            order_growth=growth_rate(len(recent), total_orders),
            new_revenue=new_revenue,
            revenue_growth=growth_rate(new_revenue, total_revenue),
        ),
        order_status_distribution={
            s.value: Share(status_counts[s.value], _percentage(status_counts[s.value], total_orders))
            for s in OrderStatus
        },
        payment_status_distribution={
            s.value: Share(payment_counts[s.value], _percentage(payment_counts[s.value], total_orders))
            for s in PaymentStatus
        },
        payment_success_rate=_percentage(payment_counts[PaymentStatus.PAID.value], total_orders),
        order_completion_rate=_percentage(len(delivered), total_orders),
        revenue_by_month=[{"month": key, "revenue": monthly[key]} for key in months],
        stale_pending_payments=len(stale),
        refund_review_orders=sum(1 for o in orders if o.refund_review),
    )


def ledger_snapshot(principal: Principal, now: datetime | None = None) -> LedgerSnapshot:
    """Administrator-only view of the ledger over every stored order."""
    require_admin(principal)
    snapshot = compute_snapshot(fetch_all(Order), now)
    logger.debug("ledger_snapshot_computed", total_orders=snapshot.total_orders, revenue=snapshot.total_revenue)
    return snapshot
