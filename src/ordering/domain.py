"""Ordering bounded context: carts, orders, payments and the revenue ledger.

Handles the customer's cart, checkout into durable orders with frozen prices,
payment authorization against the card processor, the chef-driven order
lifecycle, and platform revenue derived from delivered orders.
"""

import structlog
from protean.domain import Domain

from ordering.utils.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
