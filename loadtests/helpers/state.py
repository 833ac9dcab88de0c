"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state. State tracks ids returned by
creation endpoints so follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class CartState:
    """Tracks a customer's cart across a journey."""

    item_ids: list[str] = field(default_factory=list)


@dataclass
class OrderState:
    """Tracks the orders a journey placed and paid."""

    order_ids: list[str] = field(default_factory=list)
    intent_refs: dict[str, str] = field(default_factory=dict)
    current_status: str = "pending"
