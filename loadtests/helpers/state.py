"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state, with no cross-user sharing.
State tracks ids returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class SellerState:
    """A store registered for the simulated seller and the sarees it listed."""

    store_id: str | None = None
    headers: dict = field(default_factory=dict)
    product_ids: list[str] = field(default_factory=list)


@dataclass
class ShopperState:
    """Tracks one shopper from browsing to a return request."""

    user_id: str | None = None
    session_id: str | None = None
    headers: dict = field(default_factory=dict)
    product_id: str | None = None
    cart_item_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    store_id: str | None = None
    current_status: str = "pending"
