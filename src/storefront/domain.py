"""Storefront bounded context: catalogue, carts, orders and returns.

A single domain hosts every aggregate so that an order status change and the
stock it consumes on shipment commit in the same unit of work.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
