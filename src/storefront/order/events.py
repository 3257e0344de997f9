"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A shopper checked out."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    tracking_id = String(required=True)
    user_id = Identifier()
    store_id = Identifier()
    items = Text(required=True)  # JSON: versioned line snapshots
    total_amount = String(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderShipped:
    __version__ = "v1"

    order_id = Identifier(required=True)
    tracking_id = String(required=True)
    shipped_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderDelivered:
    __version__ = "v1"

    order_id = Identifier(required=True)
    tracking_id = String(required=True)
    delivered_at = DateTime(required=True)


@storefront.event(part_of="Order")
class RefundStatusUpdated:
    """A seller recorded progress on an order's refund."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    refund_status = String(required=True)
    return_notes = Text()
    updated_at = DateTime(required=True)
