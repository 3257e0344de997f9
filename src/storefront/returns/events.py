"""Domain events for the ReturnRequest aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="ReturnRequest")
class ReturnRequested:
    __version__ = "v1"

    return_id = Identifier(required=True)
    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    store_id = Identifier()
    quantity = Integer(required=True)
    reason = Text(required=True)
    refund_amount = String(required=True)
    requested_at = DateTime(required=True)


@storefront.event(part_of="ReturnRequest")
class ReturnApproved:
    """The seller accepted a return. Stock is not put back automatically."""

    __version__ = "v1"

    return_id = Identifier(required=True)
    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    refund_amount = String(required=True)
    approved_at = DateTime(required=True)


@storefront.event(part_of="ReturnRequest")
class ReturnRejected:
    __version__ = "v1"

    return_id = Identifier(required=True)
    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rejected_at = DateTime(required=True)
