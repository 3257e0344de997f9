"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductListed:
    """A seller put a new product on sale."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    tracking_id = String(required=True)
    store_id = Identifier(required=True)
    name = String(required=True)
    price = String(required=True)
    channel = String(required=True)
    total_stock = Integer(required=True)
    listed_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    """Descriptive attributes or the price of a product changed."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: {field: new value}
    updated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockReallocated:
    """A product's stock was redistributed across channels."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    channel = String(required=True)
    total_stock = Integer(required=True)
    online_stock = Integer(required=True)
    store_inventory = Text(required=True)  # JSON: list of {store_id, quantity}
    reallocated_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockConsumed:
    """Units left the shelf because an order containing the product shipped."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    order_id = Identifier(required=True)
    requested = Integer(required=True)
    consumed = Integer(required=True)
    remaining = Integer(required=True)
    consumed_at = DateTime(required=True)
