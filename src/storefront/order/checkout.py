"""Checkout: turns requested items into a pending order.

Names and prices are copied from the product records at this moment; any
total the client sends is only checked against the computed one. The
originating cart is emptied in the same unit of work.
"""

from decimal import Decimal

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.lookup import clear_cart
from storefront.domain import logger, storefront
from storefront.order.order import Order
from storefront.order.snapshot import LineSnapshot, parse_requested_items
from storefront.product.lookup import find_product
from storefront.shared.money import format_amount, parse_amount

SHIPPING_FIELDS = ("customer_name", "email", "phone", "address", "city", "state", "pincode")


@storefront.command(part_of="Order")
class PlaceOrder:
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    customer_name = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=30)
    address = Text(required=True)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=12)
    total_amount = String(max_length=20)  # Optional client-side figure, verified
    user_id = Identifier()
    session_id = String(max_length=255)


def _snapshot_lines(requested) -> tuple[list[LineSnapshot], list]:
    """Resolve each requested product and copy its current name and price.

    Repeated products (by id or tracking id) collapse into one line.
    """
    quantities = {}
    products = {}
    for reference, quantity in requested:
        product = find_product(reference)
        product_id = str(product.id)
        products[product_id] = product
        quantities[product_id] = quantities.get(product_id, 0) + quantity

    lines = []
    for product_id, quantity in quantities.items():
        product = products[product_id]
        if not product.is_sold_online:
            raise ValidationError({"items": [f"{product.name} is not sold online"]})
        if product.in_stock < quantity:
            raise ValidationError({"items": [f"Only {product.in_stock} of {product.name} left in stock"]})
        lines.append(
            LineSnapshot(
                product_id=product_id,
                product_name=product.name,
                quantity=quantity,
                unit_price=product.price,
                tracking_id=product.tracking_id,
            )
        )
    return lines, list(products.values())


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines, products = _snapshot_lines(parse_requested_items(command.items))

        computed = sum((parse_amount(line.subtotal) for line in lines), Decimal("0"))
        if command.total_amount and parse_amount(command.total_amount, "total_amount") != computed:
            raise ValidationError(
                {"total_amount": [f"Total does not match the current prices ({format_amount(computed)})"]}
            )

        order = Order.place(
            lines=lines,
            shipping={field: getattr(command, field) for field in SHIPPING_FIELDS},
            store_id=str(products[0].store_id),
            user_id=command.user_id,
            session_id=command.session_id,
        )
        current_domain.repository_for(Order).add(order)

        cleared = clear_cart(session_id=command.session_id, user_id=command.user_id)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            tracking_id=order.tracking_id,
            store_id=order.store_id,
            lines=len(lines),
            total_amount=order.total_amount,
            cart_rows_cleared=cleared,
        )
        return str(order.id)
