"""Order aggregate: a checkout snapshot and its forward-only status.

Lines copy the product name and price at checkout so historical orders do
not change when a product is edited later. Status only moves forward:
pending, then shipped, then delivered. ``stock_consumed`` records that the
order's units have been taken off the shelf, which happens exactly once.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.order.events import OrderDelivered, OrderPlaced, OrderShipped, RefundStatusUpdated
from storefront.order.snapshot import ITEMS_SCHEMA_VERSION, LineSnapshot, dump_lines
from storefront.shared.money import format_amount, parse_amount
from storefront.shared.tracking import order_tracking_id


class OrderStatus(Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class RefundStatus(Enum):
    NONE = "none"
    REQUESTED = "requested"
    APPROVED = "approved"
    REJECTED = "rejected"


_STATUS_SEQUENCE = [OrderStatus.PENDING, OrderStatus.SHIPPED, OrderStatus.DELIVERED]


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(status.value for status in OrderStatus)
        raise ValidationError({"status": [f"'{value}' is not a valid order status. Choose one of: {choices}"]})


@storefront.value_object(part_of="Order")
class ShippingDetails:
    customer_name = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    phone = String(required=True, max_length=30)
    address = Text(required=True)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=12)

    @invariant.post
    def email_must_look_valid(self):
        if self.email is not None and (self.email.count("@") != 1 or " " in self.email):
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})


@storefront.entity(part_of="Order")
class OrderLine:
    product_id = Identifier(required=True)
    tracking_id = String(max_length=50)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = String(required=True, max_length=20)
    schema_version = Integer(default=ITEMS_SCHEMA_VERSION)


@storefront.aggregate
class Order:
    tracking_id = String(required=True, max_length=20, unique=True)
    user_id = Identifier()  # None for guest checkouts
    session_id = String(max_length=255)
    store_id = Identifier()
    lines = HasMany(OrderLine)
    shipping = ValueObject(ShippingDetails)
    total_amount = String(required=True, max_length=20)
    channel = String(max_length=20, default="online")
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    refund_status = String(choices=RefundStatus, default=RefundStatus.NONE.value)
    return_notes = Text()
    stock_consumed = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()

    @invariant.post
    def total_must_match_lines(self):
        if not self.lines:
            return
        expected = sum((parse_amount(line.unit_price) * line.quantity for line in self.lines), Decimal("0"))
        if parse_amount(self.total_amount, "total_amount") != expected:
            raise ValidationError({"total_amount": [f"Total must equal the sum of the lines ({format_amount(expected)})"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, lines: list[LineSnapshot], shipping: dict, store_id=None, user_id=None, session_id=None):
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        total = format_amount(sum((parse_amount(line.subtotal) for line in lines), Decimal("0")))
        order = cls(
            tracking_id=order_tracking_id(),
            user_id=user_id,
            session_id=session_id,
            store_id=store_id,
            lines=[
                OrderLine(
                    product_id=line.product_id,
                    tracking_id=line.tracking_id,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    schema_version=line.schema_version,
                )
                for line in lines
            ],
            shipping=ShippingDetails(**shipping),
            total_amount=total,
            status=OrderStatus.PENDING.value,
            refund_status=RefundStatus.NONE.value,
            stock_consumed=False,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                tracking_id=order.tracking_id,
                user_id=user_id,
                store_id=store_id,
                items=dump_lines(lines),
                total_amount=total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def items_snapshot(self) -> list[LineSnapshot]:
        return [
            LineSnapshot(
                product_id=str(line.product_id),
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                tracking_id=line.tracking_id,
                schema_version=line.schema_version or ITEMS_SCHEMA_VERSION,
            )
            for line in self.lines
        ]

    def line_for(self, product_id) -> OrderLine | None:
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def advance_to(self, target: OrderStatus):
        """Move the status forward to ``target``.

        Moving to the current status is a no-op. Delivering a pending order
        records the shipment as well.
        """
        current = OrderStatus(self.status)
        if target == current:
            return
        if _STATUS_SEQUENCE.index(target) < _STATUS_SEQUENCE.index(current):
            raise ValidationError(
                {"status": [f"Cannot move order from {current.value} back to {target.value}"]}
            )

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        if self.shipped_at is None:
            self.shipped_at = now
            self.raise_(OrderShipped(order_id=str(self.id), tracking_id=self.tracking_id, shipped_at=now))

        if target == OrderStatus.DELIVERED:
            self.delivered_at = now
            self.raise_(OrderDelivered(order_id=str(self.id), tracking_id=self.tracking_id, delivered_at=now))

    def mark_stock_consumed(self):
        if self.stock_consumed:
            raise ValidationError({"stock_consumed": ["Stock for this order was already consumed"]})
        self.stock_consumed = True

    # -------------------------------------------------------------------
    # Refunds
    # -------------------------------------------------------------------
    def update_refund(self, refund_status, return_notes=None):
        try:
            refund_status = RefundStatus(str(refund_status).strip().lower())
        except ValueError:
            choices = ", ".join(status.value for status in RefundStatus)
            raise ValidationError(
                {"refund_status": [f"'{refund_status}' is not a valid refund status. Choose one of: {choices}"]}
            )

        previous = self.refund_status
        now = datetime.now(UTC)
        self.refund_status = refund_status.value
        if return_notes is not None:
            self.return_notes = return_notes
        self.updated_at = now

        self.raise_(
            RefundStatusUpdated(
                order_id=str(self.id),
                previous_status=previous,
                refund_status=refund_status.value,
                return_notes=self.return_notes,
                updated_at=now,
            )
        )
