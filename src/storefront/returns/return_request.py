"""ReturnRequest aggregate: a customer asking to send back part of an order.

A request covers one product line of one delivered order. The refund is
always the line's snapshotted unit price times the returned quantity. Only
the selling store decides, and only while the request is still open.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.order.order import OrderStatus
from storefront.returns.events import ReturnApproved, ReturnRejected, ReturnRequested
from storefront.shared.money import line_total


class ReturnStatus(Enum):
    REQUESTED = "requested"
    APPROVED = "approved"
    REJECTED = "rejected"


@storefront.aggregate
class ReturnRequest:
    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier()
    store_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    reason = Text(required=True)
    refund_amount = String(required=True, max_length=20)
    status = String(choices=ReturnStatus, default=ReturnStatus.REQUESTED.value)
    requested_at = DateTime()
    approved_at = DateTime()
    rejected_at = DateTime()

    @property
    def is_open(self) -> bool:
        return self.status != ReturnStatus.REJECTED.value

    @classmethod
    def request(cls, order, product_id, quantity, reason, user_id=None):
        """Open a return against ``order``'s line for ``product_id``.

        ``order`` must be delivered and contain the product; ``quantity``
        cannot exceed what was bought.
        """
        if order.status != OrderStatus.DELIVERED.value:
            raise ValidationError({"order_id": ["Returns can only be requested for delivered orders"]})

        line = order.line_for(product_id)
        if line is None:
            raise ValidationError({"product_id": ["This product is not part of the order"]})

        if not reason or not reason.strip():
            raise ValidationError({"reason": ["A reason is required"]})

        if quantity < 1 or quantity > line.quantity:
            raise ValidationError({"quantity": [f"Quantity must be between 1 and {line.quantity}"]})

        now = datetime.now(UTC)
        refund_amount = line_total(line.unit_price, quantity)
        return_request = cls(
            order_id=str(order.id),
            product_id=str(line.product_id),
            user_id=user_id,
            store_id=str(order.store_id) if order.store_id else None,
            quantity=quantity,
            reason=reason.strip(),
            refund_amount=refund_amount,
            status=ReturnStatus.REQUESTED.value,
            requested_at=now,
        )
        return_request.raise_(
            ReturnRequested(
                return_id=str(return_request.id),
                order_id=str(order.id),
                product_id=str(line.product_id),
                store_id=return_request.store_id,
                quantity=quantity,
                reason=return_request.reason,
                refund_amount=refund_amount,
                requested_at=now,
            )
        )
        return return_request

    def _ensure_open(self):
        if self.status != ReturnStatus.REQUESTED.value:
            raise ValidationError({"status": [f"Return is already {self.status}"]})

    def approve(self):
        self._ensure_open()
        now = datetime.now(UTC)
        self.status = ReturnStatus.APPROVED.value
        self.approved_at = now
        self.raise_(
            ReturnApproved(
                return_id=str(self.id),
                order_id=str(self.order_id),
                product_id=str(self.product_id),
                quantity=self.quantity,
                refund_amount=self.refund_amount,
                approved_at=now,
            )
        )

    def reject(self):
        self._ensure_open()
        now = datetime.now(UTC)
        self.status = ReturnStatus.REJECTED.value
        self.rejected_at = now
        self.raise_(
            ReturnRejected(
                return_id=str(self.id),
                order_id=str(self.order_id),
                product_id=str(self.product_id),
                rejected_at=now,
            )
        )
