"""Order refund bookkeeping: command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.command(part_of="Order")
class UpdateRefundStatus:
    order_id = Identifier(required=True)
    refund_status = String(required=True, max_length=20)
    return_notes = Text()


@storefront.command_handler(part_of=Order)
class UpdateRefundStatusHandler:
    @handle(UpdateRefundStatus)
    def update_refund_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_refund(command.refund_status, return_notes=command.return_notes)
        repo.add(order)
