"""Return requests: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.order.order import Order
from storefront.returns.return_request import ReturnRequest
from storefront.shared.money import parse_amount


def open_returns_for(order_id, product_id) -> list[ReturnRequest]:
    repo = current_domain.repository_for(ReturnRequest)
    existing = repo._dao.query.filter(order_id=str(order_id), product_id=str(product_id)).limit(None).all().items
    return [r for r in existing if r.is_open]


@storefront.command(part_of="ReturnRequest")
class RequestReturn:
    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    reason = Text(required=True)
    refund_amount = String(max_length=20)  # Optional client-side figure, verified


@storefront.command_handler(part_of=ReturnRequest)
class RequestReturnHandler:
    @handle(RequestReturn)
    def request_return(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)

        # One open return per order line
        if open_returns_for(order.id, command.product_id):
            raise ValidationError({"return": ["A return for this item is already in progress"]})

        return_request = ReturnRequest.request(
            order=order,
            product_id=command.product_id,
            quantity=command.quantity,
            reason=command.reason,
            user_id=command.user_id,
        )

        if command.refund_amount and parse_amount(command.refund_amount, "refund_amount") != parse_amount(
            return_request.refund_amount
        ):
            raise ValidationError(
                {"refund_amount": [f"Refund amount must be {return_request.refund_amount} for this quantity"]}
            )

        current_domain.repository_for(ReturnRequest).add(return_request)

        logger.info(
            "return_requested",
            return_id=str(return_request.id),
            order_id=str(order.id),
            product_id=str(command.product_id),
            quantity=command.quantity,
            refund_amount=return_request.refund_amount,
        )
        return str(return_request.id)
