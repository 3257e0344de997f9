"""Order lifecycle: the one place order status changes.

``OrderLifecycleService`` owns the forward-only status machine and its single
side effect: the first time an order leaves ``pending`` (to ``shipped``, or
straight to ``delivered``) each line's product loses the ordered quantity of
sellable stock, floored at zero. The order remembers that its stock was
consumed, so repeating a transition or moving on to ``delivered`` never
decrements again.

The handler writes the order and every touched product in one unit of work.
Aggregates are versioned, so a concurrent shipment that committed first makes
this commit fail instead of overwriting its stock count.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.order.order import Order, OrderStatus, parse_status
from storefront.product.product import Product

_CONSUMING_STATUSES = (OrderStatus.SHIPPED, OrderStatus.DELIVERED)


@dataclass(frozen=True)
class StatusTransition:
    order_id: str
    previous: OrderStatus
    current: OrderStatus
    consumed: tuple[tuple[str, int], ...] = ()

    @property
    def changed(self) -> bool:
        return self.previous != self.current


class OrderLifecycleService:
    def __init__(self, order: Order, products: Mapping[str, Product]):
        self.order = order
        self.products = products

    def transition(self, target) -> StatusTransition:
        """Advance the order to ``target`` (an OrderStatus or its value)."""
        target = parse_status(target.value if isinstance(target, OrderStatus) else target)
        previous = OrderStatus(self.order.status)

        if target == previous:
            return StatusTransition(order_id=str(self.order.id), previous=previous, current=target)

        self.order.advance_to(target)

        consumed = ()
        if target in _CONSUMING_STATUSES and not self.order.stock_consumed:
            consumed = self._consume_stock()
            self.order.mark_stock_consumed()

        return StatusTransition(
            order_id=str(self.order.id),
            previous=previous,
            current=target,
            consumed=consumed,
        )

    def _consume_stock(self) -> tuple[tuple[str, int], ...]:
        consumed = []
        for line in self.order.lines:
            product = self.products.get(str(line.product_id))
            if product is None:
                logger.warning(
                    "stock_consumption_skipped",
                    order_id=str(self.order.id),
                    product_id=str(line.product_id),
                    reason="product_missing",
                )
                continue
            consumed.append((str(product.id), product.consume_stock(line.quantity, order_id=self.order.id)))
        return tuple(consumed)


def load_products(order: Order) -> dict[str, Product]:
    repo = current_domain.repository_for(Product)
    products = {}
    for line in order.lines:
        product_id = str(line.product_id)
        if product_id in products:
            continue
        try:
            products[product_id] = repo.get(product_id)
        except ObjectNotFoundError:
            continue
    return products


@storefront.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@storefront.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        target = parse_status(command.status)

        order_repo = current_domain.repository_for(Order)
        order = order_repo.get(command.order_id)
        products = load_products(order)

        transition = OrderLifecycleService(order, products).transition(target)
        if not transition.changed:
            return transition

        order_repo.add(order)
        product_repo = current_domain.repository_for(Product)
        for product_id, _ in transition.consumed:
            product_repo.add(products[product_id])

        logger.info(
            "order_status_changed",
            order_id=transition.order_id,
            previous=transition.previous.value,
            current=transition.current.value,
            stock_consumed=[{"product_id": pid, "units": units} for pid, units in transition.consumed],
        )
        return transition
