"""Stock reallocation: command and handler.

Replaces a product's whole allocation. The new plan goes through the same
validation as product creation, and sellable stock resets to the new total.
"""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.product.allocation import plan_allocation
from storefront.product.creation import load_stores, parse_store_inventory
from storefront.product.product import Product


@storefront.command(part_of="Product")
class ReallocateStock:
    product_id = Identifier(required=True)
    channel = String(required=True, max_length=20)
    total_stock = Integer(required=True)
    online_stock = Integer()
    store_inventory = Text()  # JSON: list of {store_id, quantity}


@storefront.command_handler(part_of=Product)
class ReallocateStockHandler:
    @handle(ReallocateStock)
    def reallocate_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        allocations = parse_store_inventory(command.store_inventory)
        plan = plan_allocation(
            total_stock=command.total_stock,
            channel=command.channel,
            allocations=allocations,
            online_stock=command.online_stock,
            stores=load_stores(allocations),
        )
        product.apply_allocation(plan)
        repo.add(product)

        logger.info(
            "stock_reallocated",
            product_id=str(product.id),
            channel=plan.channel.value,
            total_stock=plan.total_stock,
        )
