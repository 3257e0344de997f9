"""Product creation: command and handler."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.product.allocation import plan_allocation
from storefront.product.product import Product
from storefront.store.store import Store


def parse_store_inventory(raw):
    """Decode the ``store_inventory`` payload of a command (JSON or list)."""
    if raw is None or raw == "":
        return []
    return json.loads(raw) if isinstance(raw, str) else raw


def load_stores(allocations) -> dict:
    """Fetch every store an allocation mentions; unknown ids are left out."""
    repo = current_domain.repository_for(Store)
    stores = {}
    for entry in allocations:
        store_id = entry.get("store_id", entry.get("storeId")) if isinstance(entry, dict) else entry[0]
        if not store_id or str(store_id) in stores:
            continue
        try:
            stores[str(store_id)] = repo.get(str(store_id))
        except ObjectNotFoundError:
            continue
    return stores


@storefront.command(part_of="Product")
class CreateProduct:
    store_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    description = Text()
    price = String(required=True, max_length=20)
    images = Text()  # JSON array of image URLs
    video_url = String(max_length=500)
    fabric = String(required=True, max_length=100)
    color = String(required=True, max_length=100)
    occasion = String(required=True, max_length=100)
    category = String(required=True, max_length=100)
    channel = String(required=True, max_length=20)
    total_stock = Integer(required=True)
    online_stock = Integer()
    store_inventory = Text()  # JSON: list of {store_id, quantity}


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        # The owning store must exist
        current_domain.repository_for(Store).get(command.store_id)

        allocations = parse_store_inventory(command.store_inventory)
        plan = plan_allocation(
            total_stock=command.total_stock,
            channel=command.channel,
            allocations=allocations,
            online_stock=command.online_stock,
            stores=load_stores(allocations),
        )

        product = Product.create(
            store_id=command.store_id,
            name=command.name,
            description=command.description,
            price=command.price,
            images=command.images,
            video_url=command.video_url,
            fabric=command.fabric,
            color=command.color,
            occasion=command.occasion,
            category=command.category,
            plan=plan,
        )
        current_domain.repository_for(Product).add(product)

        logger.info(
            "product_listed",
            product_id=str(product.id),
            tracking_id=product.tracking_id,
            store_id=str(command.store_id),
            channel=plan.channel.value,
            total_stock=plan.total_stock,
        )
        return str(product.id)
