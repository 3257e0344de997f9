"""Product aggregate: a saree on sale, with its stock allocation.

``total_stock`` is what the seller allocated when listing (or last
reallocating) the product. It is split between ``online_stock`` and the
``store_inventory`` rows. ``in_stock`` is the sellable count shown to
shoppers; it starts at ``total_stock`` and only moves when orders ship.
"""

import json
from datetime import UTC, datetime

import structlog
from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.product.allocation import AllocationPlan, SalesChannel
from storefront.product.events import (
    ProductDetailsUpdated,
    ProductListed,
    StockConsumed,
    StockReallocated,
)
from storefront.shared.money import normalize_amount
from storefront.shared.tracking import product_tracking_id

logger = structlog.get_logger(__name__)

EDITABLE_FIELDS = (
    "name",
    "description",
    "price",
    "images",
    "video_url",
    "fabric",
    "color",
    "occasion",
    "category",
)


@storefront.entity(part_of="Product")
class StockAllocation:
    """Units of a product placed on one physical store's shelves."""

    store_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    channel = String(max_length=20, default=SalesChannel.PHYSICAL.value)


@storefront.aggregate
class Product:
    tracking_id = String(required=True, max_length=50, unique=True)
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
    channel = String(choices=SalesChannel, default=SalesChannel.ONLINE.value)
    total_stock = Integer(default=0, min_value=0)
    online_stock = Integer(default=0, min_value=0)
    in_stock = Integer(default=0, min_value=0)
    store_inventory = HasMany(StockAllocation)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def allocations_must_fit_total_stock(self):
        allocated = (self.online_stock or 0) + sum(a.quantity for a in self.store_inventory)
        total = self.total_stock or 0
        if allocated > total:
            raise ValidationError({"store_inventory": [f"Over-allocated by {allocated - total} units"]})

    @invariant.post
    def price_must_be_a_decimal_string(self):
        if self.price is not None:
            normalize_amount(self.price)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        store_id,
        name,
        price,
        fabric,
        color,
        occasion,
        category,
        plan: AllocationPlan,
        description=None,
        images=None,
        video_url=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            tracking_id=product_tracking_id(),
            store_id=store_id,
            name=name,
            description=description,
            price=normalize_amount(price),
            images=images if isinstance(images, str) else json.dumps(list(images or [])),
            video_url=video_url,
            fabric=fabric,
            color=color,
            occasion=occasion,
            category=category,
            channel=plan.channel.value,
            total_stock=plan.total_stock,
            online_stock=plan.online_stock,
            in_stock=plan.total_stock,
            store_inventory=[
                StockAllocation(store_id=allocation.store_id, quantity=allocation.quantity)
                for allocation in plan.store_allocations
            ],
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=str(product.id),
                tracking_id=product.tracking_id,
                store_id=str(store_id),
                name=name,
                price=product.price,
                channel=plan.channel.value,
                total_stock=plan.total_stock,
                listed_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def image_urls(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    @property
    def is_sold_online(self) -> bool:
        return self.channel in (SalesChannel.ONLINE.value, SalesChannel.BOTH.value)

    # -------------------------------------------------------------------
    # Catalogue details
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        """Apply a partial update of descriptive fields and price."""
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({"product": [f"Cannot update: {', '.join(sorted(unknown))}"]})

        applied = {}
        for field, value in changes.items():
            if value is None:
                continue
            if field == "price":
                value = normalize_amount(value)
            elif field == "images":
                value = json.dumps(list(value)) if not isinstance(value, str) else value
            setattr(self, field, value)
            applied[field] = value

        if not applied:
            return

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                changes=json.dumps(applied),
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def apply_allocation(self, plan: AllocationPlan):
        """Replace the allocation breakdown; sellable stock resets to the new total."""
        now = datetime.now(UTC)
        with atomic_change(self):
            for allocation in list(self.store_inventory):
                self.remove_store_inventory(allocation)

            self.channel = plan.channel.value
            self.total_stock = plan.total_stock
            self.online_stock = plan.online_stock
            self.in_stock = plan.total_stock
            for allocation in plan.store_allocations:
                self.add_store_inventory(StockAllocation(store_id=allocation.store_id, quantity=allocation.quantity))
            self.updated_at = now

        self.raise_(
            StockReallocated(
                product_id=str(self.id),
                channel=plan.channel.value,
                total_stock=plan.total_stock,
                online_stock=plan.online_stock,
                store_inventory=json.dumps(
                    [{"store_id": a.store_id, "quantity": a.quantity} for a in plan.store_allocations]
                ),
                reallocated_at=now,
            )
        )

    def consume_stock(self, quantity: int, order_id) -> int:
        """Take ``quantity`` units off the sellable count, never going below zero.

        Returns the number of units actually consumed.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Consumed quantity must be at least 1"]})

        available = self.in_stock or 0
        consumed = min(available, quantity)
        if consumed < quantity:
            logger.warning(
                "stock_floored_at_zero",
                product_id=str(self.id),
                order_id=str(order_id),
                requested=quantity,
                available=available,
            )

        now = datetime.now(UTC)
        self.in_stock = available - consumed
        self.updated_at = now
        self.raise_(
            StockConsumed(
                product_id=str(self.id),
                order_id=str(order_id),
                requested=quantity,
                consumed=consumed,
                remaining=self.in_stock,
                consumed_at=now,
            )
        )
        return consumed
