"""Stock allocation across online and physical sales channels.

A product's total stock is split between an implicit online warehouse bucket
and the shelves of zero or more physical stores. Every submission is
validated here, whichever client sent it, and the accepted split comes back
as an immutable ``AllocationPlan`` that the Product aggregate persists.

Rules per channel:

- ``online``: no store allocations; the whole quantity is online.
- ``physical``: no online stock; at least one store with a non-zero quantity.
- ``both``: online stock plus store quantities.

In every case the allocated quantities must add up to exactly the total.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

import structlog
from protean.exceptions import ValidationError

logger = structlog.get_logger(__name__)


class SalesChannel(Enum):
    ONLINE = "online"
    PHYSICAL = "physical"
    BOTH = "both"


@dataclass(frozen=True)
class StoreAllocation:
    store_id: str
    quantity: int


@dataclass(frozen=True)
class AllocationPlan:
    total_stock: int
    channel: SalesChannel
    online_stock: int = 0
    store_allocations: tuple[StoreAllocation, ...] = ()

    @property
    def store_stock(self) -> int:
        return sum(allocation.quantity for allocation in self.store_allocations)

    @property
    def allocated(self) -> int:
        return self.online_stock + self.store_stock

    @property
    def unallocated(self) -> int:
        """Positive when units are left over, negative when over-allocated."""
        return self.total_stock - self.allocated


def parse_channel(value) -> SalesChannel:
    if isinstance(value, SalesChannel):
        return value
    try:
        return SalesChannel(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(channel.value for channel in SalesChannel)
        raise ValidationError({"channel": [f"'{value}' is not a valid sales channel. Choose one of: {choices}"]})


def _units(count: int) -> str:
    return f"{count} unit" if count == 1 else f"{count} units"


def _coerce_quantity(value, store_id) -> int:
    if isinstance(value, bool):
        raise ValidationError({"store_inventory": [f"Quantity for store {store_id} must be a whole number"]})
    try:
        quantity = int(value)
    except (TypeError, ValueError):
        raise ValidationError({"store_inventory": [f"Quantity for store {store_id} must be a whole number"]})
    if quantity != value and not isinstance(value, str):
        raise ValidationError({"store_inventory": [f"Quantity for store {store_id} must be a whole number"]})
    if quantity < 0:
        raise ValidationError({"store_inventory": [f"Quantity for store {store_id} cannot be negative"]})
    return quantity


def _normalize(allocations) -> tuple[StoreAllocation, ...]:
    """Accept dicts (camelCase or snake_case), pairs, or StoreAllocations.

    Zero-quantity rows are dropped; a store listed twice is an error.
    """
    normalized = []
    seen = set()
    for entry in allocations or ():
        if isinstance(entry, StoreAllocation):
            store_id, quantity = entry.store_id, entry.quantity
        elif isinstance(entry, Mapping):
            store_id = entry.get("store_id", entry.get("storeId"))
            quantity = entry.get("quantity", 0)
        else:
            store_id, quantity = entry

        if not store_id:
            raise ValidationError({"store_inventory": ["Each allocation needs a store"]})
        store_id = str(store_id)
        quantity = _coerce_quantity(quantity, store_id)

        if store_id in seen:
            raise ValidationError({"store_inventory": [f"Store {store_id} is allocated more than once"]})
        seen.add(store_id)

        if quantity:
            normalized.append(StoreAllocation(store_id=store_id, quantity=quantity))
    return tuple(normalized)


def _check_stores(allocations: Iterable[StoreAllocation], stores: Mapping) -> None:
    for allocation in allocations:
        store = stores.get(allocation.store_id)
        if store is None:
            raise ValidationError({"store_inventory": [f"Store {allocation.store_id} does not exist"]})
        if not store.is_active:
            raise ValidationError({"store_inventory": [f"Store {allocation.store_id} is not active"]})


def plan_allocation(total_stock, channel, allocations=(), online_stock=None, stores=None) -> AllocationPlan:
    """Validate an operator's allocation and return the accepted plan.

    Args:
        total_stock: Units being put on sale; must be at least 1.
        channel: A ``SalesChannel`` or its string value.
        allocations: Store allocations as dicts, ``(store_id, quantity)``
            pairs or ``StoreAllocation`` instances.
        online_stock: Units kept in the online warehouse. Only meaningful
            for ``both``; ``online`` always puts everything online.
        stores: Optional mapping of store id to Store. When given, every
            allocated store must be present and active.

    Raises:
        ValidationError: When the allocation breaks any channel rule or
            does not add up to ``total_stock``.
    """
    if isinstance(total_stock, bool) or not isinstance(total_stock, int) or total_stock < 1:
        raise ValidationError({"total_stock": ["Total stock must be a whole number of at least 1"]})

    channel = parse_channel(channel)
    store_allocations = _normalize(allocations)

    if online_stock is not None and (isinstance(online_stock, bool) or not isinstance(online_stock, int)):
        raise ValidationError({"online_stock": ["Online stock must be a whole number"]})
    if online_stock is not None and online_stock < 0:
        raise ValidationError({"online_stock": ["Online stock cannot be negative"]})

    if channel == SalesChannel.ONLINE:
        if store_allocations:
            raise ValidationError(
                {"store_inventory": ["Online-only products cannot be allocated to physical stores"]}
            )
        if online_stock not in (None, total_stock):
            raise ValidationError({"online_stock": ["Online-only products keep their entire stock online"]})
        online = total_stock
    elif channel == SalesChannel.PHYSICAL:
        if online_stock:
            raise ValidationError({"online_stock": ["Physical-only products cannot hold online stock"]})
        if not store_allocations:
            raise ValidationError({"store_inventory": ["Allocate stock to at least one store"]})
        online = 0
    else:
        online = online_stock or 0

    if stores is not None:
        _check_stores(store_allocations, stores)

    plan = AllocationPlan(
        total_stock=total_stock,
        channel=channel,
        online_stock=online,
        store_allocations=store_allocations,
    )

    if plan.unallocated > 0:
        raise ValidationError({"store_inventory": [f"{_units(plan.unallocated)} unallocated"]})
    if plan.unallocated < 0:
        raise ValidationError({"store_inventory": [f"Over-allocated by {_units(-plan.unallocated)}"]})

    logger.debug(
        "allocation_planned",
        channel=channel.value,
        total_stock=total_stock,
        online_stock=online,
        stores=len(store_allocations),
    )
    return plan
