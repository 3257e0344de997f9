"""Tests for stock allocation planning across online and physical channels."""

import pytest
from protean.exceptions import ValidationError
from storefront.product.allocation import (
    AllocationPlan,
    SalesChannel,
    StoreAllocation,
    parse_channel,
    plan_allocation,
)


class _Store:
    def __init__(self, is_active=True):
        self.is_active = is_active


class TestBothChannels:
    def test_online_plus_store_quantities_equal_total(self):
        plan = plan_allocation(
            total_stock=20,
            channel="both",
            online_stock=12,
            allocations=[{"storeId": "store-a", "quantity": 8}],
        )
        assert plan.channel == SalesChannel.BOTH
        assert plan.online_stock == 12
        assert plan.store_stock == 8
        assert plan.unallocated == 0

    def test_shortfall_is_rejected_with_remaining_units(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(
                total_stock=20,
                channel="both",
                online_stock=12,
                allocations=[{"storeId": "store-a", "quantity": 5}],
            )
        assert exc.value.messages["store_inventory"] == ["3 units unallocated"]

    def test_over_allocation_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(
                total_stock=10,
                channel="both",
                online_stock=6,
                allocations=[("store-a", 4), ("store-b", 1)],
            )
        assert exc.value.messages["store_inventory"] == ["Over-allocated by 1 unit"]

    def test_missing_online_stock_counts_as_zero(self):
        plan = plan_allocation(total_stock=4, channel="both", allocations=[("store-a", 4)])
        assert plan.online_stock == 0
        assert plan.allocated == 4


class TestOnlineChannel:
    def test_all_stock_goes_online(self):
        plan = plan_allocation(total_stock=7, channel="online")
        assert plan.online_stock == 7
        assert plan.store_allocations == ()

    def test_store_allocations_are_rejected(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(total_stock=7, channel="online", allocations=[("store-a", 2)])
        assert "store_inventory" in exc.value.messages

    def test_partial_online_stock_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(total_stock=7, channel="online", online_stock=3)
        assert "online_stock" in exc.value.messages


class TestPhysicalChannel:
    def test_store_quantities_must_cover_total(self):
        plan = plan_allocation(
            total_stock=8,
            channel=SalesChannel.PHYSICAL,
            allocations=[StoreAllocation("store-a", 5), StoreAllocation("store-b", 3)],
        )
        assert plan.online_stock == 0
        assert plan.store_stock == 8

    def test_needs_at_least_one_store(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(total_stock=8, channel="physical")
        assert exc.value.messages["store_inventory"] == ["Allocate stock to at least one store"]

    def test_online_stock_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(total_stock=8, channel="physical", online_stock=2, allocations=[("store-a", 6)])
        assert "online_stock" in exc.value.messages

    def test_zero_quantity_rows_do_not_count_as_stores(self):
        with pytest.raises(ValidationError):
            plan_allocation(total_stock=8, channel="physical", allocations=[{"store_id": "store-a", "quantity": 0}])


class TestAllocationInputs:
    def test_total_stock_must_be_at_least_one(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(total_stock=0, channel="online")
        assert "total_stock" in exc.value.messages

    def test_unknown_channel(self):
        with pytest.raises(ValidationError) as exc:
            parse_channel("wholesale")
        assert "channel" in exc.value.messages

    def test_channel_is_case_insensitive(self):
        assert parse_channel(" Both ") == SalesChannel.BOTH

    def test_negative_store_quantity(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(total_stock=5, channel="both", online_stock=5, allocations=[("store-a", -1)])
        assert exc.value.messages["store_inventory"] == ["Quantity for store store-a cannot be negative"]

    def test_store_listed_twice(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(total_stock=4, channel="physical", allocations=[("store-a", 2), ("store-a", 2)])
        assert "more than once" in exc.value.messages["store_inventory"][0]

    def test_unknown_store(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(total_stock=4, channel="physical", allocations=[("store-x", 4)], stores={})
        assert exc.value.messages["store_inventory"] == ["Store store-x does not exist"]

    def test_inactive_store(self):
        with pytest.raises(ValidationError) as exc:
            plan_allocation(
                total_stock=4,
                channel="physical",
                allocations=[("store-a", 4)],
                stores={"store-a": _Store(is_active=False)},
            )
        assert exc.value.messages["store_inventory"] == ["Store store-a is not active"]


class TestAllocationPlan:
    def test_unallocated_is_negative_when_over(self):
        plan = AllocationPlan(
            total_stock=5,
            channel=SalesChannel.BOTH,
            online_stock=4,
            store_allocations=(StoreAllocation("store-a", 3),),
        )
        assert plan.unallocated == -2
