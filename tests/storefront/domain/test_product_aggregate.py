"""Tests for the Product aggregate: listing, detail edits and stock consumption."""

import json

import pytest
from protean.exceptions import ValidationError
from storefront.product.allocation import plan_allocation
from storefront.product.events import ProductDetailsUpdated, ProductListed, StockConsumed, StockReallocated
from storefront.product.product import Product


def _make_product(total_stock=10, channel="online", online_stock=None, allocations=(), **overrides):
    details = {
        "store_id": "store-001",
        "name": "Banarasi Silk Saree",
        "price": "8999.5",
        "fabric": "Silk",
        "color": "Blue",
        "occasion": "Festive",
        "category": "Banarasi",
        "images": ["https://cdn.example.com/banarasi.jpg"],
    }
    details.update(overrides)
    plan = plan_allocation(total_stock, channel, allocations=allocations, online_stock=online_stock)
    return Product.create(plan=plan, **details)


class TestProductListing:
    def test_tracking_id_is_assigned(self):
        product = _make_product()
        assert product.tracking_id.startswith("PROD-")

    def test_sellable_stock_starts_at_total(self):
        product = _make_product(total_stock=10)
        assert product.total_stock == 10
        assert product.in_stock == 10
        assert product.online_stock == 10

    def test_price_is_normalized_to_two_places(self):
        product = _make_product()
        assert product.price == "8999.50"

    def test_images_are_stored_as_json(self):
        product = _make_product()
        assert product.image_urls == ["https://cdn.example.com/banarasi.jpg"]
        assert json.loads(product.images) == product.image_urls

    def test_json_image_string_is_kept_as_is(self):
        product = _make_product(images='["a.jpg", "b.jpg"]')
        assert product.image_urls == ["a.jpg", "b.jpg"]

    def test_store_allocations_become_entities(self):
        product = _make_product(total_stock=20, channel="both", online_stock=12, allocations=[("store-a", 8)])
        assert len(product.store_inventory) == 1
        assert product.store_inventory[0].store_id == "store-a"
        assert product.store_inventory[0].quantity == 8

    def test_raises_product_listed(self):
        product = _make_product()
        events = [e for e in product._events if isinstance(e, ProductListed)]
        assert len(events) == 1
        assert events[0].tracking_id == product.tracking_id

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price="-1")

    def test_physical_products_are_not_sold_online(self):
        product = _make_product(total_stock=3, channel="physical", allocations=[("store-a", 3)])
        assert product.is_sold_online is False


class TestProductDetails:
    def test_partial_update_keeps_other_fields(self):
        product = _make_product()
        product._events.clear()

        product.update_details(name="Banarasi Georgette Saree", color=None)

        assert product.name == "Banarasi Georgette Saree"
        assert product.color == "Blue"
        event = product._events[-1]
        assert isinstance(event, ProductDetailsUpdated)
        assert json.loads(event.changes) == {"name": "Banarasi Georgette Saree"}

    def test_price_update_is_normalized(self):
        product = _make_product()
        product.update_details(price="10500")
        assert product.price == "10500.00"

    def test_unknown_fields_are_rejected(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.update_details(in_stock=99)

    def test_empty_update_raises_no_event(self):
        product = _make_product()
        product._events.clear()
        product.update_details(name=None)
        assert product._events == []


class TestProductReallocation:
    def test_reallocation_replaces_breakdown_and_resets_stock(self):
        product = _make_product(total_stock=20, channel="both", online_stock=12, allocations=[("store-a", 8)])
        product.consume_stock(5, order_id="ord-1")

        product.apply_allocation(plan_allocation(6, "physical", allocations=[("store-b", 6)]))

        assert product.channel == "physical"
        assert product.total_stock == 6
        assert product.online_stock == 0
        assert product.in_stock == 6
        assert [(a.store_id, a.quantity) for a in product.store_inventory] == [("store-b", 6)]
        assert isinstance(product._events[-1], StockReallocated)


class TestStockConsumption:
    def test_consumes_requested_units(self):
        product = _make_product(total_stock=10)
        assert product.consume_stock(3, order_id="ord-1") == 3
        assert product.in_stock == 7

    def test_floors_at_zero(self):
        product = _make_product(total_stock=2)
        consumed = product.consume_stock(5, order_id="ord-1")
        assert consumed == 2
        assert product.in_stock == 0

        event = product._events[-1]
        assert isinstance(event, StockConsumed)
        assert event.requested == 5
        assert event.consumed == 2
        assert event.remaining == 0

    def test_quantity_must_be_positive(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.consume_stock(0, order_id="ord-1")

    def test_total_stock_is_unchanged(self):
        product = _make_product(total_stock=10)
        product.consume_stock(4, order_id="ord-1")
        assert product.total_stock == 10
