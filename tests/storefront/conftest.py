"""Shared fixtures for storefront tests: stores, listed sarees and checkouts."""

import json

import pytest
from protean import current_domain
from storefront.order.checkout import PlaceOrder
from storefront.order.lifecycle import ChangeOrderStatus
from storefront.product.creation import CreateProduct
from storefront.store.management import RegisterStore

SHIPPING = {
    "customer_name": "Ananya Rao",
    "email": "ananya@example.com",
    "phone": "+91 98450 00000",
    "address": "12 Temple Street",
    "city": "Bengaluru",
    "state": "Karnataka",
    "pincode": "560001",
}


def register_store(name="Kanchi Weaves", email=None, **extra):
    email = email or f"{name.lower().replace(' ', '-')}@example.com"
    return current_domain.process(RegisterStore(name=name, email=email, **extra), asynchronous=False)


def list_product(store_id, **overrides):
    """List an online-only saree and return its id."""
    details = {
        "store_id": store_id,
        "name": "Kanjivaram Silk Saree",
        "description": "Handwoven pure silk with zari border",
        "price": "12500.00",
        "images": json.dumps(["https://cdn.example.com/kanjivaram.jpg"]),
        "fabric": "Silk",
        "color": "Red",
        "occasion": "Wedding",
        "category": "Kanjivaram",
        "channel": "online",
        "total_stock": 10,
    }
    details.update(overrides)
    if isinstance(details.get("store_inventory"), list):
        details["store_inventory"] = json.dumps(details["store_inventory"])
    return current_domain.process(CreateProduct(**details), asynchronous=False)


def place_order(items, user_id=None, session_id=None, **overrides):
    """Check out ``[(product_id, quantity), ...]`` and return the order id."""
    fields = dict(SHIPPING)
    fields.update(overrides)
    command = PlaceOrder(
        items=json.dumps([{"productId": product_id, "quantity": qty} for product_id, qty in items]),
        user_id=user_id,
        session_id=session_id,
        **fields,
    )
    return current_domain.process(command, asynchronous=False)


def change_status(order_id, status):
    return current_domain.process(ChangeOrderStatus(order_id=order_id, status=status), asynchronous=False)


@pytest.fixture()
def store_id():
    return register_store()


@pytest.fixture()
def product_id(store_id):
    return list_product(store_id)


@pytest.fixture()
def make_store():
    return register_store


@pytest.fixture()
def make_product():
    return list_product


@pytest.fixture()
def checkout():
    return place_order


@pytest.fixture()
def advance():
    return change_status
