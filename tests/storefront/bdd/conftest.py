"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from storefront.product.product import Product


@pytest.fixture()
def ctx():
    """Scenario state: the listed saree, placed orders and the last rejection."""
    return {"orders": [], "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a saree listed online with {units:d} units"))
def saree_listed_online(ctx, make_store, make_product, units):
    ctx["store_id"] = make_store()
    ctx["product_id"] = make_product(ctx["store_id"], total_stock=units)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the saree has {units:d} units in stock"))
def saree_stock(ctx, units):
    assert current_domain.repository_for(Product).get(ctx["product_id"]).in_stock == units


@then("the request is rejected")
def request_rejected(ctx):
    assert ctx["error"] is not None, "Expected a validation error but none was raised"
    assert isinstance(ctx["error"], ValidationError)


@then(parsers.cfparse('the request is rejected with "{message}"'))
def request_rejected_with(ctx, message):
    assert isinstance(ctx["error"], ValidationError)
    messages = [m for field_messages in ctx["error"].messages.values() for m in field_messages]
    assert message in messages
