"""BDD tests for merging a guest cart into a signed-in shopper's cart."""

from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.cart.items import AddToCart
from storefront.cart.lookup import cart_rows
from storefront.cart.merge import MergeSessionCart

scenarios("features/cart_reconciliation.feature")

GUEST_SESSION = "sess-guest"
SHOPPER = "user-1"


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("the guest cart holds {qty:d} units"))
def guest_cart_holds(ctx, qty):
    current_domain.process(
        AddToCart(product_id=ctx["product_id"], quantity=qty, session_id=GUEST_SESSION),
        asynchronous=False,
    )


@given(parsers.cfparse("the shopper's cart holds {qty:d} units"))
def shopper_cart_holds(ctx, qty):
    current_domain.process(
        AddToCart(product_id=ctx["product_id"], quantity=qty, user_id=SHOPPER),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the shopper signs in")
def shopper_signs_in():
    current_domain.process(MergeSessionCart(session_id=GUEST_SESSION, user_id=SHOPPER), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the shopper's cart holds {qty:d} units"))
def shopper_cart_has(qty):
    (row,) = cart_rows(user_id=SHOPPER)
    assert row.quantity == qty


@then("the guest cart is empty")
def guest_cart_empty():
    assert cart_rows(session_id=GUEST_SESSION) == []
