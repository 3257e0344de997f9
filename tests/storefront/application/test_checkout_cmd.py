"""Application tests for PlaceOrder: snapshots, totals and cart clean-up."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.cart.items import AddToCart
from storefront.cart.lookup import cart_rows
from storefront.order.checkout import PlaceOrder
from storefront.order.lookup import orders_for_store, orders_for_user
from storefront.order.order import Order
from storefront.product.details import UpdateProductDetails
from storefront.product.product import Product


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestOrderSnapshot:
    def test_lines_copy_name_and_price(self, product_id, checkout):
        order = _order(checkout([(product_id, 2)]))

        (line,) = order.items_snapshot()
        assert line.product_id == product_id
        assert line.product_name == "Kanjivaram Silk Saree"
        assert line.unit_price == "12500.00"
        assert order.total_amount == "25000.00"
        assert order.status == "pending"

    def test_product_edit_does_not_change_placed_order(self, product_id, checkout):
        order_id = checkout([(product_id, 1)])

        current_domain.process(
            UpdateProductDetails(product_id=product_id, name="Renamed Saree", price="99.00"),
            asynchronous=False,
        )

        order = _order(order_id)
        assert order.items_snapshot()[0].product_name == "Kanjivaram Silk Saree"
        assert order.items_snapshot()[0].unit_price == "12500.00"
        assert order.total_amount == "12500.00"

    def test_store_comes_from_the_product(self, store_id, product_id, checkout):
        order = _order(checkout([(product_id, 1)]))
        assert order.store_id == store_id

    def test_shipping_details_are_kept(self, product_id, checkout):
        order = _order(checkout([(product_id, 1)], city="Mysuru"))
        assert order.shipping.customer_name == "Ananya Rao"
        assert order.shipping.city == "Mysuru"

    def test_tracking_id_reference_is_accepted(self, product_id, checkout):
        tracking_id = current_domain.repository_for(Product).get(product_id).tracking_id
        order = _order(checkout([(tracking_id, 1)]))
        assert order.items_snapshot()[0].product_id == product_id

    def test_repeated_product_collapses_into_one_line(self, product_id, checkout):
        order = _order(checkout([(product_id, 1), (product_id, 2)]))
        (line,) = order.items_snapshot()
        assert line.quantity == 3


class TestCheckoutRules:
    def test_client_total_must_match(self, product_id, checkout):
        with pytest.raises(ValidationError) as exc:
            checkout([(product_id, 1)], total_amount="100.00")
        assert "total_amount" in exc.value.messages

    def test_matching_client_total_is_accepted(self, product_id, checkout):
        order = _order(checkout([(product_id, 2)], total_amount="25000"))
        assert order.total_amount == "25000.00"

    def test_quantity_beyond_stock_is_rejected(self, product_id, checkout):
        with pytest.raises(ValidationError) as exc:
            checkout([(product_id, 11)])
        assert exc.value.messages["items"] == ["Only 10 of Kanjivaram Silk Saree left in stock"]

    def test_physical_only_product_is_rejected(self, store_id, make_product, checkout):
        product_id = make_product(
            store_id,
            channel="physical",
            total_stock=2,
            store_inventory=[{"store_id": store_id, "quantity": 2}],
        )
        with pytest.raises(ValidationError):
            checkout([(product_id, 1)])

    def test_unknown_product(self, checkout):
        with pytest.raises(ObjectNotFoundError):
            checkout([("missing-product", 1)])

    def test_invalid_items_payload(self):
        with pytest.raises(ValidationError):
            current_domain.process(
                PlaceOrder(
                    items="not json",
                    customer_name="Ananya Rao",
                    email="ananya@example.com",
                    phone="1",
                    address="1 Street",
                    city="Bengaluru",
                    state="Karnataka",
                    pincode="560001",
                ),
                asynchronous=False,
            )

    def test_invalid_email(self, product_id, checkout):
        with pytest.raises(ValidationError):
            checkout([(product_id, 1)], email="ananya at example")


class TestCartCleanup:
    def test_session_cart_is_cleared(self, product_id, checkout):
        current_domain.process(AddToCart(product_id=product_id, quantity=2, session_id="sess-9"), asynchronous=False)
        checkout([(product_id, 2)], session_id="sess-9")
        assert cart_rows(session_id="sess-9") == []

    def test_user_cart_is_cleared(self, product_id, checkout):
        current_domain.process(AddToCart(product_id=product_id, quantity=1, user_id="user-9"), asynchronous=False)
        order = _order(checkout([(product_id, 1)], user_id="user-9"))
        assert cart_rows(user_id="user-9") == []
        assert str(order.user_id) == "user-9"

    def test_failed_checkout_keeps_the_cart(self, product_id, checkout):
        current_domain.process(AddToCart(product_id=product_id, quantity=2, session_id="sess-8"), asynchronous=False)
        with pytest.raises(ValidationError):
            checkout([(product_id, 2)], session_id="sess-8", total_amount="1")
        assert len(cart_rows(session_id="sess-8")) == 1


class TestOrderLists:
    def test_lists_are_not_truncated(self, store_id, make_product, checkout):
        product_id = make_product(store_id, total_stock=500)
        for _ in range(102):
            checkout([(product_id, 1)], user_id="user-1")

        assert len(orders_for_store(store_id)) == 102
        assert len(orders_for_user("user-1")) == 102
