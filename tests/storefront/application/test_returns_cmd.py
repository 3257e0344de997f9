"""Application tests for return requests, seller review and refund bookkeeping."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.order.order import Order
from storefront.order.refunds import UpdateRefundStatus
from storefront.product.product import Product
from storefront.returns.lookup import returns_for_store, returns_for_user
from storefront.returns.return_request import ReturnRequest
from storefront.returns.review import ReviewReturn
from storefront.returns.submission import RequestReturn


@pytest.fixture()
def delivered_order(product_id, checkout, advance):
    order_id = checkout([(product_id, 3)], user_id="user-1")
    advance(order_id, "delivered")
    return order_id


def _request(order_id, product_id, quantity=1, reason="Colour differs from photos", **extra):
    return current_domain.process(
        RequestReturn(order_id=order_id, product_id=product_id, user_id="user-1", quantity=quantity, reason=reason, **extra),
        asynchronous=False,
    )


def _review(return_id, status):
    current_domain.process(ReviewReturn(return_id=return_id, status=status), asynchronous=False)


def _return(return_id):
    return current_domain.repository_for(ReturnRequest).get(return_id)


class TestRequestReturn:
    def test_return_is_requested_with_computed_refund(self, delivered_order, product_id, store_id):
        return_id = _request(delivered_order, product_id, quantity=2)

        return_request = _return(return_id)
        assert return_request.status == "requested"
        assert return_request.refund_amount == "25000.00"
        assert return_request.store_id == store_id
        assert [str(r.id) for r in returns_for_user("user-1")] == [return_id]
        assert [str(r.id) for r in returns_for_store(store_id)] == [return_id]

    def test_second_request_for_the_same_line_is_rejected(self, delivered_order, product_id):
        _request(delivered_order, product_id)

        with pytest.raises(ValidationError) as exc:
            _request(delivered_order, product_id)
        assert exc.value.messages["return"] == ["A return for this item is already in progress"]

    def test_new_request_allowed_after_rejection(self, delivered_order, product_id):
        first = _request(delivered_order, product_id)
        _review(first, "rejected")

        second = _request(delivered_order, product_id)
        assert second != first

    def test_approved_request_still_blocks(self, delivered_order, product_id):
        first = _request(delivered_order, product_id)
        _review(first, "approved")

        with pytest.raises(ValidationError):
            _request(delivered_order, product_id)

    def test_order_must_be_delivered(self, product_id, checkout, advance):
        order_id = checkout([(product_id, 1)], user_id="user-1")
        advance(order_id, "shipped")

        with pytest.raises(ValidationError):
            _request(order_id, product_id)

    def test_quantity_cannot_exceed_purchase(self, delivered_order, product_id):
        with pytest.raises(ValidationError):
            _request(delivered_order, product_id, quantity=4)

    def test_mismatched_refund_amount(self, delivered_order, product_id):
        with pytest.raises(ValidationError) as exc:
            _request(delivered_order, product_id, refund_amount="1.00")
        assert exc.value.messages["refund_amount"] == ["Refund amount must be 12500.00 for this quantity"]

    def test_matching_refund_amount(self, delivered_order, product_id):
        return_id = _request(delivered_order, product_id, refund_amount="12500")
        assert _return(return_id).refund_amount == "12500.00"


class TestReviewReturn:
    def test_approval_does_not_restock(self, delivered_order, product_id):
        return_id = _request(delivered_order, product_id, quantity=2)

        _review(return_id, "approved")

        assert _return(return_id).status == "approved"
        assert current_domain.repository_for(Product).get(product_id).in_stock == 7

    def test_rejection(self, delivered_order, product_id):
        return_id = _request(delivered_order, product_id)
        _review(return_id, "Rejected")
        assert _return(return_id).rejected_at is not None

    def test_decision_must_be_approved_or_rejected(self, delivered_order, product_id):
        return_id = _request(delivered_order, product_id)
        with pytest.raises(ValidationError):
            _review(return_id, "requested")

    def test_decided_request_cannot_be_reviewed_again(self, delivered_order, product_id):
        return_id = _request(delivered_order, product_id)
        _review(return_id, "approved")
        with pytest.raises(ValidationError):
            _review(return_id, "rejected")


class TestRefundStatus:
    def test_refund_bookkeeping_on_the_order(self, delivered_order):
        current_domain.process(
            UpdateRefundStatus(order_id=delivered_order, refund_status="approved", return_notes="UPI refund sent"),
            asynchronous=False,
        )
        order = current_domain.repository_for(Order).get(delivered_order)
        assert order.refund_status == "approved"
        assert order.return_notes == "UPI refund sent"
