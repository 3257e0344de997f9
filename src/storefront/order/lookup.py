"""Order read paths for shoppers and sellers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.order.order import Order


def find_order(reference) -> Order:
    """Load an order by internal id or ``ORD-`` tracking id."""
    repo = current_domain.repository_for(Order)
    reference = str(reference)
    if reference.upper().startswith("ORD-"):
        order = repo._dao.query.filter(tracking_id=reference.upper()).all().first
        if order is None:
            raise ObjectNotFoundError(f"Order with tracking id {reference} does not exist")
        return order
    return repo.get(reference)


def _newest_first(orders):
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


def orders_for_user(user_id) -> list[Order]:
    repo = current_domain.repository_for(Order)
    return _newest_first(repo._dao.query.filter(user_id=str(user_id)).limit(None).all().items)


def orders_for_store(store_id) -> list[Order]:
    repo = current_domain.repository_for(Order)
    return _newest_first(repo._dao.query.filter(store_id=str(store_id)).limit(None).all().items)
