"""Return request read paths."""

from protean.utils.globals import current_domain

from storefront.returns.return_request import ReturnRequest


def _newest_first(returns):
    return sorted(returns, key=lambda r: r.requested_at, reverse=True)


def returns_for_user(user_id) -> list[ReturnRequest]:
    repo = current_domain.repository_for(ReturnRequest)
    return _newest_first(repo._dao.query.filter(user_id=str(user_id)).limit(None).all().items)


def returns_for_store(store_id) -> list[ReturnRequest]:
    repo = current_domain.repository_for(ReturnRequest)
    return _newest_first(repo._dao.query.filter(store_id=str(store_id)).limit(None).all().items)
