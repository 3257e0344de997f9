"""Cart read paths: the effective cart of a session or a user."""

from protean.utils.globals import current_domain

from storefront.cart.cart import CartItem


def cart_rows(session_id=None, user_id=None) -> list[CartItem]:
    """Rows owned by the user when one is given, else by the session."""
    repo = current_domain.repository_for(CartItem)
    if user_id:
        rows = repo._dao.query.filter(user_id=str(user_id)).limit(None).all().items
    elif session_id:
        rows = repo._dao.query.filter(session_id=session_id).limit(None).all().items
    else:
        return []
    return sorted(rows, key=lambda row: row.added_at)


def find_row(product_id, session_id=None, user_id=None) -> CartItem | None:
    return next(
        (row for row in cart_rows(session_id=session_id, user_id=user_id) if str(row.product_id) == str(product_id)),
        None,
    )


def clear_cart(session_id=None, user_id=None) -> int:
    """Delete every row of a session cart and of a user cart. Returns the count."""
    dao = current_domain.repository_for(CartItem)._dao
    rows = []
    if user_id:
        rows += cart_rows(user_id=user_id)
    if session_id:
        rows += cart_rows(session_id=session_id)
    for row in rows:
        dao.delete(row)
    return len(rows)
