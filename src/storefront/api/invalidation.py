"""Cache-invalidation contracts returned by every mutating endpoint.

Each mutation names the cached reads it made stale as ``resource:key``
pairs in the ``X-Invalidates`` response header. Any client cache can drop
exactly those entries without knowing how the server works.

Resources:

- ``products``: the storefront listing (key ``*``)
- ``product``: one product (key product id)
- ``inventory-products``: a store's product list (key store id)
- ``cart``: a cart (key ``user:<id>`` or ``session:<id>``)
- ``orders``: a shopper's order list (key user id)
- ``order``: one order (key order id)
- ``inventory-orders``: a store's order list (key store id)
- ``returns``: a shopper's returns (key user id)
- ``inventory-returns``: a store's returns (key store id)
- ``addresses`` and ``wishlist``: per user
- ``stores``: the store directory (key ``*``)
"""

from dataclasses import dataclass

from fastapi import Response

HEADER = "X-Invalidates"


@dataclass(frozen=True)
class Invalidation:
    resource: str
    key: str = "*"

    def __str__(self) -> str:
        return f"{self.resource}:{self.key}"


def announce(response: Response, invalidations) -> None:
    unique = list(dict.fromkeys(invalidations))
    if unique:
        response.headers[HEADER] = ", ".join(str(i) for i in unique)


def cart_key(session_id=None, user_id=None) -> str:
    return f"user:{user_id}" if user_id else f"session:{session_id}"


def product_changed(product) -> list[Invalidation]:
    return [
        Invalidation("products"),
        Invalidation("product", str(product.id)),
        Invalidation("inventory-products", str(product.store_id)),
    ]


def product_deleted(product) -> list[Invalidation]:
    """Carts may have lost rows for the product, so every cart is stale."""
    return product_changed(product) + [Invalidation("cart")]


def cart_changed(session_id=None, user_id=None) -> list[Invalidation]:
    return [Invalidation("cart", cart_key(session_id, user_id))]


def order_changed(order) -> list[Invalidation]:
    invalidations = [Invalidation("order", str(order.id))]
    if order.user_id:
        invalidations.append(Invalidation("orders", str(order.user_id)))
    if order.store_id:
        invalidations.append(Invalidation("inventory-orders", str(order.store_id)))
    return invalidations


def order_placed(order) -> list[Invalidation]:
    invalidations = order_changed(order)
    if order.session_id:
        invalidations += cart_changed(session_id=order.session_id)
    if order.user_id:
        invalidations += cart_changed(user_id=order.user_id)
    return invalidations


def order_status_changed(order, product_ids) -> list[Invalidation]:
    invalidations = order_changed(order)
    if product_ids:
        invalidations.append(Invalidation("products"))
        invalidations += [Invalidation("product", str(pid)) for pid in product_ids]
        invalidations.append(Invalidation("inventory-products", str(order.store_id)))
    return invalidations


def return_changed(return_request) -> list[Invalidation]:
    invalidations = [Invalidation("order", str(return_request.order_id))]
    if return_request.user_id:
        invalidations.append(Invalidation("returns", str(return_request.user_id)))
    if return_request.store_id:
        invalidations.append(Invalidation("inventory-returns", str(return_request.store_id)))
    return invalidations


def user_resource_changed(resource: str, user_id) -> list[Invalidation]:
    return [Invalidation(resource, str(user_id))]


def stores_changed() -> list[Invalidation]:
    return [Invalidation("stores")]
