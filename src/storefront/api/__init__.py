from storefront.api.routes import (
    address_router,
    cart_router,
    catalogue_router,
    order_router,
    return_router,
    wishlist_router,
)
from storefront.api.seller import admin_router, inventory_router

ROUTERS = (
    catalogue_router,
    cart_router,
    order_router,
    return_router,
    address_router,
    wishlist_router,
    inventory_router,
    admin_router,
)

__all__ = [
    "ROUTERS",
    "address_router",
    "admin_router",
    "cart_router",
    "catalogue_router",
    "inventory_router",
    "order_router",
    "return_router",
    "wishlist_router",
]
