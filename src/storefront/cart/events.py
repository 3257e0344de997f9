"""Domain events for the CartItem aggregate."""

from protean.fields import Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="CartItem")
class CartItemAdded:
    """A product entered a cart, or an existing row's quantity grew."""

    __version__ = "v1"

    cart_item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    session_id = String()
    user_id = Identifier()
    requested = Integer(required=True)
    quantity = Integer(required=True)


@storefront.event(part_of="CartItem")
class CartQuantityChanged:
    __version__ = "v1"

    cart_item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="CartItem")
class CartItemReassigned:
    """A session cart row now belongs to a signed-in user."""

    __version__ = "v1"

    cart_item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    session_id = String(required=True)
    user_id = Identifier(required=True)
