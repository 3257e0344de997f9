"""Cart item management: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import CartItem
from storefront.cart.lookup import find_row
from storefront.domain import logger, storefront
from storefront.product.lookup import find_product
from storefront.product.product import Product


@storefront.command(part_of="CartItem")
class AddToCart:
    product_id = String(required=True, max_length=50)  # Internal or tracking id
    quantity = Integer(required=True, min_value=1, default=1)
    session_id = String(max_length=255)
    user_id = Identifier()


@storefront.command(part_of="CartItem")
class SetCartQuantity:
    cart_item_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="CartItem")
class AdjustCartQuantity:
    cart_item_id = Identifier(required=True)
    delta = Integer(required=True)


@storefront.command(part_of="CartItem")
class RemoveFromCart:
    cart_item_id = Identifier(required=True)


@storefront.command_handler(part_of=CartItem)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        if not command.session_id and not command.user_id:
            raise ValidationError({"owner": ["A session id or a signed-in user is required"]})

        product = find_product(command.product_id)
        product_id = str(product.id)
        repo = current_domain.repository_for(CartItem)

        row = find_row(product_id, session_id=command.session_id, user_id=command.user_id)
        if row is not None:
            row.increase(command.quantity, available=product.in_stock)
        else:
            row = CartItem.add(
                product_id=product_id,
                quantity=command.quantity,
                available=product.in_stock,
                session_id=command.session_id,
                user_id=command.user_id,
            )
        repo.add(row)
        return str(row.id)

    @handle(SetCartQuantity)
    def set_cart_quantity(self, command):
        repo = current_domain.repository_for(CartItem)
        row = repo.get(command.cart_item_id)
        product = current_domain.repository_for(Product).get(row.product_id)
        row.set_quantity(command.quantity, available=product.in_stock)
        repo.add(row)
        return str(row.id)

    @handle(AdjustCartQuantity)
    def adjust_cart_quantity(self, command):
        """Returns the row id, or None when the adjustment removed the row."""
        repo = current_domain.repository_for(CartItem)
        row = repo.get(command.cart_item_id)
        product = current_domain.repository_for(Product).get(row.product_id)

        if not row.adjust(command.delta, available=product.in_stock):
            repo._dao.delete(row)
            logger.info("cart_item_removed", cart_item_id=str(row.id), reason="quantity_reached_zero")
            return None

        repo.add(row)
        return str(row.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(CartItem)
        row = repo.get(command.cart_item_id)
        repo._dao.delete(row)
        logger.info("cart_item_removed", cart_item_id=str(row.id), reason="requested")
