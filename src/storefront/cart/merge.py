"""Session-to-user cart reconciliation at sign-in: command and handler.

Rows for products the user does not already have move over as they are.
When both carts hold the same product the quantities are summed and clamped
to the product's sellable stock, and the session row is dropped. Products
that have sold out leave both carts.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import CartItem
from storefront.cart.lookup import cart_rows
from storefront.domain import logger, storefront
from storefront.product.product import Product


@storefront.command(part_of="CartItem")
class MergeSessionCart:
    session_id = String(required=True, max_length=255)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=CartItem)
class MergeSessionCartHandler:
    @handle(MergeSessionCart)
    def merge_session_cart(self, command):
        repo = current_domain.repository_for(CartItem)
        product_repo = current_domain.repository_for(Product)

        user_rows = {str(row.product_id): row for row in cart_rows(user_id=command.user_id)}
        merged = 0

        for row in cart_rows(session_id=command.session_id):
            try:
                product = product_repo.get(row.product_id)
            except ObjectNotFoundError:
                repo._dao.delete(row)
                continue

            if product.in_stock < 1:
                # Sold out: neither cart keeps the product
                repo._dao.delete(row)
                stale = user_rows.pop(str(row.product_id), None)
                if stale is not None:
                    repo._dao.delete(stale)
                continue

            existing = user_rows.get(str(row.product_id))
            if existing is not None:
                existing.absorb(row.quantity, available=product.in_stock)
                repo.add(existing)
                repo._dao.delete(row)
            else:
                row.reassign_to(command.user_id)
                if row.quantity > product.in_stock:
                    row.set_quantity(product.in_stock, available=product.in_stock)
                repo.add(row)
                user_rows[str(row.product_id)] = row
            merged += 1

        logger.info(
            "session_cart_merged",
            session_id=command.session_id,
            user_id=str(command.user_id),
            rows=merged,
        )
        return merged
