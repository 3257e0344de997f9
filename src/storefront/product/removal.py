"""DeleteProduct: take a product off sale for good.

Orders keep their own snapshot of names and prices, so they are left alone.
Cart rows still pointing at the product are dropped with it.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.cart.cart import CartItem
from storefront.domain import logger, storefront
from storefront.product.product import Product


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class DeleteProductHandler:
    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        cart_dao = current_domain.repository_for(CartItem)._dao
        rows = cart_dao.query.filter(product_id=str(product.id)).limit(None).all().items
        for row in rows:
            cart_dao.delete(row)

        repo._dao.delete(product)
        logger.info("product_deleted", product_id=str(product.id), store_id=str(product.store_id), cart_rows=len(rows))
