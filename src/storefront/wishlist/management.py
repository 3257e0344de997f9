"""Wishlist management: commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.lookup import find_product
from storefront.wishlist.wishlist import Wishlist


def wishlist_for(user_id) -> Wishlist | None:
    repo = current_domain.repository_for(Wishlist)
    return repo._dao.query.filter(user_id=str(user_id)).all().first


@storefront.command(part_of="Wishlist")
class AddToWishlist:
    user_id = Identifier(required=True)
    product_id = String(required=True, max_length=50)  # Internal or tracking id


@storefront.command(part_of="Wishlist")
class RemoveFromWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Wishlist)
class WishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        product = find_product(command.product_id)
        repo = current_domain.repository_for(Wishlist)
        wishlist = wishlist_for(command.user_id) or Wishlist.open_for(command.user_id)
        wishlist.add(str(product.id))
        repo.add(wishlist)
        return str(product.id)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = wishlist_for(command.user_id) or Wishlist.open_for(command.user_id)
        wishlist.remove(command.product_id)
        repo.add(wishlist)
