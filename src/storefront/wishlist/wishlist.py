"""Wishlist aggregate: products a signed-in shopper saved for later."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier

from storefront.domain import storefront


@storefront.entity(part_of="Wishlist")
class WishlistEntry:
    product_id = Identifier(required=True)
    added_at = DateTime()


@storefront.aggregate
class Wishlist:
    user_id = Identifier(required=True, unique=True)
    entries = HasMany(WishlistEntry)

    @classmethod
    def open_for(cls, user_id):
        return cls(user_id=user_id)

    def contains(self, product_id) -> bool:
        return any(str(e.product_id) == str(product_id) for e in self.entries)

    def add(self, product_id):
        """Saving a product twice keeps a single entry."""
        if self.contains(product_id):
            return
        self.add_entries(WishlistEntry(product_id=product_id, added_at=datetime.now(UTC)))

    def remove(self, product_id):
        entry = next((e for e in self.entries if str(e.product_id) == str(product_id)), None)
        if entry is None:
            raise ValidationError({"product_id": ["Product is not in the wishlist"]})
        self.remove_entries(entry)
