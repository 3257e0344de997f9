"""CartItem aggregate: one row per (owner, product).

The owner is either an anonymous browser session or a signed-in user, never
both. Quantities are always kept between 1 and the product's sellable stock;
a row that would drop to zero is deleted instead.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from storefront.cart.events import CartItemAdded, CartItemReassigned, CartQuantityChanged
from storefront.domain import storefront


def ensure_available(available: int) -> None:
    if available < 1:
        raise ValidationError({"product_id": ["Product is out of stock"]})


@storefront.aggregate
class CartItem:
    session_id = String(max_length=255)  # Anonymous browser cart
    user_id = Identifier()  # Signed-in cart
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def must_have_exactly_one_owner(self):
        if bool(self.session_id) == bool(self.user_id):
            raise ValidationError({"owner": ["A cart item belongs to either a session or a user"]})

    @property
    def owner(self) -> dict:
        return {"user_id": str(self.user_id)} if self.user_id else {"session_id": self.session_id}

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def add(cls, product_id, quantity, available, session_id=None, user_id=None):
        """Create a row with ``quantity`` clamped to the ``available`` stock."""
        ensure_available(available)

        now = datetime.now(UTC)
        item = cls(
            session_id=None if user_id else session_id,
            user_id=user_id,
            product_id=product_id,
            quantity=min(quantity, available),
            added_at=now,
            updated_at=now,
        )
        item.raise_(
            CartItemAdded(
                cart_item_id=str(item.id),
                product_id=str(product_id),
                session_id=item.session_id,
                user_id=user_id,
                requested=quantity,
                quantity=item.quantity,
            )
        )
        return item

    # -------------------------------------------------------------------
    # Quantity changes
    # -------------------------------------------------------------------
    def _change_quantity(self, new_quantity):
        previous = self.quantity
        if new_quantity == previous:
            return
        self.quantity = new_quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartQuantityChanged(
                cart_item_id=str(self.id),
                product_id=str(self.product_id),
                previous_quantity=previous,
                new_quantity=new_quantity,
            )
        )

    def increase(self, quantity, available):
        """Add more of the same product; the result never exceeds stock."""
        ensure_available(available)
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        self._change_quantity(min(self.quantity + quantity, available))

    def set_quantity(self, quantity, available):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        ensure_available(available)
        self._change_quantity(min(quantity, available))

    def adjust(self, delta, available) -> bool:
        """Apply a relative change. Returns False when the row should be removed.

        Decreases are allowed even when the product has sold out.
        """
        target = self.quantity + delta
        if target < 1:
            return False
        if delta > 0:
            ensure_available(available)
        if available >= 1:
            target = min(target, available)
        self._change_quantity(target)
        return True

    def absorb(self, quantity, available):
        """Fold another cart's quantity of the same product into this row."""
        ensure_available(available)
        self._change_quantity(min(self.quantity + quantity, available))

    # -------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------
    def reassign_to(self, user_id):
        """Move a session row into a user's cart."""
        if self.user_id:
            raise ValidationError({"owner": ["Cart item already belongs to a user"]})

        session_id = self.session_id
        with atomic_change(self):
            self.user_id = user_id
            self.session_id = None
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemReassigned(
                cart_item_id=str(self.id),
                product_id=str(self.product_id),
                session_id=session_id,
                user_id=str(user_id),
            )
        )

    def belongs_to(self, session_id=None, user_id=None) -> bool:
        if self.user_id:
            return user_id is not None and str(self.user_id) == str(user_id)
        return session_id is not None and self.session_id == session_id
