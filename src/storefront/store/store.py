"""Store aggregate: a physical saree store and the tenant that owns products.

Every product belongs to one store. Stores double as fulfillment locations:
a product's stock can be allocated to any active store's shelves.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from storefront.domain import storefront
from storefront.store.events import StoreDeactivated, StoreRegistered


@storefront.aggregate
class Store:
    name = String(required=True, max_length=255)
    email = String(required=True, max_length=254, unique=True)
    phone = String(max_length=30)
    city = String(max_length=100)
    owner_id = Identifier()
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, name, email, owner_id=None, phone=None, city=None):
        if "@" not in email:
            raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

        now = datetime.now(UTC)
        store = cls(
            name=name.strip(),
            email=email.strip().lower(),
            owner_id=owner_id,
            phone=phone,
            city=city,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        store.raise_(
            StoreRegistered(
                store_id=str(store.id),
                name=store.name,
                email=store.email,
                owner_id=owner_id,
                registered_at=now,
            )
        )
        return store

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"status": ["Store is already inactive"]})

        now = datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self.raise_(StoreDeactivated(store_id=str(self.id), deactivated_at=now))
