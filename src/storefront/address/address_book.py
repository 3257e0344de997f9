"""AddressBook aggregate: a user's saved shipping addresses.

Keeping every address inside one aggregate per user lets the "at most one
default" rule be checked on each change instead of hoping two writes line up.
The first address saved becomes the default.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, String, Text

from storefront.address.events import AddressAdded, AddressRemoved, DefaultAddressChanged
from storefront.domain import storefront

ADDRESS_FIELDS = ("label", "full_name", "phone", "address", "city", "state", "pincode")


@storefront.entity(part_of="AddressBook")
class Address:
    label = String(max_length=50, default="Home")
    full_name = String(required=True, max_length=255)
    phone = String(required=True, max_length=30)
    address = Text(required=True)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=12)
    is_default = Boolean(default=False)


@storefront.aggregate
class AddressBook:
    user_id = Identifier(required=True, unique=True)
    addresses = HasMany(Address)
    updated_at = DateTime()

    @invariant.post
    def at_most_one_default_address(self):
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) > 1:
            raise ValidationError({"addresses": ["Only one address can be the default"]})

    @classmethod
    def open_for(cls, user_id):
        return cls(user_id=user_id, updated_at=datetime.now(UTC))

    def _find(self, address_id) -> Address:
        address = next((a for a in self.addresses if str(a.id) == str(address_id)), None)
        if address is None:
            raise ObjectNotFoundError(f"Address {address_id} does not exist")
        return address

    @property
    def default_address(self) -> Address | None:
        return next((a for a in self.addresses if a.is_default), None)

    def add_address(self, is_default=False, **details) -> Address:
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for existing in self.addresses:
                    existing.is_default = False
            address = Address(is_default=is_default, **details)
            self.add_addresses(address)
            self.updated_at = datetime.now(UTC)

        self.raise_(
            AddressAdded(
                address_book_id=str(self.id),
                user_id=str(self.user_id),
                address_id=str(address.id),
            )
        )
        return address

    def update_address(self, address_id, **changes) -> Address:
        address = self._find(address_id)
        for field, value in changes.items():
            if field not in ADDRESS_FIELDS:
                raise ValidationError({"addresses": [f"Cannot update {field}"]})
            if value is not None:
                setattr(address, field, value)
        self.updated_at = datetime.now(UTC)
        return address

    def remove_address(self, address_id):
        address = self._find(address_id)
        was_default = address.is_default

        with atomic_change(self):
            self.remove_addresses(address)
            if was_default and self.addresses:
                self.addresses[0].is_default = True
            self.updated_at = datetime.now(UTC)

        self.raise_(
            AddressRemoved(
                address_book_id=str(self.id),
                user_id=str(self.user_id),
                address_id=str(address_id),
            )
        )

    def set_default(self, address_id):
        address = self._find(address_id)
        previous = self.default_address
        if previous is address:
            return

        with atomic_change(self):
            for existing in self.addresses:
                existing.is_default = False
            address.is_default = True
            self.updated_at = datetime.now(UTC)

        self.raise_(
            DefaultAddressChanged(
                address_book_id=str(self.id),
                user_id=str(self.user_id),
                address_id=str(address.id),
                previous_address_id=str(previous.id) if previous else None,
            )
        )
