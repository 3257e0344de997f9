"""Domain events for the AddressBook aggregate."""

from protean.fields import Identifier

from storefront.domain import storefront


@storefront.event(part_of="AddressBook")
class AddressAdded:
    __version__ = "v1"

    address_book_id = Identifier(required=True)
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.event(part_of="AddressBook")
class AddressRemoved:
    __version__ = "v1"

    address_book_id = Identifier(required=True)
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.event(part_of="AddressBook")
class DefaultAddressChanged:
    __version__ = "v1"

    address_book_id = Identifier(required=True)
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)
    previous_address_id = Identifier()
