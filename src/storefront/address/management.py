"""Address book management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.address.address_book import AddressBook
from storefront.domain import storefront


def address_book_for(user_id) -> AddressBook | None:
    repo = current_domain.repository_for(AddressBook)
    return repo._dao.query.filter(user_id=str(user_id)).all().first


def _existing_book(user_id) -> AddressBook:
    book = address_book_for(user_id)
    if book is None:
        raise ObjectNotFoundError(f"No saved addresses for user {user_id}")
    return book


@storefront.command(part_of="AddressBook")
class AddAddress:
    user_id = Identifier(required=True)
    label = String(max_length=50, default="Home")
    full_name = String(required=True, max_length=255)
    phone = String(required=True, max_length=30)
    address = Text(required=True)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=12)
    is_default = Boolean(default=False)


@storefront.command(part_of="AddressBook")
class UpdateAddress:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)
    label = String(max_length=50)
    full_name = String(max_length=255)
    phone = String(max_length=30)
    address = Text()
    city = String(max_length=100)
    state = String(max_length=100)
    pincode = String(max_length=12)


@storefront.command(part_of="AddressBook")
class RemoveAddress:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.command(part_of="AddressBook")
class SetDefaultAddress:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.command_handler(part_of=AddressBook)
class AddressBookHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = address_book_for(command.user_id) or AddressBook.open_for(command.user_id)
        address = book.add_address(
            is_default=command.is_default,
            label=command.label,
            full_name=command.full_name,
            phone=command.phone,
            address=command.address,
            city=command.city,
            state=command.state,
            pincode=command.pincode,
        )
        repo.add(book)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = _existing_book(command.user_id)
        book.update_address(
            command.address_id,
            label=command.label,
            full_name=command.full_name,
            phone=command.phone,
            address=command.address,
            city=command.city,
            state=command.state,
            pincode=command.pincode,
        )
        repo.add(book)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = _existing_book(command.user_id)
        book.remove_address(command.address_id)
        repo.add(book)

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        repo = current_domain.repository_for(AddressBook)
        book = _existing_book(command.user_id)
        book.set_default(command.address_id)
        repo.add(book)
