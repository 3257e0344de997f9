"""Tests for the AddressBook aggregate and its single-default rule."""

import pytest
from protean.exceptions import ObjectNotFoundError
from storefront.address.address_book import AddressBook
from storefront.address.events import AddressAdded, AddressRemoved, DefaultAddressChanged


def _by_id(book, address_id):
    return next(a for a in book.addresses if a.id == address_id)


def _details(label="Home", city="Mysuru"):
    return {
        "label": label,
        "full_name": "Divya Menon",
        "phone": "+91 93333 33333",
        "address": "22 Palace Road",
        "city": city,
        "state": "Karnataka",
        "pincode": "570001",
    }


class TestAddingAddresses:
    def test_first_address_becomes_default(self):
        book = AddressBook.open_for("user-001")
        address = book.add_address(**_details())
        assert address.is_default is True
        assert isinstance(book._events[-1], AddressAdded)

    def test_later_addresses_are_not_default(self):
        book = AddressBook.open_for("user-001")
        book.add_address(**_details())
        office = book.add_address(**_details(label="Office"))
        assert office.is_default is False

    def test_new_default_replaces_old(self):
        book = AddressBook.open_for("user-001")
        home = book.add_address(**_details())
        office = book.add_address(is_default=True, **_details(label="Office"))
        assert office.is_default is True
        assert _by_id(book, home.id).is_default is False
        assert book.default_address.id == office.id


class TestChangingAddresses:
    def test_set_default(self):
        book = AddressBook.open_for("user-001")
        home = book.add_address(**_details())
        office = book.add_address(**_details(label="Office"))

        book.set_default(office.id)

        assert book.default_address.id == office.id
        assert _by_id(book, home.id).is_default is False
        event = book._events[-1]
        assert isinstance(event, DefaultAddressChanged)
        assert event.previous_address_id == str(home.id)

    def test_removing_default_promotes_another(self):
        book = AddressBook.open_for("user-001")
        home = book.add_address(**_details())
        office = book.add_address(**_details(label="Office"))

        book.remove_address(home.id)

        assert len(book.addresses) == 1
        assert book.default_address.id == office.id
        assert isinstance(book._events[-1], AddressRemoved)

    def test_update_fields(self):
        book = AddressBook.open_for("user-001")
        home = book.add_address(**_details())
        book.update_address(home.id, city="Bengaluru", phone=None)
        assert _by_id(book, home.id).city == "Bengaluru"
        assert _by_id(book, home.id).phone == "+91 93333 33333"

    def test_unknown_address(self):
        book = AddressBook.open_for("user-001")
        with pytest.raises(ObjectNotFoundError):
            book.set_default("missing")
