"""Domain events for the Store aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Store")
class StoreRegistered:
    """A physical store joined the platform."""

    __version__ = "v1"

    store_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    owner_id = Identifier()
    registered_at = DateTime(required=True)


@storefront.event(part_of="Store")
class StoreDeactivated:
    """A store stopped accepting new stock allocations."""

    __version__ = "v1"

    store_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
