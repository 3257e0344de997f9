"""Store management: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.store.store import Store


@storefront.command(part_of="Store")
class RegisterStore:
    name = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    owner_id = Identifier()
    phone = String(max_length=30)
    city = String(max_length=100)


@storefront.command(part_of="Store")
class DeactivateStore:
    store_id = Identifier(required=True)


@storefront.command_handler(part_of=Store)
class StoreManagementHandler:
    @handle(RegisterStore)
    def register_store(self, command):
        repo = current_domain.repository_for(Store)

        email = command.email.strip().lower()
        if repo._dao.query.filter(email=email).all().items:
            raise ValidationError({"email": ["A store with this email already exists"]})

        store = Store.register(
            name=command.name,
            email=email,
            owner_id=command.owner_id,
            phone=command.phone,
            city=command.city,
        )
        repo.add(store)
        return str(store.id)

    @handle(DeactivateStore)
    def deactivate_store(self, command):
        repo = current_domain.repository_for(Store)
        store = repo.get(command.store_id)
        store.deactivate()
        repo.add(store)
