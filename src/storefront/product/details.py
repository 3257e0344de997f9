"""Product detail edits: command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import EDITABLE_FIELDS, Product


@storefront.command(part_of="Product")
class UpdateProductDetails:
    """Partial update; fields left unset keep their current value."""

    product_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    price = String(max_length=20)
    images = Text()  # JSON array of image URLs
    video_url = String(max_length=500)
    fabric = String(max_length=100)
    color = String(max_length=100)
    occasion = String(max_length=100)
    category = String(max_length=100)


@storefront.command_handler(part_of=Product)
class UpdateProductDetailsHandler:
    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(**{field: getattr(command, field) for field in EDITABLE_FIELDS})
        repo.add(product)
