"""Product image management: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product


@catalogue.command(part_of="Product")
class AddProductImage:
    product_id: Identifier(required=True)
    url: String(required=True, max_length=500)
    alt_text: String(max_length=255)
    sort_order: Integer(default=0)
    is_main: Boolean(default=False)


@catalogue.command(part_of="Product")
class SetMainImage:
    product_id: Identifier(required=True)
    image_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class RemoveProductImage:
    product_id: Identifier(required=True)
    image_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class ManageImagesHandler:
    @handle(AddProductImage)
    def add_image(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        image = product.add_image(
            url=command.url,
            alt_text=command.alt_text,
            sort_order=command.sort_order,
            is_main=command.is_main,
        )
        repo.add(product)
        return str(image.id)

    @handle(SetMainImage)
    def set_main_image(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_main_image(command.image_id)
        repo.add(product)

    @handle(RemoveProductImage)
    def remove_image(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.remove_image(command.image_id)
        repo.add(product)
