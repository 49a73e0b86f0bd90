"""Product detail and stock updates: commands and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.creation import ensure_category_exists
from catalogue.product.product import Product
from catalogue.shared.slug import ensure_unique_slug

_DETAIL_FIELDS = (
    "name",
    "slug",
    "description",
    "short_description",
    "category_id",
    "base_price",
    "is_active",
    "stock_quantity",
    "min_slices",
    "max_slices",
    "serving_size",
    "preparation_time",
)


@catalogue.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    slug: String(max_length=255)
    description: Text(sanitize=False)
    short_description: String(max_length=1000)
    category_id: Identifier()
    base_price: Float(min_value=0)
    is_active: Boolean()
    stock_quantity: Integer(min_value=0)
    min_slices: Integer(min_value=1)
    max_slices: Integer(min_value=1)
    serving_size: String(max_length=255)
    preparation_time: String(max_length=255)


@catalogue.command(part_of="Product")
class AdjustStock:
    product_id: Identifier(required=True)
    quantity_change: Integer(required=True)


@catalogue.command_handler(part_of=Product)
class UpdateProductHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        changes = {name: getattr(command, name) for name in _DETAIL_FIELDS if getattr(command, name) is not None}
        if "slug" in changes and changes["slug"] != product.slug:
            ensure_unique_slug(Product, changes["slug"], exclude_id=product.id)
        if "category_id" in changes:
            ensure_category_exists(changes["category_id"])

        product.update_details(**changes)
        repo.add(product)

    @handle(AdjustStock)
    def adjust_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        new_quantity = product.adjust_stock(command.quantity_change)
        repo.add(product)
        return new_quantity
