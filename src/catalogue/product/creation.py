"""Product creation: command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.category.category import Category
from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.shared.slug import ensure_unique_slug, resolve_slug
from shared.utils.queries import fetch_first

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    slug: String(max_length=255)
    description: Text(sanitize=False)
    short_description: String(max_length=1000)
    category_id: Identifier()
    base_price: Float(required=True, min_value=0)
    is_active: Boolean(default=True)
    stock_quantity: Integer(default=0, min_value=0)
    min_slices: Integer(min_value=1)
    max_slices: Integer(min_value=1)
    serving_size: String(max_length=255)
    preparation_time: String(max_length=255)


def ensure_category_exists(category_id):
    if category_id is None:
        return
    if fetch_first(Category, id=category_id) is None:
        raise ValidationError({"category_id": ["Category not found"]})


@catalogue.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        slug = resolve_slug(command.name, command.slug)
        ensure_unique_slug(Product, slug)
        ensure_category_exists(command.category_id)

        product = Product.create(
            name=command.name,
            slug=slug,
            description=command.description,
            short_description=command.short_description,
            category_id=command.category_id,
            base_price=command.base_price,
            is_active=command.is_active,
            stock_quantity=command.stock_quantity,
            min_slices=command.min_slices,
            max_slices=command.max_slices,
            serving_size=command.serving_size,
            preparation_time=command.preparation_time,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("Product created", product_id=str(product.id), slug=product.slug)
        return str(product.id)
