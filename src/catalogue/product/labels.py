"""Linking tags and allergens to products: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain

from catalogue.allergen.allergen import Allergen
from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.tag.tag import Tag
from shared.utils.queries import fetch_first


@catalogue.command(part_of="Product")
class TagProduct:
    product_id: Identifier(required=True)
    tag_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class UntagProduct:
    product_id: Identifier(required=True)
    tag_id: Identifier(required=True)


@catalogue.command(part_of="Product")
class DeclareAllergen:
    product_id: Identifier(required=True)
    allergen_id: Identifier(required=True)
    contains_allergen: Boolean(default=True)
    may_contain: Boolean(default=False)


@catalogue.command(part_of="Product")
class RemoveAllergen:
    product_id: Identifier(required=True)
    allergen_id: Identifier(required=True)


def _ensure_exists(cls, record_id, field):
    if fetch_first(cls, id=record_id) is None:
        raise ValidationError({field: [f"{cls.__name__} not found"]})


@catalogue.command_handler(part_of=Product)
class ProductLabelsHandler:
    @handle(TagProduct)
    def tag_product(self, command):
        _ensure_exists(Tag, command.tag_id, "tag_id")
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.tag(command.tag_id)
        repo.add(product)

    @handle(UntagProduct)
    def untag_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.untag(command.tag_id)
        repo.add(product)

    @handle(DeclareAllergen)
    def declare_allergen(self, command):
        _ensure_exists(Allergen, command.allergen_id, "allergen_id")
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.declare_allergen(
            command.allergen_id,
            contains_allergen=command.contains_allergen,
            may_contain=command.may_contain,
        )
        repo.add(product)

    @handle(RemoveAllergen)
    def remove_allergen(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.remove_allergen(command.allergen_id)
        repo.add(product)
