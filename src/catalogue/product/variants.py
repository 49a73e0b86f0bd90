"""Variant management: commands and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.domain import catalogue
from catalogue.product.product import Product

_VARIANT_FIELDS = (
    "name",
    "sku",
    "price",
    "stock_quantity",
    "is_default",
    "flavor",
    "size",
    "type",
    "description",
    "is_available",
    "attributes",
)


@catalogue.command(part_of="Product")
class AddVariant:
    product_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    price: Float(required=True, min_value=0)
    sku: String(max_length=100)
    stock_quantity: Integer(default=0, min_value=0)
    is_default: Boolean(default=False)
    flavor: String(max_length=100)
    size: String(max_length=100)
    type: String(max_length=100)
    description: Text(sanitize=False)
    is_available: Boolean(default=True)
    attributes: Text(sanitize=False)


@catalogue.command(part_of="Product")
class UpdateVariant:
    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    name: String(max_length=255)
    price: Float(min_value=0)
    sku: String(max_length=100)
    stock_quantity: Integer(min_value=0)
    is_default: Boolean()
    flavor: String(max_length=100)
    size: String(max_length=100)
    type: String(max_length=100)
    description: Text(sanitize=False)
    is_available: Boolean()
    attributes: Text(sanitize=False)


@catalogue.command(part_of="Product")
class RemoveVariant:
    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)


@catalogue.command_handler(part_of=Product)
class ManageVariantsHandler:
    @handle(AddVariant)
    def add_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        attrs = None
        if command.attributes:
            try:
                attrs = json.loads(command.attributes)
            except json.JSONDecodeError:
                raise ValidationError({"attributes": ["Attributes must be valid JSON"]}) from None
            if not isinstance(attrs, dict):
                raise ValidationError({"attributes": ["Attributes must be an object"]})

        variant = product.add_variant(
            name=command.name,
            price=command.price,
            sku=command.sku,
            stock_quantity=command.stock_quantity,
            is_default=command.is_default,
            flavor=command.flavor,
            size=command.size,
            type=command.type,
            description=command.description,
            is_available=command.is_available,
            attributes=attrs,
        )
        repo.add(product)
        return str(variant.id)

    @handle(UpdateVariant)
    def update_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        changes = {name: getattr(command, name) for name in _VARIANT_FIELDS if getattr(command, name) is not None}
        product.update_variant(command.variant_id, **changes)
        repo.add(product)

    @handle(RemoveVariant)
    def remove_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.remove_variant(command.variant_id)
        repo.add(product)
