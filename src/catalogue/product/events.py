"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Product")
class ProductCreated:
    """A new bake was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    category_id: Identifier()
    base_price: Float(required=True)
    is_active: Boolean(required=True)
    stock_quantity: Integer(required=True)
    created_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductUpdated:
    """Any of the product's descriptive, pricing or placement details changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    category_id: Identifier()
    previous_category_id: Identifier()
    base_price: Float(required=True)
    is_active: Boolean(required=True)
    updated_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class ProductDeleted:
    __version__ = 1

    product_id: Identifier(required=True)
    category_id: Identifier()
    deleted_at: DateTime(required=True)


@catalogue.event(part_of="Product")
class StockAdjusted:
    __version__ = 1

    product_id: Identifier(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)


@catalogue.event(part_of="Product")
class VariantAdded:
    """A size, flavour or style option was added to a product."""

    __version__ = 1

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    name: String(required=True)
    sku: String()
    price: Float(required=True)
    is_default: Boolean(required=True)


@catalogue.event(part_of="Product")
class VariantUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    is_default: Boolean(required=True)
    is_available: Boolean(required=True)


@catalogue.event(part_of="Product")
class VariantRemoved:
    __version__ = 1

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)


@catalogue.event(part_of="Product")
class ProductImageAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    image_id: Identifier(required=True)
    url: String(required=True)
    is_main: Boolean(required=True)


@catalogue.event(part_of="Product")
class MainImageChanged:
    __version__ = 1

    product_id: Identifier(required=True)
    image_id: Identifier(required=True)
    previous_image_id: Identifier()


@catalogue.event(part_of="Product")
class ProductImageRemoved:
    __version__ = 1

    product_id: Identifier(required=True)
    image_id: Identifier(required=True)


@catalogue.event(part_of="Product")
class ProductTagged:
    __version__ = 1

    product_id: Identifier(required=True)
    tag_id: Identifier(required=True)


@catalogue.event(part_of="Product")
class ProductUntagged:
    __version__ = 1

    product_id: Identifier(required=True)
    tag_id: Identifier(required=True)


@catalogue.event(part_of="Product")
class AllergenDeclared:
    """The product was declared to contain, or possibly contain, an allergen."""

    __version__ = 1

    product_id: Identifier(required=True)
    allergen_id: Identifier(required=True)
    contains_allergen: Boolean(required=True)
    may_contain: Boolean(required=True)


@catalogue.event(part_of="Product")
class AllergenRemoved:
    __version__ = 1

    product_id: Identifier(required=True)
    allergen_id: Identifier(required=True)
