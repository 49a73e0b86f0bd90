"""Product aggregate root with variant, image, tag and allergen entities."""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
)

from catalogue.domain import catalogue
from catalogue.product.events import (
    AllergenDeclared,
    AllergenRemoved,
    MainImageChanged,
    ProductCreated,
    ProductDeleted,
    ProductImageAdded,
    ProductImageRemoved,
    ProductTagged,
    ProductUntagged,
    ProductUpdated,
    StockAdjusted,
    VariantAdded,
    VariantRemoved,
    VariantUpdated,
)
from catalogue.shared.slug import resolve_slug, validate_slug

MAX_IMAGES = 10

_UNSET = object()


def _now():
    return datetime.now(UTC)


def _price(value, field="base_price"):
    if value is None:
        raise ValidationError({field: ["Price is required"]})
    if value < 0:
        raise ValidationError({field: ["Price cannot be negative"]})
    return round(float(value), 2)


def _attributes_json(attributes):
    if attributes is None or isinstance(attributes, str):
        return attributes
    return json.dumps(attributes)


@catalogue.entity(part_of="Product")
class ProductVariant:
    """A purchasable option of a bake: a size, a flavour, a style."""

    name: String(required=True, max_length=255)
    sku: String(max_length=100)
    price: Float(required=True, min_value=0)
    stock_quantity: Integer(default=0, min_value=0)
    is_default: Boolean(default=False)
    flavor: String(max_length=100)
    size: String(max_length=100)
    type: String(max_length=100)
    description: Text(sanitize=False)
    is_available: Boolean(default=True)
    attributes: Text(sanitize=False)


@catalogue.entity(part_of="Product")
class ProductImage:
    url: String(required=True, max_length=500)
    alt_text: String(max_length=255)
    sort_order: Integer(default=0)
    is_main: Boolean(default=False)


@catalogue.entity(part_of="Product")
class ProductTag:
    tag_id: Identifier(required=True)


@catalogue.entity(part_of="Product")
class ProductAllergen:
    allergen_id: Identifier(required=True)
    contains_allergen: Boolean(default=True)
    may_contain: Boolean(default=False)


@catalogue.aggregate
class Product:
    """A bake on the menu.

    Variants, images, tag links and allergen declarations live inside the
    aggregate. Tags and allergens themselves are separate aggregates and are
    only referenced by id.
    """

    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=255)
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
    variants: HasMany(ProductVariant)
    images: HasMany(ProductImage)
    tags: HasMany(ProductTag)
    allergens: HasMany(ProductAllergen)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def slice_range_must_be_ordered(self):
        if self.min_slices and self.max_slices and self.min_slices > self.max_slices:
            raise ValidationError({"max_slices": ["Maximum slices must be greater than or equal to minimum slices"]})

    @invariant.post
    def description_within_limit(self):
        if self.description and len(self.description) > 10000:
            raise ValidationError({"description": ["Description too long"]})

    @invariant.post
    def images_cannot_exceed_maximum(self):
        if len(self.images) > MAX_IMAGES:
            raise ValidationError({"images": [f"Cannot have more than {MAX_IMAGES} images"]})

    @invariant.post
    def exactly_one_main_image_when_images_exist(self):
        if not self.images:
            return
        if len([i for i in self.images if i.is_main]) != 1:
            raise ValidationError({"images": ["Exactly one image must be marked as main"]})

    @invariant.post
    def at_most_one_default_variant(self):
        if len([v for v in self.variants if v.is_default]) > 1:
            raise ValidationError({"variants": ["Only one variant can be the default"]})

    @invariant.post
    def variant_skus_must_be_unique(self):
        skus = [v.sku for v in self.variants if v.sku]
        if len(skus) != len(set(skus)):
            raise ValidationError({"variants": ["Variant SKU must be unique within a product"]})

    @invariant.post
    def links_must_be_unique(self):
        tag_ids = [str(t.tag_id) for t in self.tags]
        if len(tag_ids) != len(set(tag_ids)):
            raise ValidationError({"tags": ["Tag is already linked to this product"]})
        allergen_ids = [str(a.allergen_id) for a in self.allergens]
        if len(allergen_ids) != len(set(allergen_ids)):
            raise ValidationError({"allergens": ["Allergen is already declared for this product"]})

    @classmethod
    def create(
        cls,
        name,
        base_price,
        slug=None,
        description=None,
        short_description=None,
        category_id=None,
        is_active=True,
        stock_quantity=0,
        min_slices=None,
        max_slices=None,
        serving_size=None,
        preparation_time=None,
    ):
        now = _now()
        product = cls(
            name=name,
            slug=resolve_slug(name, slug),
            description=description,
            short_description=short_description,
            category_id=category_id,
            base_price=_price(base_price),
            is_active=is_active,
            stock_quantity=stock_quantity or 0,
            min_slices=min_slices,
            max_slices=max_slices,
            serving_size=serving_size,
            preparation_time=preparation_time,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                slug=product.slug,
                category_id=category_id,
                base_price=product.base_price,
                is_active=product.is_active,
                stock_quantity=product.stock_quantity,
                created_at=now,
            )
        )
        return product

    def update_details(self, **changes):
        """Apply a partial update. Only keys present in ``changes`` are touched."""
        previous_category_id = self.category_id
        allowed = {
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
        }
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError({"product": [f"Unknown fields: {', '.join(sorted(unknown))}"]})

        if "slug" in changes and changes["slug"] is not None:
            changes["slug"] = validate_slug(changes["slug"])
        if "base_price" in changes:
            changes["base_price"] = _price(changes["base_price"])

        with atomic_change(self):
            for field_name, value in changes.items():
                setattr(self, field_name, value)

        now = _now()
        self.updated_at = now

        self.raise_(
            ProductUpdated(
                product_id=self.id,
                name=self.name,
                slug=self.slug,
                category_id=self.category_id,
                previous_category_id=previous_category_id,
                base_price=self.base_price,
                is_active=self.is_active,
                updated_at=now,
            )
        )

    def mark_deleted(self):
        self.raise_(
            ProductDeleted(
                product_id=self.id,
                category_id=self.category_id,
                deleted_at=_now(),
            )
        )

    def adjust_stock(self, quantity_change):
        previous = self.stock_quantity or 0
        new_quantity = max(0, previous + quantity_change)
        self.stock_quantity = new_quantity
        self.updated_at = _now()

        self.raise_(
            StockAdjusted(
                product_id=self.id,
                previous_quantity=previous,
                new_quantity=new_quantity,
            )
        )
        return new_quantity

    # Variants

    def _variant(self, variant_id):
        variant = next((v for v in self.variants if str(v.id) == str(variant_id)), None)
        if variant is None:
            raise ValidationError({"variants": [f"Variant {variant_id} not found"]})
        return variant

    def _demote_defaults(self, keep=None):
        for variant in self.variants:
            if variant.is_default and variant is not keep:
                variant.is_default = False

    def add_variant(
        self,
        name,
        price,
        sku=None,
        stock_quantity=0,
        is_default=False,
        flavor=None,
        size=None,
        type=None,
        description=None,
        is_available=True,
        attributes=None,
    ):
        if sku and any(v.sku == sku for v in self.variants):
            raise ValidationError({"sku": ["Variant SKU must be unique within a product"]})

        with atomic_change(self):
            if is_default:
                self._demote_defaults()

            variant = ProductVariant(
                name=name,
                sku=sku,
                price=_price(price, "price"),
                stock_quantity=stock_quantity or 0,
                is_default=is_default,
                flavor=flavor,
                size=size,
                type=type,
                description=description,
                is_available=is_available,
                attributes=_attributes_json(attributes),
            )
            self.add_variants(variant)

        self.updated_at = _now()

        self.raise_(
            VariantAdded(
                product_id=self.id,
                variant_id=variant.id,
                name=variant.name,
                sku=variant.sku,
                price=variant.price,
                is_default=variant.is_default,
            )
        )
        return variant

    def update_variant(self, variant_id, **changes):
        variant = self._variant(variant_id)

        if "sku" in changes and changes["sku"]:
            if any(v.sku == changes["sku"] and v is not variant for v in self.variants):
                raise ValidationError({"sku": ["Variant SKU must be unique within a product"]})
        if "price" in changes:
            changes["price"] = _price(changes["price"], "price")
        if "attributes" in changes:
            changes["attributes"] = _attributes_json(changes["attributes"])

        with atomic_change(self):
            if changes.get("is_default"):
                self._demote_defaults(keep=variant)
            for field_name, value in changes.items():
                setattr(variant, field_name, value)

        self.updated_at = _now()

        self.raise_(
            VariantUpdated(
                product_id=self.id,
                variant_id=variant.id,
                name=variant.name,
                price=variant.price,
                is_default=variant.is_default,
                is_available=variant.is_available,
            )
        )
        return variant

    def remove_variant(self, variant_id):
        variant = self._variant(variant_id)
        self.remove_variants(variant)
        self.updated_at = _now()

        self.raise_(VariantRemoved(product_id=self.id, variant_id=variant.id))

    # Images

    def _image(self, image_id):
        image = next((i for i in self.images if str(i.id) == str(image_id)), None)
        if image is None:
            raise ValidationError({"images": [f"Image {image_id} not found"]})
        return image

    def add_image(self, url, alt_text=None, sort_order=0, is_main=False):
        if len(self.images) >= MAX_IMAGES:
            raise ValidationError({"images": [f"Cannot have more than {MAX_IMAGES} images"]})

        with atomic_change(self):
            # First image is always main
            if not self.images:
                is_main = True

            if is_main:
                for img in self.images:
                    if img.is_main:
                        img.is_main = False

            image = ProductImage(
                url=url,
                alt_text=alt_text,
                sort_order=sort_order or 0,
                is_main=is_main,
            )
            self.add_images(image)

        self.updated_at = _now()

        self.raise_(
            ProductImageAdded(
                product_id=self.id,
                image_id=image.id,
                url=url,
                is_main=is_main,
            )
        )
        return image

    def set_main_image(self, image_id):
        image = self._image(image_id)
        previous = next((i for i in self.images if i.is_main), None)
        if previous is image:
            return

        with atomic_change(self):
            if previous is not None:
                previous.is_main = False
            image.is_main = True

        self.updated_at = _now()

        self.raise_(
            MainImageChanged(
                product_id=self.id,
                image_id=image.id,
                previous_image_id=previous.id if previous is not None else None,
            )
        )

    def remove_image(self, image_id):
        image = self._image(image_id)
        was_main = image.is_main

        with atomic_change(self):
            self.remove_images(image)
            if was_main and self.images:
                successor = min(self.images, key=lambda i: i.sort_order or 0)
                successor.is_main = True

        self.updated_at = _now()

        self.raise_(ProductImageRemoved(product_id=self.id, image_id=image_id))

    # Tags and allergens

    def has_tag(self, tag_id):
        return any(str(t.tag_id) == str(tag_id) for t in self.tags)

    def tag(self, tag_id):
        if self.has_tag(tag_id):
            raise ValidationError({"tags": ["Tag is already linked to this product"]})

        self.add_tags(ProductTag(tag_id=tag_id))
        self.updated_at = _now()
        self.raise_(ProductTagged(product_id=self.id, tag_id=tag_id))

    def untag(self, tag_id):
        link = next((t for t in self.tags if str(t.tag_id) == str(tag_id)), None)
        if link is None:
            raise ValidationError({"tags": ["Tag is not linked to this product"]})

        self.remove_tags(link)
        self.updated_at = _now()
        self.raise_(ProductUntagged(product_id=self.id, tag_id=tag_id))

    def declare_allergen(self, allergen_id, contains_allergen=True, may_contain=False):
        existing = next((a for a in self.allergens if str(a.allergen_id) == str(allergen_id)), None)
        if existing is not None:
            existing.contains_allergen = contains_allergen
            existing.may_contain = may_contain
        else:
            self.add_allergens(
                ProductAllergen(
                    allergen_id=allergen_id,
                    contains_allergen=contains_allergen,
                    may_contain=may_contain,
                )
            )

        self.updated_at = _now()
        self.raise_(
            AllergenDeclared(
                product_id=self.id,
                allergen_id=allergen_id,
                contains_allergen=contains_allergen,
                may_contain=may_contain,
            )
        )

    def remove_allergen(self, allergen_id):
        link = next((a for a in self.allergens if str(a.allergen_id) == str(allergen_id)), None)
        if link is None:
            raise ValidationError({"allergens": ["Allergen is not declared for this product"]})

        self.remove_allergens(link)
        self.updated_at = _now()
        self.raise_(AllergenRemoved(product_id=self.id, allergen_id=allergen_id))
