"""Read-side queries for product pages and the admin product list."""

import json

from protean.exceptions import ValidationError

from catalogue.allergen.allergen import Allergen
from catalogue.category.category import Category
from catalogue.product.product import Product
from catalogue.tag.tag import Tag, TagType
from shared.utils.queries import fetch_all, fetch_first, iso, money, sort_key_datetime

LOW_STOCK_THRESHOLD = 5

ADMIN_SORT_FIELDS = ("name", "created_at", "updated_at", "price")


def _variant_dict(variant) -> dict:
    return {
        "id": str(variant.id),
        "name": variant.name,
        "sku": variant.sku,
        "price": money(variant.price),
        "stock_quantity": variant.stock_quantity or 0,
        "is_default": variant.is_default,
        "flavor": variant.flavor,
        "size": variant.size,
        "type": variant.type,
        "description": variant.description,
        "is_available": variant.is_available,
        "attributes": json.loads(variant.attributes) if variant.attributes else None,
    }


def _image_dict(image) -> dict:
    return {
        "id": str(image.id),
        "url": image.url,
        "alt_text": image.alt_text,
        "sort_order": image.sort_order or 0,
        "is_main": image.is_main,
    }


class _Lookups:
    """Categories, tags and allergens indexed by id for enriching product rows."""

    def __init__(self):
        self.categories = {str(c.id): c for c in fetch_all(Category)}
        self.tags = {str(t.id): t for t in fetch_all(Tag)}
        self.allergens = {str(a.id): a for a in fetch_all(Allergen)}


def product_to_dict(product: Product, lookups: _Lookups | None = None) -> dict:
    lookups = lookups or _Lookups()
    category = lookups.categories.get(str(product.category_id)) if product.category_id else None

    variants = sorted(product.variants, key=lambda v: (not v.is_default, v.name))
    images = sorted(product.images, key=lambda i: (not i.is_main, i.sort_order or 0))

    tags = []
    for link in product.tags:
        tag = lookups.tags.get(str(link.tag_id))
        if tag is not None:
            tags.append({"id": str(tag.id), "name": tag.name, "type": tag.type, "color": tag.color})

    allergens = []
    for link in product.allergens:
        allergen = lookups.allergens.get(str(link.allergen_id))
        if allergen is not None:
            allergens.append(
                {
                    "id": str(allergen.id),
                    "name": allergen.name,
                    "severity": allergen.severity,
                    "contains_allergen": link.contains_allergen,
                    "may_contain": link.may_contain,
                }
            )

    return {
        "id": str(product.id),
        "name": product.name,
        "slug": product.slug,
        "description": product.description,
        "short_description": product.short_description,
        "category_id": str(product.category_id) if product.category_id else None,
        "category": {"id": str(category.id), "name": category.name, "slug": category.slug} if category else None,
        "base_price": money(product.base_price),
        "is_active": product.is_active,
        "stock_quantity": product.stock_quantity or 0,
        "min_slices": product.min_slices,
        "max_slices": product.max_slices,
        "serving_size": product.serving_size,
        "preparation_time": product.preparation_time,
        "variants": [_variant_dict(v) for v in variants],
        "images": [_image_dict(i) for i in images],
        "tags": tags,
        "allergens": allergens,
        "created_at": iso(product.created_at),
        "updated_at": iso(product.updated_at),
    }


def enrich(products) -> list[dict]:
    lookups = _Lookups()
    return [product_to_dict(p, lookups) for p in products]


def newest_first(products) -> list[Product]:
    return sorted(products, key=lambda p: sort_key_datetime(p.created_at), reverse=True)


def product_by_slug(slug: str) -> dict | None:
    product = fetch_first(Product, slug=slug)
    return product_to_dict(product) if product is not None else None


def product_by_id(product_id: str) -> dict | None:
    product = fetch_first(Product, id=product_id)
    return product_to_dict(product) if product is not None else None


def featured_products(limit: int = 8) -> list[dict]:
    products = [p for p in fetch_all(Product, is_active=True) if (p.stock_quantity or 0) > 0]
    return enrich(newest_first(products)[:limit])


def recommended_products(product_id: str, limit: int = 4) -> list[dict]:
    """Other active bakes in the same category or sharing a tag, best matches first."""
    product = fetch_first(Product, id=product_id)
    if product is None:
        return []

    tag_ids = {str(t.tag_id) for t in product.tags}
    candidates = []
    for other in fetch_all(Product, is_active=True):
        if str(other.id) == str(product.id):
            continue
        shared = len(tag_ids & {str(t.tag_id) for t in other.tags})
        same_category = product.category_id is not None and str(other.category_id) == str(product.category_id)
        if shared or same_category:
            candidates.append((shared, other))

    candidates.sort(key=lambda pair: (pair[0], sort_key_datetime(pair[1].created_at)), reverse=True)
    return enrich([other for _, other in candidates[:limit]])


def products_by_dietary_needs(tag_names=(), allergen_free=()) -> list[dict]:
    """Active products carrying every named dietary tag and none of the listed allergens."""
    wanted = {name.lower() for name in tag_names}
    dietary = {t.name.lower(): str(t.id) for t in fetch_all(Tag, type=TagType.DIETARY.value)}
    unknown = wanted - set(dietary)
    if unknown:
        return []

    required = {dietary[name] for name in wanted}
    excluded = {str(a) for a in allergen_free}

    matches = []
    for product in fetch_all(Product, is_active=True):
        linked = {str(t.tag_id) for t in product.tags}
        contains = {str(a.allergen_id) for a in product.allergens if a.contains_allergen}
        if required <= linked and not (contains & excluded):
            matches.append(product)
    return enrich(newest_first(matches))


def admin_products(
    search: str | None = None,
    category_id: str | None = None,
    is_active: bool | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    limit: int = 50,
    offset: int = 0,
) -> dict:
    if sort_by not in ADMIN_SORT_FIELDS:
        raise ValidationError({"sort_by": [f"Sort field must be one of: {', '.join(ADMIN_SORT_FIELDS)}"]})

    filters = {}
    if category_id:
        filters["category_id"] = category_id
    if is_active is not None:
        filters["is_active"] = is_active
    products = fetch_all(Product, **filters)

    if search:
        needle = search.lower()
        products = [
            p for p in products if needle in p.name.lower() or (p.description and needle in p.description.lower())
        ]

    sort_keys = {
        "name": lambda p: p.name.lower(),
        "price": lambda p: p.base_price or 0.0,
        "created_at": lambda p: sort_key_datetime(p.created_at),
        "updated_at": lambda p: sort_key_datetime(p.updated_at),
    }
    products.sort(key=sort_keys[sort_by], reverse=sort_order == "desc")

    page = products[offset : offset + limit]
    return {
        "products": enrich(page),
        "total": len(products),
        "limit": limit,
        "offset": offset,
        "has_more": offset + limit < len(products),
    }


def product_stats() -> dict:
    products = fetch_all(Product)
    active = [p for p in products if p.is_active]
    return {
        "total": len(products),
        "active": len(active),
        "low_stock": len([p for p in active if 0 < (p.stock_quantity or 0) <= LOW_STOCK_THRESHOLD]),
        "out_of_stock": len([p for p in active if (p.stock_quantity or 0) == 0]),
    }
