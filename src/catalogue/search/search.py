"""Storefront product search: text, price, slice, tag, allergen and variant filters."""

from dataclasses import dataclass, field
from enum import Enum

from protean.exceptions import ValidationError

from catalogue.category.category import Category
from catalogue.product.product import Product
from catalogue.product.queries import enrich
from shared.utils.queries import fetch_all, fetch_first, sort_key_datetime


class SortField(Enum):
    PRICE = "price"
    NAME = "name"
    CREATED_AT = "created_at"
    POPULARITY = "popularity"


@dataclass
class ProductFilters:
    query: str | None = None
    category_id: str | None = None
    category_slug: str | None = None
    price_min: float | None = None
    price_max: float | None = None
    min_slices: int | None = None
    max_slices: int | None = None
    in_stock: bool | None = None
    is_active: bool = True
    tags: list[str] = field(default_factory=list)
    allergen_free: list[str] = field(default_factory=list)
    flavor: str | None = None
    size: str | None = None
    type: str | None = None

    def validate(self):
        if self.price_min is not None and self.price_min < 0:
            raise ValidationError({"price_min": ["Minimum price cannot be negative"]})
        if self.price_min is not None and self.price_max is not None and self.price_min > self.price_max:
            raise ValidationError({"price_min": ["Minimum price must be less than or equal to maximum price"]})
        if self.query and len(self.query) > 255:
            raise ValidationError({"query": ["Search query too long"]})
        return self


def _variant_matches(product: Product, filters: ProductFilters) -> bool:
    wanted = {name: getattr(filters, name) for name in ("flavor", "size", "type") if getattr(filters, name)}
    if not wanted:
        return True
    return any(
        v.is_available and all(getattr(v, name) == value for name, value in wanted.items()) for v in product.variants
    )


def _matches(product: Product, filters: ProductFilters, category_id: str | None) -> bool:
    if filters.is_active is not None and product.is_active != filters.is_active:
        return False
    if category_id and str(product.category_id) != str(category_id):
        return False

    if filters.query:
        needle = filters.query.lower()
        haystacks = (product.name, product.description, product.short_description)
        if not any(h and needle in h.lower() for h in haystacks):
            return False

    price = product.base_price or 0.0
    if filters.price_min is not None and price < filters.price_min:
        return False
    if filters.price_max is not None and price > filters.price_max:
        return False

    if filters.min_slices is not None and product.min_slices is not None and product.min_slices < filters.min_slices:
        return False
    if filters.max_slices is not None and product.max_slices is not None and product.max_slices > filters.max_slices:
        return False

    if filters.in_stock and (product.stock_quantity or 0) < 1:
        return False

    if filters.tags:
        linked = {str(t.tag_id) for t in product.tags}
        if not {str(t) for t in filters.tags} <= linked:
            return False

    if filters.allergen_free:
        contains = {str(a.allergen_id) for a in product.allergens if a.contains_allergen}
        if contains & {str(a) for a in filters.allergen_free}:
            return False

    return _variant_matches(product, filters)


def _resolve_category(filters: ProductFilters) -> tuple[str | None, bool]:
    """Category id to filter on, and False when a slug names no category."""
    if filters.category_id:
        return filters.category_id, True
    if filters.category_slug:
        category = fetch_first(Category, slug=filters.category_slug)
        if category is None:
            return None, False
        return str(category.id), True
    return None, True


def _filtered(filters: ProductFilters) -> list[Product]:
    filters.validate()
    category_id, found = _resolve_category(filters)
    if not found:
        return []
    base = fetch_all(Product, is_active=filters.is_active) if filters.is_active is not None else fetch_all(Product)
    return [p for p in base if _matches(p, filters, category_id)]


def _sort(products: list[Product], sort: str, direction: str) -> list[Product]:
    try:
        sort_field = SortField(sort)
    except ValueError:
        raise ValidationError({"sort": [f"Unknown sort field '{sort}'"]}) from None
    if direction not in ("asc", "desc"):
        raise ValidationError({"direction": ["Direction must be 'asc' or 'desc'"]})

    if sort_field is SortField.PRICE:
        key = lambda p: p.base_price or 0.0  # noqa: E731
    elif sort_field is SortField.NAME:
        key = lambda p: p.name.lower()  # noqa: E731
    else:
        # popularity has no sales signal yet; newest stands in for it
        key = lambda p: sort_key_datetime(p.created_at)  # noqa: E731
    return sorted(products, key=key, reverse=direction == "desc")


def search_products(
    filters: ProductFilters | None = None,
    sort: str = "created_at",
    direction: str = "desc",
    limit: int = 20,
    offset: int = 0,
) -> dict:
    filters = filters or ProductFilters()
    products = _sort(_filtered(filters), sort, direction)
    page = products[offset : offset + limit]
    return {
        "products": enrich(page),
        "total": len(products),
        "limit": limit,
        "offset": offset,
        "has_more": offset + limit < len(products),
    }


def product_count(filters: ProductFilters | None = None) -> int:
    return len(_filtered(filters or ProductFilters()))
