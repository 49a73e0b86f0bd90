"""Faceted filter aggregation for the storefront's product filters.

Each facet is a grouped count over the active products (optionally narrowed
to one category). Counting happens in Python over the loaded aggregates, so
the same code runs against the memory and the SQL providers.
"""

from collections import Counter
from collections.abc import Iterable

from catalogue.allergen.allergen import Allergen
from catalogue.category.category import Category
from catalogue.product.product import Product
from catalogue.tag.tag import Tag, TagType
from shared.utils.queries import fetch_all, money

VARIANT_FACETS = {"flavors": "flavor", "sizes": "size", "types": "type"}


def _base_products(category_id: str | None = None) -> list[Product]:
    if category_id:
        return fetch_all(Product, is_active=True, category_id=category_id)
    return fetch_all(Product, is_active=True)


def category_facets(products: Iterable[Product]) -> list[dict]:
    counts = Counter(str(p.category_id) for p in products if p.category_id)
    facets = [
        {"id": str(c.id), "name": c.name, "count": counts[str(c.id)]}
        for c in fetch_all(Category)
        if counts.get(str(c.id))
    ]
    return sorted(facets, key=lambda f: (-f["count"], f["name"]))


def _tag_counts(products: Iterable[Product]) -> Counter:
    return Counter(str(link.tag_id) for p in products for link in p.tags)


def _tag_option(tag: Tag, count: int) -> dict:
    return {"id": str(tag.id), "name": tag.name, "type": tag.type, "color": tag.color, "count": count}


def tag_facets(products: Iterable[Product], tag_type: str | None = None) -> list[dict]:
    counts = _tag_counts(products)
    tags = fetch_all(Tag, type=tag_type) if tag_type else fetch_all(Tag)
    facets = [_tag_option(t, counts[str(t.id)]) for t in tags if counts.get(str(t.id))]
    return sorted(facets, key=lambda f: (f["type"], -f["count"], f["name"]))


def allergen_facets(products: Iterable[Product]) -> list[dict]:
    # only declared allergens count; "may contain" traces are not a facet
    counts = Counter(str(link.allergen_id) for p in products for link in p.allergens if link.contains_allergen)
    facets = [
        {"id": str(a.id), "name": a.name, "severity": a.severity, "count": counts[str(a.id)]}
        for a in fetch_all(Allergen)
        if counts.get(str(a.id))
    ]
    return sorted(facets, key=lambda f: (-f["count"], f["name"]))


def price_range(products: Iterable[Product]) -> dict:
    prices = [p.base_price for p in products if p.base_price is not None]
    if not prices:
        return {"min": 0.0, "max": 0.0}
    return {"min": money(min(prices)), "max": money(max(prices))}


def variant_facets(products: Iterable[Product], attribute: str) -> list[dict]:
    """Distinct products per value of an available variant's ``attribute``."""
    counts = Counter()
    for product in products:
        values = {getattr(v, attribute) for v in product.variants if v.is_available and getattr(v, attribute)}
        counts.update(values)
    facets = [{"id": value, "name": value, "count": count} for value, count in counts.items()]
    return sorted(facets, key=lambda f: (-f["count"], f["name"]))


def filter_facets(category_id: str | None = None) -> dict:
    products = _base_products(category_id)
    facets = {
        "categories": category_facets(products),
        "tags": tag_facets(products),
        "allergens": allergen_facets(products),
        "price_range": price_range(products),
    }
    for key, attribute in VARIANT_FACETS.items():
        facets[key] = variant_facets(products, attribute)
    return facets


def popular_tags(limit: int = 10) -> list[dict]:
    counts = _tag_counts(_base_products())
    ranked = [_tag_option(t, counts[str(t.id)]) for t in fetch_all(Tag) if counts.get(str(t.id))]
    ranked.sort(key=lambda f: (-f["count"], f["name"]))
    return ranked[:limit]


def _tags_of_type(tag_type: TagType) -> list[dict]:
    facets = tag_facets(_base_products(), tag_type=tag_type.value)
    return sorted(facets, key=lambda f: (-f["count"], f["name"]))


def dietary_tags() -> list[dict]:
    return _tags_of_type(TagType.DIETARY)


def occasion_tags() -> list[dict]:
    return _tags_of_type(TagType.OCCASION)


def filter_suggestions(category_id: str | None = None, tag_ids: Iterable[str] = (), limit: int = 5) -> dict:
    """Tags worth adding to the current selection and, with no category chosen, categories to browse."""
    products = _base_products(category_id)
    selected = {str(t) for t in tag_ids}
    suggested = [t for t in tag_facets(products) if t["id"] not in selected]
    suggested.sort(key=lambda f: (-f["count"], f["name"]))
    related = [] if category_id else category_facets(products)
    return {
        "suggested_tags": suggested[:limit],
        "related_categories": related[:limit],
    }
