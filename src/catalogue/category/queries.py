"""Read-side queries over the category hierarchy."""

from collections import Counter

from catalogue.category.category import Category
from catalogue.category.tree import (
    breadcrumb,
    build_category_tree,
    eligible_parents,
    index_by_id,
)
from catalogue.product.product import Product
from shared.utils.queries import fetch_all, iso


def category_to_dict(category: Category, product_count: int = 0) -> dict:
    return {
        "id": str(category.id),
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "parent_id": str(category.parent_id) if category.parent_id else None,
        "sort_order": category.sort_order or 0,
        "is_active": category.is_active,
        "product_count": product_count,
        "created_at": iso(category.created_at),
        "updated_at": iso(category.updated_at),
    }


def _ordered(categories):
    return sorted(categories, key=lambda c: (c.sort_order or 0, c.name.lower()))


def _active_product_counts() -> Counter:
    return Counter(str(p.category_id) for p in fetch_all(Product, is_active=True) if p.category_id)


def categories_with_stats(include_inactive: bool = False) -> list[dict]:
    """Categories ordered by ``(sort_order, name)`` with active product counts."""
    counts = _active_product_counts()
    categories = fetch_all(Category) if include_inactive else fetch_all(Category, is_active=True)
    return [category_to_dict(c, counts.get(str(c.id), 0)) for c in _ordered(categories)]


def category_tree() -> list[dict]:
    return build_category_tree(categories_with_stats())


def root_categories() -> list[dict]:
    return [c for c in categories_with_stats() if c["parent_id"] is None]


def category_by_slug(slug: str) -> dict | None:
    return next((c for c in categories_with_stats() if c["slug"] == slug), None)


def category_by_id(category_id: str) -> dict | None:
    return next((c for c in categories_with_stats(include_inactive=True) if c["id"] == str(category_id)), None)


def subcategories(parent_id: str) -> list[dict]:
    return [c for c in categories_with_stats() if c["parent_id"] == str(parent_id)]


def category_breadcrumb(category_id: str) -> list[dict]:
    by_id = index_by_id(categories_with_stats(include_inactive=True))
    return [{"id": c["id"], "name": c["name"], "slug": c["slug"]} for c in breadcrumb(category_id, by_id)]


def admin_categories() -> list[dict]:
    """Every category, inactive included, with product and child counts."""
    rows = categories_with_stats(include_inactive=True)
    children = Counter(c["parent_id"] for c in rows if c["parent_id"])
    for row in rows:
        row["children_count"] = children.get(row["id"], 0)
    return rows


def parent_options(category_id: str | None = None) -> list[dict]:
    rows = categories_with_stats(include_inactive=True)
    return [
        {"id": c["id"], "name": c["name"], "parent_id": c["parent_id"]}
        for c in eligible_parents(category_id, rows)
    ]
