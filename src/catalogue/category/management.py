"""Category management: commands and handlers."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalogue.category.category import Category
from catalogue.category.tree import is_valid_parent
from catalogue.domain import catalogue
from catalogue.product.product import Product
from catalogue.shared.slug import ensure_unique_slug, resolve_slug, validate_slug
from shared.utils.queries import fetch_all, fetch_first

logger = structlog.get_logger(__name__)


@catalogue.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=255)
    slug: String(max_length=255)
    description: Text(sanitize=False)
    parent_id: Identifier()
    sort_order: Integer(default=0, min_value=0)
    is_active: Boolean(default=True)


@catalogue.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=255)
    slug: String(max_length=255)
    description: Text(sanitize=False)
    parent_id: Identifier()
    clear_parent: Boolean(default=False)
    is_active: Boolean()


@catalogue.command(part_of="Category")
class ReorderCategories:
    orders: Text(required=True, sanitize=False)  # JSON list of {"id": ..., "sort_order": ...}


@catalogue.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


def _category_rows():
    return [{"id": c.id, "parent_id": c.parent_id} for c in fetch_all(Category)]


def _parse_orders(raw):
    try:
        orders = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        raise ValidationError({"orders": ["Orders must be a JSON list"]}) from None

    if not isinstance(orders, list) or not orders:
        raise ValidationError({"orders": ["At least one category order is required"]})

    parsed = []
    for entry in orders:
        if not isinstance(entry, dict) or not entry.get("id"):
            raise ValidationError({"orders": ["Each entry needs a category id"]})
        sort_order = entry.get("sort_order")
        if not isinstance(sort_order, int) or sort_order < 0:
            raise ValidationError({"orders": ["Sort order must be a non-negative integer"]})
        parsed.append((entry["id"], sort_order))
    return parsed


@catalogue.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        slug = resolve_slug(command.name, command.slug)
        ensure_unique_slug(Category, slug)

        if command.parent_id and fetch_first(Category, id=command.parent_id) is None:
            raise ValidationError({"parent_id": ["Parent category not found"]})

        category = Category.create(
            name=command.name,
            slug=slug,
            description=command.description,
            parent_id=command.parent_id,
            sort_order=command.sort_order,
            is_active=command.is_active,
        )
        current_domain.repository_for(Category).add(category)
        logger.info("Category created", category_id=str(category.id), slug=slug)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        changes = {}
        if command.name is not None:
            changes["name"] = command.name
        if command.slug is not None:
            validate_slug(command.slug)
            if command.slug != category.slug:
                ensure_unique_slug(Category, command.slug, exclude_id=category.id)
            changes["slug"] = command.slug
        if command.description is not None:
            changes["description"] = command.description
        if command.is_active is not None:
            changes["is_active"] = command.is_active

        if command.clear_parent:
            changes["parent_id"] = None
        elif command.parent_id is not None:
            if fetch_first(Category, id=command.parent_id) is None:
                raise ValidationError({"parent_id": ["Parent category not found"]})
            if not is_valid_parent(category.id, command.parent_id, _category_rows()):
                raise ValidationError({"parent_id": ["Category cannot be moved under itself or its descendants"]})
            changes["parent_id"] = command.parent_id

        category.update_details(**changes)
        repo.add(category)

    @handle(ReorderCategories)
    def reorder_categories(self, command):
        repo = current_domain.repository_for(Category)
        changed = 0
        for category_id, sort_order in _parse_orders(command.orders):
            category = repo.get(category_id)
            if category.reorder(sort_order):
                repo.add(category)
                changed += 1
        return changed

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        product_count = len(fetch_all(Product, category_id=category.id))
        if product_count:
            raise ValidationError(
                {"category_id": [f"Cannot delete category with {product_count} assigned products"]}
            )

        children_count = len(fetch_all(Category, parent_id=category.id))
        if children_count:
            raise ValidationError(
                {"category_id": [f"Cannot delete category with {children_count} subcategories"]}
            )

        category.mark_deleted()
        repo.add(category)
        repo._dao.delete(category)
        logger.info("Category deleted", category_id=str(category.id))
