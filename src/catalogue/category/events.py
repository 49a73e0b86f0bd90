"""Domain events for the Category aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from catalogue.domain import catalogue


@catalogue.event(part_of="Category")
class CategoryCreated:
    """A new category was added to the catalogue hierarchy."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    parent_id: Identifier()
    sort_order: Integer(required=True)
    is_active: Boolean(required=True)
    created_at: DateTime(required=True)


@catalogue.event(part_of="Category")
class CategoryUpdated:
    """A category's details, placement or visibility changed."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    parent_id: Identifier()
    previous_parent_id: Identifier()
    is_active: Boolean(required=True)
    updated_at: DateTime(required=True)


@catalogue.event(part_of="Category")
class CategoryReordered:
    __version__ = 1

    category_id: Identifier(required=True)
    previous_order: Integer(required=True)
    new_order: Integer(required=True)


@catalogue.event(part_of="Category")
class CategoryDeleted:
    __version__ = 1

    category_id: Identifier(required=True)
    slug: String(required=True)
    deleted_at: DateTime(required=True)
