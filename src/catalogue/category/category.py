"""Category aggregate root for the bakery's product hierarchy."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from catalogue.category.events import (
    CategoryCreated,
    CategoryDeleted,
    CategoryReordered,
    CategoryUpdated,
)
from catalogue.domain import catalogue
from catalogue.shared.slug import resolve_slug, validate_slug

_UNSET = object()


@catalogue.aggregate
class Category:
    """A node in the catalogue tree, such as "Cakes" or "Cakes / Birthday Cakes".

    Categories point at their parent; the tree is assembled on read. Keeping the
    tree acyclic needs the whole category set, so the management handler checks
    moves before calling ``update_details``.
    """

    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=255)
    description: Text(sanitize=False)
    parent_id: Identifier()
    sort_order: Integer(default=0, min_value=0)
    is_active: Boolean(default=True)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, slug=None, description=None, parent_id=None, sort_order=0, is_active=True):
        _check_description(description)
        now = datetime.now(UTC)

        category = cls(
            name=name,
            slug=resolve_slug(name, slug),
            description=description,
            parent_id=parent_id,
            sort_order=sort_order,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=category.name,
                slug=category.slug,
                parent_id=parent_id,
                sort_order=category.sort_order,
                is_active=category.is_active,
                created_at=now,
            )
        )
        return category

    def update_details(
        self,
        name=_UNSET,
        slug=_UNSET,
        description=_UNSET,
        parent_id=_UNSET,
        is_active=_UNSET,
    ):
        previous_parent_id = self.parent_id

        if parent_id is not _UNSET and parent_id is not None and str(parent_id) == str(self.id):
            raise ValidationError({"parent_id": ["Category cannot be moved under itself or its descendants"]})

        if name is not _UNSET:
            self.name = name
        if slug is not _UNSET:
            self.slug = validate_slug(slug)
        if description is not _UNSET:
            _check_description(description)
            self.description = description
        if parent_id is not _UNSET:
            self.parent_id = parent_id
        if is_active is not _UNSET:
            self.is_active = is_active

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            CategoryUpdated(
                category_id=self.id,
                name=self.name,
                slug=self.slug,
                parent_id=self.parent_id,
                previous_parent_id=previous_parent_id,
                is_active=self.is_active,
                updated_at=now,
            )
        )

    def reorder(self, new_sort_order):
        if new_sort_order is None or new_sort_order < 0:
            raise ValidationError({"sort_order": ["Sort order cannot be negative"]})

        previous_order = self.sort_order
        if previous_order == new_sort_order:
            return False

        self.sort_order = new_sort_order
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CategoryReordered(
                category_id=self.id,
                previous_order=previous_order,
                new_order=new_sort_order,
            )
        )
        return True

    def mark_deleted(self):
        self.raise_(
            CategoryDeleted(
                category_id=self.id,
                slug=self.slug,
                deleted_at=datetime.now(UTC),
            )
        )


def _check_description(description):
    if description and len(description) > 2000:
        raise ValidationError({"description": ["Description too long"]})
