"""Wishlist aggregate: named lists of bakes a customer wants to remember."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, String

from ordering.domain import ordering

DEFAULT_NAME = "My Wishlist"


@ordering.event(part_of="Wishlist")
class WishlistCreated:
    __version__ = 1

    wishlist_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    name = String(required=True)
    is_default = Boolean(required=True)


@ordering.event(part_of="Wishlist")
class WishlistItemAdded:
    __version__ = 1

    wishlist_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier()


@ordering.event(part_of="Wishlist")
class WishlistItemRemoved:
    __version__ = 1

    wishlist_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)


@ordering.event(part_of="Wishlist")
class WishlistDeleted:
    __version__ = 1

    wishlist_id = Identifier(required=True)
    customer_id = Identifier(required=True)


@ordering.entity(part_of="Wishlist")
class WishlistItem:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    notes = String(max_length=500, sanitize=False)
    added_at = DateTime()


@ordering.aggregate
class Wishlist:
    customer_id = Identifier(required=True)
    name = String(required=True, max_length=100, default=DEFAULT_NAME)
    is_default = Boolean(default=False)
    items = HasMany(WishlistItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id, name=None, is_default=False):
        name = (name or DEFAULT_NAME).strip()
        if not name:
            raise ValidationError({"name": ["Wishlist name is required"]})

        now = datetime.now(UTC)
        wishlist = cls(
            customer_id=customer_id,
            name=name,
            is_default=is_default,
            created_at=now,
            updated_at=now,
        )
        wishlist.raise_(
            WishlistCreated(
                wishlist_id=str(wishlist.id),
                customer_id=str(customer_id),
                name=name,
                is_default=is_default,
            )
        )
        return wishlist

    def rename(self, name):
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": ["Wishlist name is required"]})
        self.name = name
        self.updated_at = datetime.now(UTC)

    def mark_default(self, is_default=True):
        self.is_default = is_default
        self.updated_at = datetime.now(UTC)

    def _item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in wishlist"]})
        return item

    def contains(self, product_id, variant_id=None):
        return any(
            str(i.product_id) == str(product_id)
            and (str(i.variant_id) if i.variant_id else None) == (str(variant_id) if variant_id else None)
            for i in self.items
        )

    def add_item(self, product_id, variant_id=None, notes=None):
        if self.contains(product_id, variant_id):
            raise ValidationError({"product_id": ["Item already in wishlist"]})

        now = datetime.now(UTC)
        item = WishlistItem(product_id=product_id, variant_id=variant_id, notes=notes, added_at=now)
        self.add_items(item)
        self.updated_at = now

        self.raise_(
            WishlistItemAdded(
                wishlist_id=str(self.id),
                item_id=str(item.id),
                product_id=str(product_id),
                variant_id=str(variant_id) if variant_id else None,
            )
        )
        return item

    def remove_item(self, item_id):
        item = self._item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            WishlistItemRemoved(
                wishlist_id=str(self.id),
                item_id=str(item_id),
                product_id=str(item.product_id),
            )
        )
        return item

    def update_notes(self, item_id, notes):
        if notes and len(notes) > 500:
            raise ValidationError({"notes": ["Notes too long"]})
        self._item(item_id).notes = notes
        self.updated_at = datetime.now(UTC)

    def mark_deleted(self):
        self.raise_(WishlistDeleted(wishlist_id=str(self.id), customer_id=str(self.customer_id)))
