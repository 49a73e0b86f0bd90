"""Cart aggregate: the lines a customer or guest intends to order.

A cart belongs to a signed-in customer or to an anonymous browser session.
Identical lines (same product, variant and customizations) merge instead of
duplicating; quantities are capped per line.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from ordering.cart.customizations import normalize_customizations
from ordering.cart.events import (
    CartCleared,
    CartCreated,
    CartItemAdded,
    CartItemRemoved,
    CartItemUpdated,
    CartsMerged,
)
from ordering.domain import ordering

MAX_QUANTITY = 100
TAX_RATE = 0.08


def price_summary(lines) -> dict:
    """Totals for ``(quantity, unit_price)`` pairs, with tax at ``TAX_RATE``."""
    lines = list(lines)
    subtotal = round(sum(quantity * unit_price for quantity, unit_price in lines), 2)
    tax = round(subtotal * TAX_RATE, 2)
    return {
        "item_count": len(lines),
        "total_items": sum(quantity for quantity, _ in lines),
        "subtotal": subtotal,
        "tax": tax,
        "total": round(subtotal + tax, 2),
    }


@ordering.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1, max_value=MAX_QUANTITY)
    unit_price = Float(required=True, min_value=0.0)
    customizations = Text(sanitize=False)
    added_at = DateTime()

    def matches(self, product_id, variant_id, customizations):
        return (
            str(self.product_id) == str(product_id)
            and (str(self.variant_id) if self.variant_id else None) == (str(variant_id) if variant_id else None)
            and (self.customizations or None) == customizations
        )


@ordering.aggregate
class Cart:
    customer_id = Identifier()
    session_id = String(max_length=255)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cart_must_have_an_owner(self):
        if not self.customer_id and not self.session_id:
            raise ValidationError({"cart": ["Either customer_id or session_id is required"]})

    @classmethod
    def create(cls, customer_id=None, session_id=None):
        now = datetime.now(UTC)
        cart = cls(
            customer_id=customer_id,
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )
        cart.raise_(
            CartCreated(
                cart_id=str(cart.id),
                customer_id=customer_id,
                session_id=session_id,
                created_at=now,
            )
        )
        return cart

    def _item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})
        return item

    @staticmethod
    def _check_quantity(quantity):
        if quantity < 1 or quantity > MAX_QUANTITY:
            raise ValidationError({"quantity": [f"Quantity must be between 1 and {MAX_QUANTITY}"]})

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, product_name, unit_price, quantity=1, variant_id=None, customizations=None):
        """Add a line, or grow the matching one. Returns the affected item."""
        self._check_quantity(quantity)
        if unit_price is None or unit_price < 0:
            raise ValidationError({"unit_price": ["Unit price cannot be negative"]})

        customizations = normalize_customizations(customizations)
        existing = next((i for i in self.items if i.matches(product_id, variant_id, customizations)), None)
        now = datetime.now(UTC)

        if existing is not None:
            existing.quantity = min(existing.quantity + quantity, MAX_QUANTITY)
            item = existing
        else:
            item = CartItem(
                product_id=product_id,
                variant_id=variant_id,
                product_name=product_name,
                quantity=quantity,
                unit_price=round(unit_price, 2),
                customizations=customizations,
                added_at=now,
            )
            self.add_items(item)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                product_id=str(product_id),
                variant_id=str(variant_id) if variant_id else None,
                quantity=quantity,
                merged=existing is not None,
            )
        )
        return item

    def update_item(self, item_id, quantity=None, customizations=None):
        item = self._item(item_id)
        previous_quantity = item.quantity

        if quantity is not None:
            self._check_quantity(quantity)
            item.quantity = quantity
        if customizations is not None:
            item.customizations = normalize_customizations(customizations)

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=item.quantity,
            )
        )

    def remove_item(self, item_id):
        item = self._item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))

    def clear(self):
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), items_removed=removed))
        return removed

    # -------------------------------------------------------------------
    # Cart merging (guest → signed-in)
    # -------------------------------------------------------------------
    def absorb(self, guest_cart):
        """Fold every line of ``guest_cart`` into this cart."""
        merged = 0
        now = datetime.now(UTC)

        for guest_item in guest_cart.items:
            existing = next(
                (
                    i
                    for i in self.items
                    if i.matches(guest_item.product_id, guest_item.variant_id, guest_item.customizations or None)
                ),
                None,
            )
            if existing is not None:
                existing.quantity = min(existing.quantity + guest_item.quantity, MAX_QUANTITY)
            else:
                self.add_items(
                    CartItem(
                        product_id=guest_item.product_id,
                        variant_id=guest_item.variant_id,
                        product_name=guest_item.product_name,
                        quantity=guest_item.quantity,
                        unit_price=guest_item.unit_price,
                        customizations=guest_item.customizations,
                        added_at=now,
                    )
                )
            merged += 1

        self.updated_at = now

        self.raise_(
            CartsMerged(
                cart_id=str(self.id),
                source_cart_id=str(guest_cart.id),
                items_merged_count=merged,
            )
        )
        return merged

    def summary(self) -> dict:
        return price_summary((i.quantity, i.unit_price) for i in self.items)
