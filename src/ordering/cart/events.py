"""Domain events for the Cart aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartCreated:
    __version__ = 1

    cart_id = Identifier(required=True)
    customer_id = Identifier()
    session_id = String()
    created_at = DateTime(required=True)


@ordering.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or an identical line grew."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier()
    quantity = Integer(required=True)
    merged = Boolean(default=False)


@ordering.event(part_of="Cart")
class CartItemUpdated:
    """A cart line's quantity or customizations changed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.event(part_of="Cart")
class CartCleared:
    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed = Integer(required=True)


@ordering.event(part_of="Cart")
class CartsMerged:
    """A guest's session cart was folded into a customer's cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    source_cart_id = Identifier(required=True)
    items_merged_count = Integer(required=True)
