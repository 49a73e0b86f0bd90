"""Cart item management: commands and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import MAX_QUANTITY, Cart
from ordering.domain import ordering
from shared.utils.queries import fetch_first


@ordering.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier()
    session_id = String(max_length=255)
    product_id = Identifier(required=True)
    variant_id = Identifier()
    product_name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(default=1, min_value=1, max_value=MAX_QUANTITY)
    customizations = Text(sanitize=False)  # JSON object


@ordering.command(part_of="Cart")
class UpdateCartItem:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(min_value=1, max_value=MAX_QUANTITY)
    customizations = Text(sanitize=False)


@ordering.command(part_of="Cart")
class RemoveCartItem:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class BulkUpdateCartItems:
    cart_id = Identifier(required=True)
    updates = Text(required=True, sanitize=False)  # JSON: list of {item_id, quantity}


@ordering.command(part_of="Cart")
class BulkRemoveCartItems:
    cart_id = Identifier(required=True)
    item_ids = Text(required=True, sanitize=False)  # JSON: list of item ids


@ordering.command(part_of="Cart")
class ClearCart:
    cart_id = Identifier(required=True)


def find_or_create_cart(customer_id=None, session_id=None):
    """The owner's cart, created on first use. Customer carts win over session carts."""
    if not customer_id and not session_id:
        raise ValidationError({"cart": ["Either customer_id or session_id is required"]})

    cart = fetch_first(Cart, customer_id=customer_id) if customer_id else fetch_first(Cart, session_id=session_id)
    if cart is None:
        cart = Cart.create(customer_id=customer_id, session_id=None if customer_id else session_id)
    return cart


def _json_list(raw, field, message):
    try:
        value = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        raise ValidationError({field: [f"{field} must be a JSON list"]}) from None
    if not isinstance(value, list) or not value:
        raise ValidationError({field: [message]})
    return value


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = find_or_create_cart(command.customer_id, command.session_id)
        item = cart.add_item(
            product_id=command.product_id,
            product_name=command.product_name,
            unit_price=command.unit_price,
            quantity=command.quantity,
            variant_id=command.variant_id,
            customizations=command.customizations,
        )
        repo.add(cart)
        return {"cart_id": str(cart.id), "item_id": str(item.id)}

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.update_item(command.item_id, quantity=command.quantity, customizations=command.customizations)
        repo.add(cart)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.remove_item(command.item_id)
        repo.add(cart)

    @handle(BulkUpdateCartItems)
    def bulk_update(self, command):
        updates = _json_list(command.updates, "updates", "At least one item update is required")
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        for update in updates:
            cart.update_item(update["item_id"], quantity=update["quantity"])
        repo.add(cart)
        return len(updates)

    @handle(BulkRemoveCartItems)
    def bulk_remove(self, command):
        item_ids = _json_list(command.item_ids, "item_ids", "At least one item ID is required")
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        for item_id in item_ids:
            cart.remove_item(item_id)
        repo.add(cart)
        return len(item_ids)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        removed = cart.clear()
        repo.add(cart)
        return removed
