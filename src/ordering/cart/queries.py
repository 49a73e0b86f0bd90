"""Read-side queries for carts."""

import json

from protean.exceptions import ObjectNotFoundError

from ordering.cart.cart import Cart, price_summary
from shared.utils.queries import fetch_first, iso, money, sort_key_datetime


def _item_dict(item) -> dict:
    return {
        "id": str(item.id),
        "product_id": str(item.product_id),
        "variant_id": str(item.variant_id) if item.variant_id else None,
        "product_name": item.product_name,
        "quantity": item.quantity,
        "unit_price": money(item.unit_price),
        "line_total": money(item.quantity * item.unit_price),
        "customizations": json.loads(item.customizations) if item.customizations else None,
        "added_at": iso(item.added_at),
    }


def _newest_first(items):
    return sorted(items, key=lambda i: sort_key_datetime(i.added_at), reverse=True)


def cart_to_dict(cart: Cart) -> dict:
    return {
        "id": str(cart.id),
        "customer_id": str(cart.customer_id) if cart.customer_id else None,
        "session_id": cart.session_id,
        "items": [_item_dict(i) for i in _newest_first(cart.items)],
        "summary": cart.summary(),
        "created_at": iso(cart.created_at),
        "updated_at": iso(cart.updated_at),
    }


def cart_for_customer(customer_id: str) -> dict | None:
    cart = fetch_first(Cart, customer_id=customer_id)
    return cart_to_dict(cart) if cart is not None else None


def cart_for_session(session_id: str) -> dict | None:
    cart = fetch_first(Cart, session_id=session_id)
    return cart_to_dict(cart) if cart is not None else None


def _get(cart_id: str) -> Cart:
    cart = fetch_first(Cart, id=cart_id)
    if cart is None:
        raise ObjectNotFoundError(f"Cart with id {cart_id} does not exist")
    return cart


def cart_summary(cart_id: str) -> dict:
    """Line count, item count, subtotal, 8% tax and total for a cart."""
    cart = _get(cart_id)
    return price_summary((i.quantity, i.unit_price) for i in cart.items)


def recent_cart_items(cart_id: str, limit: int = 5) -> list[dict]:
    cart = _get(cart_id)
    return [_item_dict(i) for i in _newest_first(cart.items)[:limit]]
