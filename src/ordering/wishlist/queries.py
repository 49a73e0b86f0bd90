"""Read-side queries for wishlists."""

from ordering.wishlist.wishlist import Wishlist
from shared.utils.queries import fetch_all, iso, sort_key_datetime


def wishlist_to_dict(wishlist: Wishlist) -> dict:
    items = sorted(wishlist.items, key=lambda i: sort_key_datetime(i.added_at), reverse=True)
    return {
        "id": str(wishlist.id),
        "customer_id": str(wishlist.customer_id),
        "name": wishlist.name,
        "is_default": wishlist.is_default,
        "item_count": len(items),
        "items": [
            {
                "id": str(i.id),
                "product_id": str(i.product_id),
                "variant_id": str(i.variant_id) if i.variant_id else None,
                "notes": i.notes,
                "added_at": iso(i.added_at),
            }
            for i in items
        ],
        "created_at": iso(wishlist.created_at),
        "updated_at": iso(wishlist.updated_at),
    }


def customer_wishlists(customer_id: str) -> list[dict]:
    """The default wishlist first, then newest first."""
    wishlists = sorted(
        fetch_all(Wishlist, customer_id=customer_id),
        key=lambda w: sort_key_datetime(w.created_at),
        reverse=True,
    )
    wishlists.sort(key=lambda w: not w.is_default)
    return [wishlist_to_dict(w) for w in wishlists]


def default_wishlist(customer_id: str) -> dict | None:
    wishlists = fetch_all(Wishlist, customer_id=customer_id, is_default=True)
    return wishlist_to_dict(wishlists[0]) if wishlists else None


def is_product_in_wishlist(customer_id: str, product_id: str, variant_id: str | None = None) -> bool:
    """Without a variant, any saved variant of the product counts."""
    for wishlist in fetch_all(Wishlist, customer_id=customer_id):
        if variant_id is not None:
            if wishlist.contains(product_id, variant_id):
                return True
        elif any(str(i.product_id) == str(product_id) for i in wishlist.items):
            return True
    return False
