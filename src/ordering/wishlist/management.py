"""Wishlist management: commands and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.cart.items import find_or_create_cart
from ordering.domain import ordering
from ordering.wishlist.wishlist import Wishlist
from shared.utils.queries import fetch_all, sort_key_datetime


@ordering.command(part_of="Wishlist")
class CreateWishlist:
    customer_id = Identifier(required=True)
    name = String(max_length=100)
    is_default = Boolean(default=False)


@ordering.command(part_of="Wishlist")
class RenameWishlist:
    wishlist_id = Identifier(required=True)
    name = String(required=True, max_length=100)


@ordering.command(part_of="Wishlist")
class SetDefaultWishlist:
    wishlist_id = Identifier(required=True)


@ordering.command(part_of="Wishlist")
class DeleteWishlist:
    wishlist_id = Identifier(required=True)


@ordering.command(part_of="Wishlist")
class AddToWishlist:
    wishlist_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier()
    notes = String(max_length=500, sanitize=False)


@ordering.command(part_of="Wishlist")
class RemoveFromWishlist:
    wishlist_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command(part_of="Wishlist")
class UpdateWishlistItemNotes:
    wishlist_id = Identifier(required=True)
    item_id = Identifier(required=True)
    notes = String(max_length=500, sanitize=False)


@ordering.command(part_of="Wishlist")
class MoveWishlistItemToCart:
    wishlist_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(default=1, min_value=1, max_value=100)
    customizations = Text(sanitize=False)


def _demote_other_defaults(repo, wishlist):
    for other in fetch_all(Wishlist, customer_id=wishlist.customer_id, is_default=True):
        if str(other.id) != str(wishlist.id):
            other.mark_default(False)
            repo.add(other)


@ordering.command_handler(part_of=Wishlist)
class ManageWishlistHandler:
    @handle(CreateWishlist)
    def create_wishlist(self, command):
        repo = current_domain.repository_for(Wishlist)
        is_first = not fetch_all(Wishlist, customer_id=command.customer_id)

        wishlist = Wishlist.create(
            customer_id=command.customer_id,
            name=command.name,
            is_default=is_first or bool(command.is_default),
        )
        if wishlist.is_default:
            _demote_other_defaults(repo, wishlist)
        repo.add(wishlist)
        return str(wishlist.id)

    @handle(RenameWishlist)
    def rename_wishlist(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.get(command.wishlist_id)
        wishlist.rename(command.name)
        repo.add(wishlist)

    @handle(SetDefaultWishlist)
    def set_default(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.get(command.wishlist_id)
        _demote_other_defaults(repo, wishlist)
        wishlist.mark_default()
        repo.add(wishlist)

    @handle(DeleteWishlist)
    def delete_wishlist(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.get(command.wishlist_id)
        was_default = wishlist.is_default

        wishlist.mark_deleted()
        repo.add(wishlist)
        repo._dao.delete(wishlist)

        if was_default:
            remaining = fetch_all(Wishlist, customer_id=wishlist.customer_id)
            if remaining:
                successor = max(remaining, key=lambda w: sort_key_datetime(w.created_at))
                successor.mark_default()
                repo.add(successor)

    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.get(command.wishlist_id)
        item = wishlist.add_item(command.product_id, variant_id=command.variant_id, notes=command.notes)
        repo.add(wishlist)
        return str(item.id)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.get(command.wishlist_id)
        wishlist.remove_item(command.item_id)
        repo.add(wishlist)

    @handle(UpdateWishlistItemNotes)
    def update_notes(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.get(command.wishlist_id)
        wishlist.update_notes(command.item_id, command.notes)
        repo.add(wishlist)

    @handle(MoveWishlistItemToCart)
    def move_to_cart(self, command):
        repo = current_domain.repository_for(Wishlist)
        wishlist = repo.get(command.wishlist_id)
        item = wishlist.remove_item(command.item_id)

        cart = find_or_create_cart(customer_id=wishlist.customer_id)
        cart.add_item(
            product_id=item.product_id,
            product_name=command.product_name,
            unit_price=command.unit_price,
            quantity=command.quantity,
            variant_id=item.variant_id,
            customizations=command.customizations,
        )

        repo.add(wishlist)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)
