"""Guest cart merging: command and handler.

When a guest signs in, the lines in their session cart move into their
customer cart and the session cart is left empty.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.cart.items import find_or_create_cart
from ordering.domain import ordering
from shared.utils.queries import fetch_first

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class MergeGuestCart:
    session_id = String(required=True, max_length=255)
    customer_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class MergeGuestCartHandler:
    @handle(MergeGuestCart)
    def merge_guest_cart(self, command):
        repo = current_domain.repository_for(Cart)
        guest_cart = fetch_first(Cart, session_id=command.session_id)
        if guest_cart is None or not guest_cart.items:
            return 0

        cart = find_or_create_cart(customer_id=command.customer_id)
        merged = cart.absorb(guest_cart)
        guest_cart.clear()

        repo.add(cart)
        repo.add(guest_cart)
        logger.info(
            "Guest cart merged",
            cart_id=str(cart.id),
            guest_cart_id=str(guest_cart.id),
            items_merged=merged,
        )
        return merged
