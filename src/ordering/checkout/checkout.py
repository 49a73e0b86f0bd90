"""Checkout: turns a cart into a pending order.

The order is priced with the same rule as the cart summary (8% tax on the
subtotal) plus the delivery fee, then the cart is emptied.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Date, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.order.order import DeliveryAddress, Order, ensure_future_delivery_date

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class Checkout:
    cart_id = Identifier(required=True)
    delivery_address = Text(required=True, sanitize=False)  # JSON DeliveryAddress
    delivery_date = Date()
    special_instructions = String(max_length=1000, sanitize=False)
    payment_method_id = String(max_length=255)
    delivery_fee = Float(default=0.0, min_value=0.0)
    contact_email = String(max_length=254)


def parse_delivery_address(raw):
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            raise ValidationError({"delivery_address": ["Delivery address must be valid JSON"]}) from None
    data = raw
    if not isinstance(data, dict):
        raise ValidationError({"delivery_address": ["Delivery address must be an object"]})
    return DeliveryAddress(**data)


@ordering.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command):
        if not command.payment_method_id:
            raise ValidationError({"payment_method_id": ["Payment method is required"]})

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.get(command.cart_id)
        if not cart.items:
            raise ValidationError({"cart": ["Cannot check out an empty cart"]})

        delivery_date = ensure_future_delivery_date(command.delivery_date)
        address = parse_delivery_address(command.delivery_address)

        summary = cart.summary()
        delivery_fee = round(command.delivery_fee or 0.0, 2)
        pricing = {
            "subtotal": summary["subtotal"],
            "tax": summary["tax"],
            "delivery_fee": delivery_fee,
            "total": round(summary["total"] + delivery_fee, 2),
        }

        order = Order.place(
            items_data=[
                {
                    "product_id": item.product_id,
                    "variant_id": item.variant_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "customizations": item.customizations,
                }
                for item in cart.items
            ],
            pricing=pricing,
            delivery_address=address,
            customer_id=cart.customer_id,
            contact_email=command.contact_email,
            delivery_date=delivery_date,
            special_instructions=command.special_instructions,
            payment_method_id=command.payment_method_id,
        )
        cart.clear()

        current_domain.repository_for(Order).add(order)
        cart_repo.add(cart)
        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            total_amount=order.total_amount,
        )
        return {"order_id": str(order.id), "order_number": order.order_number}
