"""Domain events for the Order aggregate."""

from protean.fields import Boolean, Date, DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A cart was checked out and became an order.

    Consumed by the Notifications domain to send the order confirmation email.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier()
    contact_email = String()
    customer_name = String()
    items = Text(required=True, sanitize=False)  # JSON list of {product_name, quantity, unit_price, total_price}
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    tax_amount = Float(required=True)
    delivery_fee = Float(required=True)
    total_amount = Float(required=True)
    delivery_date = Date()
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    notes = String(sanitize=False)
    changed_by = String()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    reason = String()
    cancelled_by = String()
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    payment_intent_id = String()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDetailsUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    delivery_date = Date()
    special_instructions = String(sanitize=False)
    address_changed = Boolean(default=False)
    updated_at = DateTime(required=True)
