"""Cross-domain event contracts for Ordering domain events.

The source-of-truth events are in src/ordering/order/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import Date, DateTime, Float, Identifier, Integer, String, Text


class OrderPlaced(BaseEvent):
    """A cart was checked out and became an order."""

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
