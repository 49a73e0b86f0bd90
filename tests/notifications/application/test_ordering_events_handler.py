"""Application tests for the Ordering cross-domain event handler."""

import json
from datetime import UTC, date, datetime

from notifications.notification.notification import Notification, NotificationStatus, NotificationType
from notifications.notification.ordering_events import OrderingEventsHandler
from shared.events.ordering import OrderPlaced
from shared.utils.queries import fetch_all


def _order_placed(contact_email="dee@example.com", **overrides):
    values = {
        "order_id": "ord-001",
        "order_number": "DLB-20260301-ABC123",
        "customer_id": "cust-001",
        "contact_email": contact_email,
        "customer_name": "Dee Baker",
        "items": json.dumps(
            [
                {"product_name": "Carrot Cake", "quantity": 2, "unit_price": 25.0, "total_price": 50.0},
            ]
        ),
        "item_count": 2,
        "subtotal": 50.0,
        "tax_amount": 4.0,
        "delivery_fee": 5.0,
        "total_amount": 59.0,
        "delivery_date": date(2026, 3, 5),
        "placed_at": datetime(2026, 3, 1, tzinfo=UTC),
    }
    values.update(overrides)
    return OrderPlaced(**values)


def test_confirmation_sent_to_contact_address(outbox):
    OrderingEventsHandler().on_order_placed(_order_placed())

    [notification] = fetch_all(Notification, recipient="dee@example.com")
    assert notification.notification_type == NotificationType.ORDER_CONFIRMATION.value
    assert notification.status == NotificationStatus.SENT.value
    assert notification.source_event_id == "ord-001"

    [email] = outbox.sent_emails
    assert email["subject"] == "Order Confirmed - DLB-20260301-ABC123"
    assert "2 x Carrot Cake: $50.00" in email["body"]
    assert "Total: $59.00" in email["body"]
    assert "Delivery date: 2026-03-05" in email["body"]


def test_skipped_without_contact_email(outbox):
    OrderingEventsHandler().on_order_placed(_order_placed(contact_email=None))

    assert fetch_all(Notification) == []
    assert outbox.sent_emails == []
