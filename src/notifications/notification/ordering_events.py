"""Inbound cross-domain event handler: Notifications reacts to Ordering events."""

import json

import structlog
from protean import handle

from notifications.domain import notifications
from notifications.notification.helpers import send_email
from notifications.notification.notification import Notification, NotificationType
from shared.events.ordering import OrderPlaced

logger = structlog.get_logger(__name__)

notifications.register_external_event(OrderPlaced, "Ordering.OrderPlaced.v1")


@notifications.event_handler(part_of=Notification, stream_category="ordering::order")
class OrderingEventsHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        """Send the order confirmation to the checkout contact address."""
        if not event.contact_email:
            logger.info("Order has no contact email, skipping confirmation", order_id=str(event.order_id))
            return

        send_email(
            NotificationType.ORDER_CONFIRMATION.value,
            event.contact_email,
            {
                "order_number": event.order_number,
                "customer_name": event.customer_name,
                "items": json.loads(event.items) if event.items else [],
                "subtotal": event.subtotal,
                "tax_amount": event.tax_amount,
                "delivery_fee": event.delivery_fee,
                "total_amount": event.total_amount,
                "delivery_date": event.delivery_date.isoformat() if event.delivery_date else None,
            },
            source_event_type="Ordering.OrderPlaced.v1",
            source_event_id=str(event.order_id),
        )
