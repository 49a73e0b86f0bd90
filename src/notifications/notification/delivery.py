"""Delivery commands: retry, cancel, provider receipts and scheduled sends."""

from datetime import UTC, datetime
from enum import Enum

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from notifications.domain import notifications
from notifications.notification.dispatch import deliver
from notifications.notification.notification import Notification, NotificationStatus
from shared.utils.queries import fetch_all, fetch_first, sort_key_datetime

logger = structlog.get_logger(__name__)


class ReceiptOutcome(Enum):
    DELIVERED = "delivered"
    BOUNCED = "bounced"


@notifications.command(part_of="Notification")
class RetryNotification:
    notification_id: Identifier(required=True)


@notifications.command(part_of="Notification")
class CancelNotification:
    """Stop a Pending email, typically one scheduled for later."""

    notification_id: Identifier(required=True)
    reason: String(required=True, max_length=500)


@notifications.command(part_of="Notification")
class RecordDeliveryReceipt:
    """The mail provider reported what happened to a sent message."""

    message_id: String(required=True, max_length=200)
    outcome: String(choices=ReceiptOutcome, required=True)
    reason: String(max_length=500)


@notifications.command(part_of="Notification")
class SendDueNotifications:
    as_of: DateTime()


@notifications.command_handler(part_of=Notification)
class NotificationDeliveryHandler:
    @handle(RetryNotification)
    def retry(self, command: RetryNotification):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        notification.retry()
        repo.add(notification)

    @handle(CancelNotification)
    def cancel(self, command: CancelNotification):
        repo = current_domain.repository_for(Notification)
        notification = repo.get(command.notification_id)
        notification.cancel(command.reason)
        repo.add(notification)

    @handle(RecordDeliveryReceipt)
    def record_receipt(self, command: RecordDeliveryReceipt):
        notification = fetch_first(Notification, message_id=command.message_id)
        if notification is None:
            raise ObjectNotFoundError(f"No email was sent with message id {command.message_id}")

        if command.outcome == ReceiptOutcome.DELIVERED.value:
            notification.mark_delivered()
        else:
            if not command.reason:
                raise ValidationError({"reason": ["A bounce needs a reason"]})
            notification.mark_bounced(command.reason)

        current_domain.repository_for(Notification).add(notification)
        return str(notification.id)

    @handle(SendDueNotifications)
    def send_due(self, command: SendDueNotifications):
        """Deliver every scheduled email whose time has come, oldest schedule first."""
        as_of = command.as_of or datetime.now(UTC)
        due = [
            n
            for n in fetch_all(Notification, status=NotificationStatus.PENDING.value)
            if n.scheduled_for is not None and n.is_due(as_of)
        ]
        due.sort(key=lambda n: sort_key_datetime(n.scheduled_for))

        repo = current_domain.repository_for(Notification)
        sent = 0
        for notification in due:
            sent += deliver(notification)
            repo.add(notification)

        logger.info("Scheduled emails processed", due=len(due), sent=sent, as_of=str(as_of))
        return {"due": len(due), "sent": sent}
