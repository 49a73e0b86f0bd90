"""Notification aggregate (CQRS): one bakery email and what became of it.

Notifications are queued by the Identity and Ordering event handlers and by
the newsletter. The dispatcher hands each one to the email channel, and
receipts from the mail provider later settle it as delivered or bounced.

    Pending ──send──▶ Sent ──receipt──▶ Delivered | Bounced
       │                │
       │                └──error──▶ Failed ──retry──▶ Pending
       ├──error──────────────────▶ Failed
       └──cancel──▶ Cancelled
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, Text

from notifications.domain import notifications
from notifications.notification.events import (
    NotificationBounced,
    NotificationCancelled,
    NotificationCreated,
    NotificationDelivered,
    NotificationFailed,
    NotificationRetried,
    NotificationSent,
)
from shared.utils.queries import as_utc

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEFAULT_MAX_RETRIES = 3


class NotificationType(Enum):
    RESET_PASSWORD = "ResetPassword"
    VERIFY_EMAIL = "VerifyEmail"
    CHANGE_EMAIL = "ChangeEmail"
    DELETE_ACCOUNT = "DeleteAccount"
    ACCOUNT_DELETED = "AccountDeleted"
    CAKE_WELCOME = "CakeWelcome"
    UNSUBSCRIBE_CONFIRMATION = "UnsubscribeConfirmation"
    ORDER_CONFIRMATION = "OrderConfirmation"


class NotificationChannel(Enum):
    EMAIL = "Email"


class NotificationStatus(Enum):
    PENDING = "Pending"
    SENT = "Sent"
    DELIVERED = "Delivered"
    FAILED = "Failed"
    BOUNCED = "Bounced"
    CANCELLED = "Cancelled"


# Delivered, Bounced and Cancelled have no way out.
_NEXT_STATUSES = {
    NotificationStatus.PENDING: (NotificationStatus.SENT, NotificationStatus.FAILED, NotificationStatus.CANCELLED),
    NotificationStatus.SENT: (NotificationStatus.DELIVERED, NotificationStatus.BOUNCED, NotificationStatus.FAILED),
    NotificationStatus.FAILED: (NotificationStatus.PENDING,),
}


def is_valid_email(address) -> bool:
    return bool(address) and EMAIL_PATTERN.match(address) is not None


@notifications.aggregate
class Notification:
    """One email to one address."""

    recipient: String(required=True, max_length=254)
    notification_type: String(choices=NotificationType, required=True)
    channel: String(choices=NotificationChannel, default=NotificationChannel.EMAIL.value)

    # Rendered message
    subject: String(max_length=500, sanitize=False)
    body: Text(required=True, sanitize=False)
    html_body: Text(sanitize=False)
    template_name: String(max_length=200)
    context_data: Text(sanitize=False)  # JSON of the template context

    # What caused it
    source_event_type: String(max_length=200)
    source_event_id: String(max_length=200)

    status: String(choices=NotificationStatus, default=NotificationStatus.PENDING.value)
    scheduled_for: DateTime()

    message_id: String(max_length=200)
    sent_at: DateTime()
    delivered_at: DateTime()
    failure_reason: String(max_length=500)

    retry_count: Integer(default=0)
    max_retries: Integer(default=DEFAULT_MAX_RETRIES)

    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(
        cls,
        recipient,
        notification_type,
        body,
        subject=None,
        html_body=None,
        template_name=None,
        source_event_type=None,
        source_event_id=None,
        context_data=None,
        scheduled_for=None,
        max_retries=DEFAULT_MAX_RETRIES,
    ):
        """Queue an email for ``recipient``; it starts out Pending."""
        if not is_valid_email(recipient):
            raise ValidationError({"recipient": [f"Invalid recipient email address: {recipient}"]})

        now = datetime.now(UTC)
        notification = cls(
            recipient=recipient,
            notification_type=notification_type,
            subject=subject,
            body=body,
            html_body=html_body,
            template_name=template_name,
            context_data=context_data,
            source_event_type=source_event_type,
            source_event_id=source_event_id,
            scheduled_for=scheduled_for,
            max_retries=max_retries,
            created_at=now,
            updated_at=now,
        )
        notification.raise_(
            NotificationCreated(
                notification_id=str(notification.id),
                notification_type=notification_type,
                recipient=recipient,
                subject=subject,
                source_event_type=source_event_type,
                source_event_id=source_event_id,
                scheduled_for=scheduled_for,
                created_at=now,
            )
        )
        return notification

    def is_due(self, as_of=None) -> bool:
        """Pending and either unscheduled or scheduled at or before ``as_of``."""
        if self.status != NotificationStatus.PENDING.value:
            return False
        if self.scheduled_for is None:
            return True
        return as_utc(self.scheduled_for) <= as_utc(as_of or datetime.now(UTC))

    def _move_to(self, target: NotificationStatus, at=None) -> datetime:
        current = NotificationStatus(self.status)
        if target not in _NEXT_STATUSES.get(current, ()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        self.status = target.value
        self.updated_at = at or datetime.now(UTC)
        return self.updated_at

    def mark_sent(self, message_id=None, sent_at=None):
        now = self._move_to(NotificationStatus.SENT, sent_at)
        self.message_id = message_id
        self.sent_at = now
        self.raise_(
            NotificationSent(
                notification_id=str(self.id),
                notification_type=self.notification_type,
                recipient=self.recipient,
                message_id=message_id,
                sent_at=now,
            )
        )

    def mark_delivered(self, delivered_at=None):
        now = self._move_to(NotificationStatus.DELIVERED, delivered_at)
        self.delivered_at = now
        self.raise_(NotificationDelivered(notification_id=str(self.id), message_id=self.message_id, delivered_at=now))

    def mark_failed(self, reason):
        """Record a failed attempt; each failure uses up one retry."""
        now = self._move_to(NotificationStatus.FAILED)
        self.failure_reason = reason
        self.retry_count = self.retry_count + 1
        self.raise_(
            NotificationFailed(
                notification_id=str(self.id),
                recipient=self.recipient,
                reason=reason,
                retry_count=self.retry_count,
                max_retries=self.max_retries,
                failed_at=now,
            )
        )

    def mark_bounced(self, reason):
        now = self._move_to(NotificationStatus.BOUNCED)
        self.failure_reason = reason
        self.raise_(
            NotificationBounced(
                notification_id=str(self.id),
                recipient=self.recipient,
                message_id=self.message_id,
                reason=reason,
                bounced_at=now,
            )
        )

    def cancel(self, reason):
        now = self._move_to(NotificationStatus.CANCELLED)
        self.failure_reason = reason
        self.raise_(NotificationCancelled(notification_id=str(self.id), reason=reason, cancelled_at=now))

    def retry(self):
        if self.status != NotificationStatus.FAILED.value:
            raise ValidationError({"status": ["Only failed notifications can be retried"]})
        if self.retry_count >= self.max_retries:
            raise ValidationError({"retry_count": ["Maximum retry attempts exceeded"]})

        now = self._move_to(NotificationStatus.PENDING)
        self.failure_reason = None
        self.raise_(NotificationRetried(notification_id=str(self.id), retry_count=self.retry_count, retried_at=now))
