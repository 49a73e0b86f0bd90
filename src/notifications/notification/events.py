"""Domain events raised as a bakery email moves through delivery."""

from protean.fields import DateTime, Identifier, Integer, String

from notifications.domain import notifications


@notifications.event(part_of="Notification")
class NotificationCreated:
    """An email was rendered and queued, either for now or for ``scheduled_for``."""

    __version__ = 1

    notification_id: Identifier(required=True)
    notification_type: String(required=True)
    recipient: String(required=True)
    subject: String(sanitize=False)
    source_event_type: String()
    source_event_id: String()
    scheduled_for: DateTime()
    created_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationSent:
    __version__ = 1

    notification_id: Identifier(required=True)
    notification_type: String(required=True)
    recipient: String(required=True)
    message_id: String()
    sent_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationDelivered:
    """The mail provider confirmed the message reached the inbox."""

    __version__ = 1

    notification_id: Identifier(required=True)
    message_id: String()
    delivered_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationFailed:
    __version__ = 1

    notification_id: Identifier(required=True)
    recipient: String(required=True)
    reason: String(required=True)
    retry_count: Integer(required=True)
    max_retries: Integer(required=True)
    failed_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationBounced:
    """The recipient's mail server refused the message for good."""

    __version__ = 1

    notification_id: Identifier(required=True)
    recipient: String(required=True)
    message_id: String()
    reason: String(required=True)
    bounced_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationCancelled:
    __version__ = 1

    notification_id: Identifier(required=True)
    reason: String(required=True)
    cancelled_at: DateTime(required=True)


@notifications.event(part_of="Notification")
class NotificationRetried:
    """A failed email went back to the queue for another attempt."""

    __version__ = 1

    notification_id: Identifier(required=True)
    retry_count: Integer(required=True)
    retried_at: DateTime(required=True)
