"""Read-side queries over Notification records."""

from collections import Counter

from notifications.notification.notification import Notification, NotificationStatus
from shared.utils.queries import fetch_all, iso, sort_key_datetime


def notification_to_dict(notification) -> dict:
    return {
        "notification_id": str(notification.id),
        "recipient": notification.recipient,
        "notification_type": notification.notification_type,
        "channel": notification.channel,
        "subject": notification.subject,
        "status": notification.status,
        "template_name": notification.template_name,
        "source_event_type": notification.source_event_type,
        "source_event_id": notification.source_event_id,
        "message_id": notification.message_id,
        "failure_reason": notification.failure_reason,
        "retry_count": notification.retry_count,
        "max_retries": notification.max_retries,
        "scheduled_for": iso(notification.scheduled_for),
        "sent_at": iso(notification.sent_at),
        "delivered_at": iso(notification.delivered_at),
        "created_at": iso(notification.created_at),
    }


def _newest_first(records) -> list:
    return sorted(records, key=lambda n: sort_key_datetime(n.created_at), reverse=True)


def notification_by_id(notification_id) -> dict | None:
    found = fetch_all(Notification, id=notification_id)
    return notification_to_dict(found[0]) if found else None


def recipient_notifications(recipient: str, status: str | None = None, limit: int = 20, offset: int = 0) -> dict:
    filters = {"recipient": recipient}
    if status:
        filters["status"] = status
    records = _newest_first(fetch_all(Notification, **filters))
    return {
        "notifications": [notification_to_dict(n) for n in records[offset : offset + limit]],
        "total": len(records),
        "limit": limit,
        "offset": offset,
    }


def failed_notifications(limit: int = 50) -> list[dict]:
    """Failed emails that still have retries left, newest first."""
    failed = [
        n
        for n in fetch_all(Notification, status=NotificationStatus.FAILED.value)
        if n.retry_count < n.max_retries
    ]
    return [notification_to_dict(n) for n in _newest_first(failed)[:limit]]


def notification_stats() -> dict:
    records = fetch_all(Notification)
    return {
        "total": len(records),
        "by_status": dict(Counter(n.status for n in records)),
        "by_type": dict(Counter(n.notification_type for n in records)),
    }
