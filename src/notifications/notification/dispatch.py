"""Hands queued emails to the email channel.

``NotificationDispatcher`` reacts to NotificationCreated and
NotificationRetried. Emails scheduled for later are left Pending until
``SendDueNotifications`` picks them up. A channel error is recorded on the
Notification as a failed attempt and never reaches the caller.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from notifications.channel import get_channel
from notifications.domain import notifications
from notifications.notification.events import NotificationCreated, NotificationRetried
from notifications.notification.notification import Notification, NotificationStatus

logger = structlog.get_logger(__name__)


def deliver(notification: Notification) -> bool:
    """Send a Pending notification through its channel and record the outcome.

    Returns True when the channel accepted the message.
    """
    try:
        result = get_channel(notification.channel).send(
            to=notification.recipient,
            subject=notification.subject or "",
            body=notification.body,
            html_body=notification.html_body,
        )
    except Exception as exc:
        logger.error("Email channel raised", notification_id=str(notification.id), error=str(exc))
        result = {"status": "failed", "error": str(exc)[:500]}

    if result.get("status") == "sent":
        notification.mark_sent(message_id=result.get("message_id"))
        logger.info(
            "Email sent",
            notification_id=str(notification.id),
            notification_type=notification.notification_type,
            message_id=result.get("message_id"),
        )
        return True

    notification.mark_failed(result.get("error") or "Unknown dispatch error")
    logger.warning(
        "Email not sent",
        notification_id=str(notification.id),
        retry_count=notification.retry_count,
        error=notification.failure_reason,
    )
    return False


def dispatch(notification_id) -> None:
    """Load one notification and deliver it if it is still Pending."""
    repo = current_domain.repository_for(Notification)
    try:
        notification = repo.get(notification_id)
    except ObjectNotFoundError:
        logger.error("Notification to dispatch was not found", notification_id=str(notification_id))
        return

    if notification.status != NotificationStatus.PENDING.value:
        logger.info("Notification already handled", notification_id=str(notification_id), status=notification.status)
        return

    deliver(notification)
    repo.add(notification)


@notifications.event_handler(part_of=Notification)
class NotificationDispatcher:
    @handle(NotificationCreated)
    def on_notification_created(self, event: NotificationCreated) -> None:
        if event.scheduled_for is not None:
            logger.info(
                "Email scheduled for later",
                notification_id=str(event.notification_id),
                scheduled_for=str(event.scheduled_for),
            )
            return
        dispatch(event.notification_id)

    @handle(NotificationRetried)
    def on_notification_retried(self, event: NotificationRetried) -> None:
        dispatch(event.notification_id)
