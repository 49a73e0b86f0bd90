"""Queue a templated bakery email; used by every notification producer."""

import json

import structlog
from protean.utils.globals import current_domain

from notifications.notification.notification import Notification
from notifications.templates import get_template, with_branding

logger = structlog.get_logger(__name__)


def send_email(
    notification_type: str,
    recipient: str,
    context: dict,
    source_event_type: str | None = None,
    source_event_id: str | None = None,
    scheduled_for=None,
) -> str:
    """Render the ``notification_type`` template and queue it for ``recipient``.

    The branded context is stored with the notification so the email can be
    re-rendered later. Unscheduled emails are sent by the dispatcher as soon
    as the notification is saved. Returns the notification id.
    """
    template = get_template(notification_type)
    context = with_branding(context)
    message = template.render(context)

    notification = Notification.create(
        recipient=recipient,
        notification_type=notification_type,
        subject=message["subject"],
        body=message["body"],
        html_body=message.get("html_body"),
        template_name=template.__name__,
        context_data=json.dumps(context, default=str),
        source_event_type=source_event_type,
        source_event_id=source_event_id,
        scheduled_for=scheduled_for,
    )
    current_domain.repository_for(Notification).add(notification)

    logger.info(
        "Email queued",
        notification_id=str(notification.id),
        notification_type=notification_type,
        scheduled=scheduled_for is not None,
    )
    return str(notification.id)
