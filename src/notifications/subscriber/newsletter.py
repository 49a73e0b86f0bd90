"""Subscribe / Unsubscribe commands + handler for the cake newsletter.

Both flows end with an email: CakeWelcome on joining, UnsubscribeConfirmation
on leaving.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from notifications.brand import site_url
from notifications.domain import notifications
from notifications.notification.helpers import send_email
from notifications.notification.notification import NotificationType
from notifications.subscriber.subscriber import (
    AlreadySubscribedError,
    Subscriber,
    SubscriptionSource,
    normalize_email,
)
from shared.utils.queries import fetch_first

logger = structlog.get_logger(__name__)


@notifications.command(part_of="Subscriber")
class Subscribe:
    email: String(required=True, max_length=255)
    first_name: String(max_length=100)
    source: String(choices=SubscriptionSource, default=SubscriptionSource.HERO.value)


@notifications.command(part_of="Subscriber")
class Unsubscribe:
    """Leave the newsletter, identified by address or by unsubscribe token."""

    email: String(max_length=255)
    token: String(max_length=100)


@notifications.command_handler(part_of=Subscriber)
class NewsletterHandler:
    @handle(Subscribe)
    def subscribe(self, command: Subscribe):
        repo = current_domain.repository_for(Subscriber)
        subscriber = fetch_first(Subscriber, email=normalize_email(command.email))

        if subscriber is None:
            subscriber = Subscriber.subscribe(command.email, command.first_name, command.source)
        elif subscriber.is_subscribed:
            raise AlreadySubscribedError({"email": ["This email is already subscribed to our newsletter."]})
        else:
            subscriber.resubscribe(command.first_name, command.source)

        repo.add(subscriber)
        logger.info("New subscriber added", email=subscriber.email, source=subscriber.source)

        send_email(
            NotificationType.CAKE_WELCOME.value,
            subscriber.email,
            {
                "first_name": subscriber.first_name,
                "unsubscribe_url": site_url("unsubscribe", token=subscriber.unsubscribe_token),
            },
            source_event_type="Notifications.Subscribed.v1",
            source_event_id=str(subscriber.id),
        )
        return str(subscriber.id)

    @handle(Unsubscribe)
    def unsubscribe(self, command: Unsubscribe):
        if not command.email and not command.token:
            raise ValidationError({"email": ["Either email or unsubscribe token is required"]})

        if command.token:
            subscriber = fetch_first(Subscriber, unsubscribe_token=command.token)
        else:
            subscriber = fetch_first(Subscriber, email=normalize_email(command.email))
        if subscriber is None:
            raise ObjectNotFoundError("Subscriber not found")

        subscriber.unsubscribe()
        current_domain.repository_for(Subscriber).add(subscriber)
        logger.info("Subscriber left", email=subscriber.email)

        send_email(
            NotificationType.UNSUBSCRIBE_CONFIRMATION.value,
            subscriber.email,
            {
                "email": subscriber.email,
                "unsubscribe_date": subscriber.unsubscribed_at.strftime("%d %B %Y"),
                "resubscribe_url": site_url(""),
            },
            source_event_type="Notifications.Unsubscribed.v1",
            source_event_id=str(subscriber.id),
        )
        return str(subscriber.id)
