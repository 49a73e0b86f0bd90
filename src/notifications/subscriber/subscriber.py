"""Subscriber aggregate (CQRS): one address on the cake newsletter.

An address is stored once. Unsubscribing keeps the record so the address
can re-join later with the same unsubscribe token.
"""

import secrets
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from notifications.domain import notifications
from notifications.notification.notification import is_valid_email
from notifications.subscriber.events import Subscribed, Unsubscribed


class SubscriptionSource(Enum):
    HERO = "hero"
    INLINE = "inline"
    FOOTER = "footer"
    POPUP = "popup"


class SubscriptionStatus(Enum):
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"


class AlreadySubscribedError(ValidationError):
    """The address is already on the newsletter."""


def normalize_email(email) -> str:
    return (email or "").strip().lower()


@notifications.aggregate
class Subscriber:
    email: String(required=True, max_length=255, unique=True)
    first_name: String(max_length=100)
    source: String(choices=SubscriptionSource, default=SubscriptionSource.HERO.value)
    status: String(choices=SubscriptionStatus, default=SubscriptionStatus.SUBSCRIBED.value)
    unsubscribe_token: String(max_length=100, unique=True)
    subscribed_at: DateTime()
    unsubscribed_at: DateTime()

    @property
    def is_subscribed(self) -> bool:
        return self.status == SubscriptionStatus.SUBSCRIBED.value

    @classmethod
    def subscribe(cls, email, first_name=None, source=SubscriptionSource.HERO.value):
        email = normalize_email(email)
        if not is_valid_email(email):
            raise ValidationError({"email": ["Please enter a valid email address"]})

        now = datetime.now(UTC)
        subscriber = cls(
            email=email,
            first_name=first_name,
            source=source,
            status=SubscriptionStatus.SUBSCRIBED.value,
            unsubscribe_token=secrets.token_urlsafe(32),
            subscribed_at=now,
        )
        subscriber.raise_(
            Subscribed(
                subscriber_id=str(subscriber.id),
                email=email,
                first_name=first_name,
                source=source,
                resubscribed=False,
                subscribed_at=now,
            )
        )
        return subscriber

    def resubscribe(self, first_name=None, source=None):
        if self.is_subscribed:
            raise AlreadySubscribedError({"email": ["This email is already subscribed to our newsletter."]})

        now = datetime.now(UTC)
        self.status = SubscriptionStatus.SUBSCRIBED.value
        if first_name:
            self.first_name = first_name
        if source:
            self.source = source
        self.subscribed_at = now
        self.unsubscribed_at = None

        self.raise_(
            Subscribed(
                subscriber_id=str(self.id),
                email=self.email,
                first_name=self.first_name,
                source=self.source,
                resubscribed=True,
                subscribed_at=now,
            )
        )

    def unsubscribe(self):
        if not self.is_subscribed:
            raise ValidationError({"email": ["This email is not subscribed to our newsletter."]})

        now = datetime.now(UTC)
        self.status = SubscriptionStatus.UNSUBSCRIBED.value
        self.unsubscribed_at = now

        self.raise_(Unsubscribed(subscriber_id=str(self.id), email=self.email, unsubscribed_at=now))
