"""Domain events for the newsletter Subscriber aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from notifications.domain import notifications


@notifications.event(part_of="Subscriber")
class Subscribed:
    """An address joined (or re-joined) the newsletter."""

    __version__ = 1

    subscriber_id: Identifier(required=True)
    email: String(required=True)
    first_name: String()
    source: String(required=True)
    resubscribed: Boolean(default=False)
    subscribed_at: DateTime(required=True)


@notifications.event(part_of="Subscriber")
class Unsubscribed:
    __version__ = 1

    subscriber_id: Identifier(required=True)
    email: String(required=True)
    unsubscribed_at: DateTime(required=True)
