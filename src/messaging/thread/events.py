"""Domain events for the MessageThread aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from messaging.domain import messaging


@messaging.event(part_of="MessageThread")
class ThreadStarted:
    """A customer opened a new conversation with the bakery."""

    __version__ = 1

    thread_id: Identifier(required=True)
    customer_id: Identifier()
    subject: String(required=True, sanitize=False)
    priority: String(required=True)
    order_id: Identifier()
    started_at: DateTime(required=True)


@messaging.event(part_of="MessageThread")
class MessagePosted:
    __version__ = 1

    thread_id: Identifier(required=True)
    message_id: Identifier(required=True)
    sender_id: Identifier()
    is_from_customer: Boolean(required=True)
    thread_status: String(required=True)
    posted_at: DateTime(required=True)


@messaging.event(part_of="MessageThread")
class MessagesRead:
    __version__ = 1

    thread_id: Identifier(required=True)
    reader: String(required=True)
    messages_read: Integer(required=True)
    read_at: DateTime(required=True)


@messaging.event(part_of="MessageThread")
class ThreadStatusChanged:
    __version__ = 1

    thread_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_at: DateTime(required=True)


@messaging.event(part_of="MessageThread")
class ThreadPriorityChanged:
    __version__ = 1

    thread_id: Identifier(required=True)
    previous_priority: String(required=True)
    new_priority: String(required=True)
    changed_at: DateTime(required=True)
