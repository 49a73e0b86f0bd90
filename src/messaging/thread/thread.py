"""MessageThread aggregate: a conversation between a customer and the bakery.

Thread status follows who is expected to speak next:
    open     the bakery owes the customer a reply
    pending  the bakery replied and is waiting on the customer
    closed   the conversation is over and accepts no new messages

A customer message reopens a pending thread; a staff reply moves an open
thread to pending.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, String, Text

from messaging.domain import messaging
from messaging.thread.attachments import normalize_attachments
from messaging.thread.events import (
    MessagePosted,
    MessagesRead,
    ThreadPriorityChanged,
    ThreadStarted,
    ThreadStatusChanged,
)


class ThreadStatus(Enum):
    OPEN = "open"
    CLOSED = "closed"
    PENDING = "pending"


class ThreadPriority(Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class Reader(Enum):
    CUSTOMER = "customer"
    STAFF = "staff"


MAX_CONTENT_LENGTH = 5000


@messaging.entity(part_of="MessageThread")
class Message:
    sender_id: Identifier()
    content: Text(required=True, sanitize=False)
    is_from_customer: Boolean(default=True)
    is_read: Boolean(default=False)
    attachments: Text(sanitize=False)
    created_at: DateTime()

    def addressed_to(self, reader) -> bool:
        """Customers read staff messages and staff read customer messages."""
        return self.is_from_customer == (Reader(reader) is Reader.STAFF)


@messaging.aggregate
class MessageThread:
    customer_id: Identifier()
    subject: String(required=True, max_length=200, sanitize=False)
    status: String(choices=ThreadStatus, default=ThreadStatus.OPEN.value)
    priority: String(choices=ThreadPriority, default=ThreadPriority.NORMAL.value)
    order_id: Identifier()
    messages: HasMany(Message)
    created_at: DateTime()
    updated_at: DateTime()
    last_message_at: DateTime()

    @classmethod
    def start(cls, customer_id, subject, content, priority=None, order_id=None, attachments=None):
        subject = (subject or "").strip()
        if not subject:
            raise ValidationError({"subject": ["Subject is required"]})

        now = datetime.now(UTC)
        thread = cls(
            customer_id=customer_id,
            subject=subject,
            status=ThreadStatus.OPEN.value,
            priority=priority or ThreadPriority.NORMAL.value,
            order_id=order_id,
            created_at=now,
            updated_at=now,
        )
        thread.raise_(
            ThreadStarted(
                thread_id=str(thread.id),
                customer_id=str(customer_id) if customer_id else None,
                subject=subject,
                priority=thread.priority,
                order_id=str(order_id) if order_id else None,
                started_at=now,
            )
        )
        thread.post(customer_id, content, is_from_customer=True, attachments=attachments)
        return thread

    def post(self, sender_id, content, is_from_customer, attachments=None):
        """Append a message and move the thread to whoever must answer next."""
        if self.status == ThreadStatus.CLOSED.value:
            raise ValidationError({"thread": ["Cannot post to a closed thread"]})

        content = (content or "").strip()
        if not content:
            raise ValidationError({"content": ["Message content is required"]})
        if len(content) > MAX_CONTENT_LENGTH:
            raise ValidationError({"content": ["Message content too long"]})

        now = datetime.now(UTC)
        message = Message(
            sender_id=sender_id,
            content=content,
            is_from_customer=is_from_customer,
            is_read=False,
            attachments=normalize_attachments(attachments),
            created_at=now,
        )
        self.add_messages(message)

        if is_from_customer and self.status == ThreadStatus.PENDING.value:
            self.status = ThreadStatus.OPEN.value
        elif not is_from_customer and self.status == ThreadStatus.OPEN.value:
            self.status = ThreadStatus.PENDING.value

        self.last_message_at = now
        self.updated_at = now

        self.raise_(
            MessagePosted(
                thread_id=str(self.id),
                message_id=str(message.id),
                sender_id=str(sender_id) if sender_id else None,
                is_from_customer=is_from_customer,
                thread_status=self.status,
                posted_at=now,
            )
        )
        return message

    def unread_for(self, reader) -> int:
        return sum(1 for m in self.messages if not m.is_read and m.addressed_to(reader))

    def mark_read(self, reader):
        """Mark every message addressed to ``reader`` as read. Returns the count."""
        unread = [m for m in self.messages if not m.is_read and m.addressed_to(reader)]
        if not unread:
            return 0

        for message in unread:
            message.is_read = True

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            MessagesRead(
                thread_id=str(self.id),
                reader=Reader(reader).value,
                messages_read=len(unread),
                read_at=now,
            )
        )
        return len(unread)

    def change_status(self, new_status):
        try:
            target = ThreadStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown thread status '{new_status}'"]}) from None
        if target.value == self.status:
            return

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            ThreadStatusChanged(
                thread_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )

    def change_priority(self, new_priority):
        try:
            target = ThreadPriority(new_priority)
        except ValueError:
            raise ValidationError({"priority": [f"Unknown thread priority '{new_priority}'"]}) from None
        if target.value == self.priority:
            return

        previous = self.priority
        now = datetime.now(UTC)
        self.priority = target.value
        self.updated_at = now
        self.raise_(
            ThreadPriorityChanged(
                thread_id=str(self.id),
                previous_priority=previous,
                new_priority=target.value,
                changed_at=now,
            )
        )
