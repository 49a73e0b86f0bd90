"""Read-side queries for message threads."""

import json
from dataclasses import dataclass, field

from messaging.thread.thread import MessageThread, Reader
from shared.utils.queries import fetch_all, fetch_first, iso, sort_key_datetime


def message_to_dict(message) -> dict:
    return {
        "id": str(message.id),
        "sender_id": str(message.sender_id) if message.sender_id else None,
        "content": message.content,
        "is_from_customer": message.is_from_customer,
        "is_read": message.is_read,
        "attachments": json.loads(message.attachments) if message.attachments else None,
        "created_at": iso(message.created_at),
    }


def _summary(thread: MessageThread, reader: Reader) -> dict:
    return {
        "id": str(thread.id),
        "customer_id": str(thread.customer_id) if thread.customer_id else None,
        "subject": thread.subject,
        "status": thread.status,
        "priority": thread.priority,
        "order_id": str(thread.order_id) if thread.order_id else None,
        "message_count": len(thread.messages),
        "unread_count": thread.unread_for(reader),
        "last_message_at": iso(thread.last_message_at),
        "created_at": iso(thread.created_at),
        "updated_at": iso(thread.updated_at),
    }


def thread_by_id(thread_id: str) -> dict | None:
    """The thread with its messages oldest first.

    ``unread_count`` counts staff messages the customer has not read yet.
    """
    thread = fetch_first(MessageThread, id=thread_id)
    if thread is None:
        return None
    data = _summary(thread, Reader.CUSTOMER)
    messages = sorted(thread.messages, key=lambda m: sort_key_datetime(m.created_at))
    data["messages"] = [message_to_dict(m) for m in messages]
    return data


@dataclass
class ThreadFilter:
    status: list[str] = field(default_factory=list)
    priority: list[str] = field(default_factory=list)
    has_order: bool | None = None
    unread_only: bool = False
    search: str | None = None
    limit: int = 20
    offset: int = 0

    def matches(self, thread: MessageThread, reader: Reader) -> bool:
        if self.status and thread.status not in self.status:
            return False
        if self.priority and thread.priority not in self.priority:
            return False
        if self.has_order is not None and bool(thread.order_id) != self.has_order:
            return False
        if self.unread_only and thread.unread_for(reader) == 0:
            return False
        if self.search:
            term = self.search.lower()
            in_subject = term in (thread.subject or "").lower()
            if not in_subject and not any(term in (m.content or "").lower() for m in thread.messages):
                return False
        return True


def _list(threads, filters: ThreadFilter, reader: Reader) -> list[dict]:
    matching = [t for t in threads if filters.matches(t, reader)]
    matching.sort(
        key=lambda t: (sort_key_datetime(t.last_message_at), sort_key_datetime(t.updated_at)),
        reverse=True,
    )
    page = matching[filters.offset : filters.offset + filters.limit]
    return [_summary(t, reader) for t in page]


def customer_threads(customer_id: str, filters: ThreadFilter | None = None) -> list[dict]:
    """A customer's inbox; unread counts are messages from the bakery."""
    return _list(fetch_all(MessageThread, customer_id=customer_id), filters or ThreadFilter(), Reader.CUSTOMER)


def all_threads(filters: ThreadFilter | None = None) -> list[dict]:
    """The bakery's inbox; unread counts are messages from customers."""
    return _list(fetch_all(MessageThread), filters or ThreadFilter(), Reader.STAFF)
