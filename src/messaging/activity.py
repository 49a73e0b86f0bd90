"""Inbox-wide figures: stats, unread badges and the recent activity feed."""

from collections import Counter

from messaging.request.custom_request import CustomRequest, RequestStatus
from messaging.thread.thread import MessageThread, Reader, ThreadPriority, ThreadStatus
from shared.utils.queries import fetch_all, iso, sort_key_datetime


def _threads(customer_id=None):
    return fetch_all(MessageThread, customer_id=customer_id) if customer_id else fetch_all(MessageThread)


def _requests(customer_id=None):
    return fetch_all(CustomRequest, customer_id=customer_id) if customer_id else fetch_all(CustomRequest)


def message_stats(customer_id: str | None = None) -> dict:
    """Thread, message and custom request totals, optionally for one customer."""
    threads = _threads(customer_id)
    messages = [m for t in threads for m in t.messages]
    thread_status = Counter(t.status for t in threads)
    thread_priority = Counter(t.priority for t in threads)
    request_status = Counter(r.status for r in _requests(customer_id))

    return {
        "threads": {
            "total": len(threads),
            **{status.value: thread_status.get(status.value, 0) for status in ThreadStatus},
            "high_priority": thread_priority.get(ThreadPriority.HIGH.value, 0),
            "urgent": thread_priority.get(ThreadPriority.URGENT.value, 0),
        },
        "messages": {
            "total": len(messages),
            "unread": sum(1 for m in messages if not m.is_read),
            "from_customers": sum(1 for m in messages if m.is_from_customer),
            "from_staff": sum(1 for m in messages if not m.is_from_customer),
        },
        "custom_requests": {
            "total": sum(request_status.values()),
            **{status.value: request_status.get(status.value, 0) for status in RequestStatus},
        },
    }


def unread_count(customer_id: str) -> int:
    """Messages from the bakery the customer has not read yet."""
    return sum(t.unread_for(Reader.CUSTOMER) for t in _threads(customer_id))


def recent_activity(customer_id: str | None = None, limit: int = 10) -> list[dict]:
    """Messages and custom requests merged into one feed, newest first."""
    entries = []
    for thread in _threads(customer_id):
        for message in thread.messages:
            entries.append(
                {
                    "activity_type": "message",
                    "id": str(message.id),
                    "thread_id": str(thread.id),
                    "subject": thread.subject,
                    "content": message.content,
                    "is_from_customer": message.is_from_customer,
                    "created_at": message.created_at,
                }
            )
    for request in _requests(customer_id):
        entries.append(
            {
                "activity_type": "custom_request",
                "id": str(request.id),
                "title": request.title,
                "status": request.status,
                "request_type": request.request_type,
                "created_at": request.created_at,
            }
        )

    entries.sort(key=lambda e: sort_key_datetime(e["created_at"]), reverse=True)
    for entry in entries[:limit]:
        entry["created_at"] = iso(entry["created_at"])
    return entries[:limit]
