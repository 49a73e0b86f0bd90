"""Read-side queries over newsletter subscribers."""

from collections import Counter

from notifications.subscriber.subscriber import Subscriber, SubscriptionStatus
from shared.utils.queries import fetch_all


def subscriber_stats() -> dict:
    records = fetch_all(Subscriber)
    active = [s for s in records if s.status == SubscriptionStatus.SUBSCRIBED.value]
    return {
        "total": len(records),
        "subscribed": len(active),
        "unsubscribed": len(records) - len(active),
        "by_source": dict(Counter(s.source for s in active)),
    }
