"""Application tests for inbox statistics, unread badges and the activity feed."""

from messaging.activity import message_stats, recent_activity, unread_count
from messaging.request.lifecycle import SubmitCustomRequest
from messaging.thread.conversation import ChangeThreadPriority, MarkThreadRead, PostMessage, StartThread
from protean.utils.globals import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _start(subject, customer_id="cust-001"):
    return _process(StartThread(customer_id=customer_id, subject=subject, content=f"About {subject}"))


def _reply(thread_id, content="Thanks for asking"):
    _process(PostMessage(thread_id=thread_id, sender_id="staff-1", content=content, is_from_customer=False))


def _submit(title, customer_id="cust-001"):
    return _process(
        SubmitCustomRequest(customer_id=customer_id, request_type="other", title=title, description="Details")
    )


class TestMessageStats:
    def test_totals(self):
        first = _start("Cake")
        _start("Cookies", customer_id="cust-002")
        _reply(first)
        _process(ChangeThreadPriority(thread_id=first, priority="urgent"))
        _submit("Macarons")

        stats = message_stats()

        assert stats["threads"] == {
            "total": 2,
            "open": 1,
            "closed": 0,
            "pending": 1,
            "high_priority": 0,
            "urgent": 1,
        }
        assert stats["messages"] == {"total": 3, "unread": 3, "from_customers": 2, "from_staff": 1}
        assert stats["custom_requests"]["total"] == 1
        assert stats["custom_requests"]["pending"] == 1

    def test_scoped_to_customer(self):
        _start("Cake")
        _start("Cookies", customer_id="cust-002")
        _submit("Macarons", customer_id="cust-002")

        stats = message_stats("cust-001")
        assert stats["threads"]["total"] == 1
        assert stats["custom_requests"]["total"] == 0


class TestUnreadCount:
    def test_counts_bakery_replies(self):
        first = _start("Cake")
        second = _start("Cookies")
        _reply(first)
        _reply(second)
        _reply(second, "Anything else?")

        assert unread_count("cust-001") == 3

        _process(MarkThreadRead(thread_id=second, reader="customer"))
        assert unread_count("cust-001") == 1

    def test_own_messages_do_not_count(self):
        _start("Cake")
        assert unread_count("cust-001") == 0


class TestRecentActivity:
    def test_messages_and_requests_interleaved(self):
        thread_id = _start("Cake")
        _submit("Macarons")
        _reply(thread_id, "We can do that")

        feed = recent_activity()

        assert [e["activity_type"] for e in feed] == ["message", "custom_request", "message"]
        assert feed[0]["content"] == "We can do that"
        assert feed[1]["title"] == "Macarons"
        assert isinstance(feed[0]["created_at"], str)

    def test_limit_and_customer_scope(self):
        for n in range(3):
            _start(f"Question {n}")
        _start("Elsewhere", customer_id="cust-002")

        assert len(recent_activity(limit=2)) == 2
        assert {e["subject"] for e in recent_activity("cust-002")} == {"Elsewhere"}
