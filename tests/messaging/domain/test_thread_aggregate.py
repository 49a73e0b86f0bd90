"""Tests for the MessageThread aggregate: posting, status flow and read state."""

import pytest
from messaging.thread.events import (
    MessagePosted,
    MessagesRead,
    ThreadPriorityChanged,
    ThreadStarted,
    ThreadStatusChanged,
)
from messaging.thread.thread import MAX_CONTENT_LENGTH, MessageThread, Reader
from protean.exceptions import ValidationError


@pytest.fixture()
def thread():
    return MessageThread.start(
        customer_id="cust-001",
        subject="Birthday cake lettering",
        content="Can the lettering be gold?",
    )


class TestStartThread:
    def test_opens_with_first_message(self, thread):
        assert thread.status == "open"
        assert thread.priority == "normal"
        assert len(thread.messages) == 1
        assert thread.messages[0].is_from_customer is True
        assert thread.last_message_at is not None

    def test_events(self, thread):
        assert isinstance(thread._events[0], ThreadStarted)
        assert isinstance(thread._events[1], MessagePosted)

    def test_priority_and_order(self):
        thread = MessageThread.start("cust-001", "Order query", "Where is it?", priority="urgent", order_id="ord-1")
        assert thread.priority == "urgent"
        assert str(thread.order_id) == "ord-1"
        assert thread._events[0].order_id == "ord-1"

    def test_subject_required(self):
        with pytest.raises(ValidationError) as exc:
            MessageThread.start("cust-001", "   ", "Hello")
        assert exc.value.messages["subject"] == ["Subject is required"]


class TestPosting:
    def test_staff_reply_moves_open_to_pending(self, thread):
        thread.post("staff-1", "Yes, gold works!", is_from_customer=False)
        assert thread.status == "pending"
        assert thread._events[-1].thread_status == "pending"

    def test_customer_message_reopens_pending(self, thread):
        thread.post("staff-1", "Yes, gold works!", is_from_customer=False)
        thread.post("cust-001", "Great, thanks", is_from_customer=True)
        assert thread.status == "open"

    def test_customer_follow_up_keeps_open(self, thread):
        thread.post("cust-001", "Also, can it be round?", is_from_customer=True)
        assert thread.status == "open"
        assert len(thread.messages) == 2

    def test_closed_thread_rejects_messages(self, thread):
        thread.change_status("closed")
        with pytest.raises(ValidationError) as exc:
            thread.post("cust-001", "One more thing", is_from_customer=True)
        assert exc.value.messages["thread"] == ["Cannot post to a closed thread"]

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_content_required(self, thread, content):
        with pytest.raises(ValidationError) as exc:
            thread.post("cust-001", content, is_from_customer=True)
        assert exc.value.messages["content"] == ["Message content is required"]

    def test_content_length_limit(self, thread):
        with pytest.raises(ValidationError) as exc:
            thread.post("cust-001", "x" * (MAX_CONTENT_LENGTH + 1), is_from_customer=True)
        assert exc.value.messages["content"] == ["Message content too long"]

    def test_attachments_stored(self, thread):
        message = thread.post(
            "cust-001",
            "Here is the design",
            is_from_customer=True,
            attachments={"images": [{"url": "https://cdn.example.com/design.png"}]},
        )
        assert "design.png" in message.attachments


class TestReadState:
    def test_unread_counts_are_per_side(self, thread):
        thread.post("staff-1", "Yes", is_from_customer=False)
        thread.post("staff-1", "Anything else?", is_from_customer=False)

        assert thread.unread_for(Reader.CUSTOMER) == 2
        assert thread.unread_for(Reader.STAFF) == 1

    def test_mark_read_only_touches_the_readers_messages(self, thread):
        thread.post("staff-1", "Yes", is_from_customer=False)

        assert thread.mark_read("customer") == 1
        assert thread.unread_for(Reader.CUSTOMER) == 0
        assert thread.unread_for(Reader.STAFF) == 1
        event = thread._events[-1]
        assert isinstance(event, MessagesRead)
        assert (event.reader, event.messages_read) == ("customer", 1)

    def test_nothing_to_mark(self, thread):
        event_count = len(thread._events)
        assert thread.mark_read("customer") == 0
        assert len(thread._events) == event_count


class TestTriage:
    def test_change_status(self, thread):
        thread.change_status("closed")
        assert thread.status == "closed"
        event = thread._events[-1]
        assert isinstance(event, ThreadStatusChanged)
        assert (event.previous_status, event.new_status) == ("open", "closed")

    def test_same_status_is_a_no_op(self, thread):
        event_count = len(thread._events)
        thread.change_status("open")
        assert len(thread._events) == event_count

    def test_reopen_closed_thread(self, thread):
        thread.change_status("closed")
        thread.change_status("open")
        thread.post("cust-001", "Back again", is_from_customer=True)
        assert len(thread.messages) == 2

    def test_change_priority(self, thread):
        thread.change_priority("high")
        assert thread.priority == "high"
        assert isinstance(thread._events[-1], ThreadPriorityChanged)

    def test_unknown_values(self, thread):
        with pytest.raises(ValidationError):
            thread.change_status("archived")
        with pytest.raises(ValidationError):
            thread.change_priority("critical")
