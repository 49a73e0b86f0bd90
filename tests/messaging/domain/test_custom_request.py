"""Tests for the CustomRequest aggregate and its review workflow."""

import json
from datetime import UTC, date, datetime, timedelta

import pytest
from messaging.request.custom_request import CustomRequest
from messaging.request.events import CustomRequestStatusChanged, CustomRequestSubmitted, CustomRequestUpdated
from protean.exceptions import ValidationError


def _future(days=14):
    return datetime.now(UTC).date() + timedelta(days=days)


@pytest.fixture()
def request_():
    return CustomRequest.submit(
        customer_id="cust-001",
        request_type="custom_cake",
        title="Unicorn cake",
        description="Three tiers with a rainbow inside",
        specifications={"servings": 40, "flavors": ["vanilla"]},
        budget_range="100-150",
        event_date=_future(),
    )


class TestSubmit:
    def test_pending_with_canonical_specs(self, request_):
        assert request_.status == "pending"
        assert json.loads(request_.specifications) == {"flavors": ["vanilla"], "servings": 40}
        assert request_.quoted_price is None

    def test_submitted_event(self, request_):
        event = request_._events[0]
        assert isinstance(event, CustomRequestSubmitted)
        assert event.request_type == "custom_cake"
        assert event.event_date == request_.event_date

    def test_title_trimmed_and_required(self):
        with pytest.raises(ValidationError) as exc:
            CustomRequest.submit("cust-001", "other", "  ", "Something special")
        assert exc.value.messages["title"] == ["Title is required"]

    def test_description_length(self):
        with pytest.raises(ValidationError) as exc:
            CustomRequest.submit("cust-001", "other", "Big order", "x" * 2001)
        assert exc.value.messages["description"] == ["Description too long"]

    @pytest.mark.parametrize("day", [date(2020, 1, 1), datetime.now(UTC).date()])
    def test_event_date_must_be_future(self, day):
        with pytest.raises(ValidationError) as exc:
            CustomRequest.submit("cust-001", "other", "Big order", "Lots of cookies", event_date=day)
        assert exc.value.messages["event_date"] == ["Event date must be in the future"]

    def test_specifications_must_be_an_object(self):
        with pytest.raises(ValidationError) as exc:
            CustomRequest.submit("cust-001", "other", "Big order", "Lots", specifications="[1]")
        assert exc.value.messages["specifications"] == ["specifications must be an object"]


class TestOwnerEdits:
    def test_owner_can_edit_pending_request(self, request_):
        request_.update("cust-001", title="Unicorn cake with stars", budget_range="150-200")

        assert request_.title == "Unicorn cake with stars"
        assert request_.budget_range == "150-200"
        assert request_.description == "Three tiers with a rainbow inside"
        assert isinstance(request_._events[-1], CustomRequestUpdated)

    def test_other_customer_cannot_edit(self, request_):
        with pytest.raises(ValidationError) as exc:
            request_.update("cust-002", title="Mine now")
        assert exc.value.messages["customer_id"] == ["Only the requesting customer can edit this request"]

    def test_no_edits_after_review_starts(self, request_):
        request_.review()
        with pytest.raises(ValidationError) as exc:
            request_.update("cust-001", title="Changed")
        assert exc.value.messages["status"] == ["Custom request can only be edited while pending"]


class TestWorkflow:
    def test_quote_approve_complete(self, request_):
        request_.review(admin_notes="Checking tier support")
        request_.quote(129.999, admin_notes="Includes delivery")
        request_.approve()
        request_.complete(order_id="ord-9")

        assert request_.status == "completed"
        assert request_.quoted_price == 130.0
        assert str(request_.order_id) == "ord-9"
        assert request_.admin_notes == "Includes delivery"

    def test_status_change_event(self, request_):
        request_.quote(80.0)
        event = request_._events[-1]
        assert isinstance(event, CustomRequestStatusChanged)
        assert (event.previous_status, event.new_status, event.quoted_price) == ("pending", "quoted", 80.0)

    def test_quote_can_go_back_to_review(self, request_):
        request_.quote(80.0)
        request_.review()
        assert request_.status == "reviewing"

    def test_negative_quote_rejected(self, request_):
        with pytest.raises(ValidationError) as exc:
            request_.quote(-1)
        assert exc.value.messages["quoted_price"] == ["Quoted price must be zero or more"]

    def test_cannot_approve_without_quote(self, request_):
        with pytest.raises(ValidationError) as exc:
            request_.approve()
        assert exc.value.messages["status"] == ["Cannot transition from pending to approved"]

    def test_declined_is_terminal(self, request_):
        request_.decline(admin_notes="Fully booked that weekend")
        assert request_.admin_notes == "Fully booked that weekend"
        with pytest.raises(ValidationError):
            request_.review()

    def test_rejected_quote_leaves_price_untouched(self, request_):
        request_.decline()
        with pytest.raises(ValidationError):
            request_.quote(95.0)
        assert request_.quoted_price is None

    def test_rejected_completion_leaves_order_untouched(self, request_):
        with pytest.raises(ValidationError) as exc:
            request_.complete(order_id="ord-1")
        assert exc.value.messages["status"] == ["Cannot transition from pending to completed"]
        assert request_.order_id is None
