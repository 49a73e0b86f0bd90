"""Tests for the Order aggregate: placement, status and payment state machines, details."""

import json
import re
from datetime import UTC, date, datetime, timedelta

import pytest
from ordering.order.events import (
    OrderCancelled,
    OrderDetailsUpdated,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusChanged,
)
from ordering.order.order import (
    DeliveryAddress,
    Order,
    ensure_future_delivery_date,
    generate_order_number,
)
from protean.exceptions import ValidationError

ADDRESS = DeliveryAddress(
    first_name="Dee",
    last_name="Baker",
    address_line_1="1 Sugar Lane",
    city="London",
    postal_code="E1 6AN",
    country="UK",
)

PRICING = {"subtotal": 50.0, "tax": 4.0, "delivery_fee": 5.0, "total": 59.0}


def _place(**overrides):
    kwargs = {
        "items_data": [
            {"product_id": "prod-1", "product_name": "Carrot Cake", "quantity": 2, "unit_price": 20.0},
            {"product_id": "prod-2", "product_name": "Cookie", "quantity": 4, "unit_price": 2.5},
        ],
        "pricing": PRICING,
        "delivery_address": ADDRESS,
        "customer_id": "cust-001",
        "contact_email": "dee@example.com",
    }
    kwargs.update(overrides)
    return Order.place(**kwargs)


def _walk(order, *statuses):
    for status in statuses:
        order.update_status(status)


class TestOrderNumber:
    def test_format(self):
        number = generate_order_number(datetime(2026, 3, 14, tzinfo=UTC))
        assert re.fullmatch(r"DLB-20260314-[A-Z0-9]{6}", number)

    def test_numbers_differ(self):
        assert len({generate_order_number() for _ in range(20)}) == 20


class TestDeliveryDate:
    def test_future_date_accepted(self):
        tomorrow = date(2026, 1, 2)
        assert ensure_future_delivery_date(tomorrow, today=date(2026, 1, 1)) == tomorrow

    def test_iso_string_accepted(self):
        assert ensure_future_delivery_date("2026-01-05", today=date(2026, 1, 1)) == date(2026, 1, 5)

    @pytest.mark.parametrize("day", [date(2026, 1, 1), date(2025, 12, 31)])
    def test_today_or_past_rejected(self, day):
        with pytest.raises(ValidationError) as exc:
            ensure_future_delivery_date(day, today=date(2026, 1, 1))
        assert exc.value.messages["delivery_date"] == ["Delivery date must be in the future"]

    def test_none_allowed(self):
        assert ensure_future_delivery_date(None) is None


class TestPlaceOrder:
    def test_pending_with_line_totals(self):
        order = _place()

        assert order.status == "pending"
        assert order.payment_status == "pending"
        assert order.total_amount == 59.0
        assert sorted(i.total_price for i in order.items) == [10.0, 40.0]
        assert [h.status for h in order.status_history] == ["pending"]

    def test_order_placed_event(self):
        order = _place()
        event = order._events[0]

        assert isinstance(event, OrderPlaced)
        assert event.customer_name == "Dee Baker"
        assert event.contact_email == "dee@example.com"
        assert event.item_count == 2
        assert json.loads(event.items)[0]["product_name"] == "Carrot Cake"

    def test_requires_items(self):
        with pytest.raises(ValidationError) as exc:
            _place(items_data=[])
        assert exc.value.messages["items"] == ["An order needs at least one item"]


class TestStatusTransitions:
    def test_happy_path(self):
        order = _place()
        _walk(order, "confirmed", "preparing", "ready", "delivered")

        assert order.status == "delivered"
        assert [h.status for h in order.status_history] == [
            "pending",
            "confirmed",
            "preparing",
            "ready",
            "delivered",
        ]

    def test_status_change_event(self):
        order = _place()
        order.update_status("confirmed", notes="Paid by card", created_by="admin@example.com")

        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert (event.previous_status, event.new_status) == ("pending", "confirmed")
        assert event.changed_by == "admin@example.com"
        assert order.status_history[-1].notes == "Paid by card"

    @pytest.mark.parametrize(
        "path, target",
        [
            ((), "preparing"),
            ((), "delivered"),
            (("confirmed",), "ready"),
            (("confirmed", "preparing", "ready", "delivered"), "confirmed"),
        ],
    )
    def test_invalid_transitions(self, path, target):
        order = _place()
        _walk(order, *path)
        with pytest.raises(ValidationError) as exc:
            order.update_status(target)
        assert "status" in exc.value.messages

    def test_unknown_status(self):
        with pytest.raises(ValidationError) as exc:
            _place().update_status("baking")
        assert exc.value.messages["status"] == ["Unknown order status 'baking'"]

    def test_can_transition_to(self):
        order = _place()
        assert order.can_transition_to("confirmed") is True
        assert order.can_transition_to("ready") is False


class TestCancellation:
    @pytest.mark.parametrize("path", [(), ("confirmed",), ("confirmed", "preparing")])
    def test_cancel_open_orders(self, path):
        order = _place()
        _walk(order, *path)

        order.cancel(reason="Changed my mind", cancelled_by="cust-001")

        assert order.status == "cancelled"
        event = order._events[-1]
        assert isinstance(event, OrderCancelled)
        assert event.reason == "Changed my mind"
        assert order.status_history[-1].notes == "Changed my mind"

    def test_cancel_via_update_status(self):
        order = _place()
        order.update_status("cancelled", notes="Out of flour")
        assert order.status == "cancelled"
        assert isinstance(order._events[-1], OrderCancelled)

    @pytest.mark.parametrize("path", [("confirmed", "preparing", "ready"), ("confirmed", "preparing", "ready", "delivered")])
    def test_cannot_cancel_late_orders(self, path):
        order = _place()
        _walk(order, *path)
        with pytest.raises(ValidationError) as exc:
            order.cancel()
        assert exc.value.messages["status"] == [f"Cannot cancel order in {order.status} state"]

    def test_cancelled_is_terminal(self):
        order = _place()
        order.cancel()
        with pytest.raises(ValidationError):
            order.cancel()


class TestPaymentStatus:
    def test_pay_then_refund(self):
        order = _place()
        order.update_payment_status("processing", payment_intent_id="pi_123")
        order.update_payment_status("completed")
        order.update_payment_status("refunded")

        assert order.payment_status == "refunded"
        assert order.payment_intent_id == "pi_123"
        assert isinstance(order._events[-1], PaymentStatusChanged)

    def test_failed_payment_can_retry(self):
        order = _place()
        order.update_payment_status("failed")
        order.update_payment_status("processing")
        assert order.payment_status == "processing"

    @pytest.mark.parametrize("path, target", [((), "refunded"), (("completed", "refunded"), "completed")])
    def test_invalid_payment_transitions(self, path, target):
        order = _place()
        for status in path:
            order.update_payment_status(status)
        with pytest.raises(ValidationError):
            order.update_payment_status(target)

    def test_unknown_payment_status(self):
        with pytest.raises(ValidationError):
            _place().update_payment_status("bounced")


class TestUpdateDetails:
    def test_update_while_pending(self):
        order = _place()
        new_day = datetime.now(UTC).date() + timedelta(days=3)

        order.update_details(special_instructions="Ring twice", delivery_date=new_day)

        assert order.special_instructions == "Ring twice"
        assert order.delivery_date == new_day
        event = order._events[-1]
        assert isinstance(event, OrderDetailsUpdated)
        assert event.address_changed is False

    def test_address_change_flagged(self):
        order = _place()
        address = DeliveryAddress(
            first_name="Dee",
            last_name="Baker",
            address_line_1="2 Icing Road",
            city="Leeds",
            postal_code="LS1 1AA",
            country="UK",
        )
        order.update_details(delivery_address=address)

        assert order.delivery_address.city == "Leeds"
        assert order._events[-1].address_changed is True

    def test_locked_once_preparing(self):
        order = _place()
        _walk(order, "confirmed", "preparing")
        with pytest.raises(ValidationError) as exc:
            order.update_details(special_instructions="Too late")
        assert exc.value.messages["status"] == ["Order details cannot be changed once the order is preparing"]

    def test_past_delivery_date_rejected(self):
        with pytest.raises(ValidationError):
            _place().update_details(delivery_date=date(2020, 1, 1))
