"""CustomRequest aggregate: a bespoke bake the customer wants quoted.

State Machine:
    pending   → reviewing | quoted | declined
    reviewing → quoted | declined
    quoted    → approved | declined | reviewing
    approved  → completed
    declined, completed are terminal
"""

from datetime import UTC, date, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Date, DateTime, Float, Identifier, String, Text

from messaging.domain import messaging
from messaging.request.events import (
    CustomRequestStatusChanged,
    CustomRequestSubmitted,
    CustomRequestUpdated,
)
from messaging.request.specifications import normalize_reference_images, normalize_specifications


class RequestType(Enum):
    CUSTOM_CAKE = "custom_cake"
    CUSTOM_COOKIES = "custom_cookies"
    SPECIAL_FLAVOR = "special_flavor"
    CUSTOM_DECORATION = "custom_decoration"
    BULK_ORDER = "bulk_order"
    OTHER = "other"


class RequestStatus(Enum):
    PENDING = "pending"
    REVIEWING = "reviewing"
    QUOTED = "quoted"
    APPROVED = "approved"
    DECLINED = "declined"
    COMPLETED = "completed"


_VALID_TRANSITIONS = {
    RequestStatus.PENDING: {RequestStatus.REVIEWING, RequestStatus.QUOTED, RequestStatus.DECLINED},
    RequestStatus.REVIEWING: {RequestStatus.QUOTED, RequestStatus.DECLINED},
    RequestStatus.QUOTED: {RequestStatus.APPROVED, RequestStatus.DECLINED, RequestStatus.REVIEWING},
    RequestStatus.APPROVED: {RequestStatus.COMPLETED},
    RequestStatus.DECLINED: set(),  # Terminal
    RequestStatus.COMPLETED: set(),  # Terminal
}


def _future_event_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    elif not isinstance(value, date):
        value = date.fromisoformat(str(value))
    if value <= datetime.now(UTC).date():
        raise ValidationError({"event_date": ["Event date must be in the future"]})
    return value


def _text(value, field, label, max_length):
    value = (value or "").strip()
    if not value:
        raise ValidationError({field: [f"{label} is required"]})
    if len(value) > max_length:
        raise ValidationError({field: [f"{label} too long"]})
    return value


@messaging.aggregate
class CustomRequest:
    customer_id: Identifier(required=True)
    request_type: String(required=True, choices=RequestType)
    title: String(required=True, max_length=200, sanitize=False)
    description: Text(required=True, sanitize=False)
    specifications: Text(sanitize=False)  # JSON
    reference_images: Text(sanitize=False)  # JSON
    budget_range: String(max_length=50)
    event_date: Date()
    status: String(choices=RequestStatus, default=RequestStatus.PENDING.value)
    admin_notes: String(max_length=1000, sanitize=False)
    quoted_price: Float()
    order_id: Identifier()
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def submit(
        cls,
        customer_id,
        request_type,
        title,
        description,
        specifications=None,
        reference_images=None,
        budget_range=None,
        event_date=None,
    ):
        now = datetime.now(UTC)
        request = cls(
            customer_id=customer_id,
            request_type=request_type,
            title=_text(title, "title", "Title", 200),
            description=_text(description, "description", "Description", 2000),
            specifications=normalize_specifications(specifications),
            reference_images=normalize_reference_images(reference_images),
            budget_range=budget_range,
            event_date=_future_event_date(event_date),
            status=RequestStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        request.raise_(
            CustomRequestSubmitted(
                request_id=str(request.id),
                customer_id=str(customer_id),
                request_type=request.request_type,
                title=request.title,
                event_date=request.event_date,
                submitted_at=now,
            )
        )
        return request

    def update(self, customer_id, **changes):
        """Edit the request. Only its owner may, and only while it is pending."""
        if str(customer_id) != str(self.customer_id):
            raise ValidationError({"customer_id": ["Only the requesting customer can edit this request"]})
        if self.status != RequestStatus.PENDING.value:
            raise ValidationError({"status": ["Custom request can only be edited while pending"]})

        if changes.get("title") is not None:
            self.title = _text(changes["title"], "title", "Title", 200)
        if changes.get("description") is not None:
            self.description = _text(changes["description"], "description", "Description", 2000)
        if changes.get("specifications") is not None:
            self.specifications = normalize_specifications(changes["specifications"])
        if changes.get("reference_images") is not None:
            self.reference_images = normalize_reference_images(changes["reference_images"])
        if changes.get("budget_range") is not None:
            self.budget_range = changes["budget_range"]
        if changes.get("event_date") is not None:
            self.event_date = _future_event_date(changes["event_date"])

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(CustomRequestUpdated(request_id=str(self.id), updated_at=now))

    # -------------------------------------------------------------------
    # Workflow
    # -------------------------------------------------------------------
    def _check_move(self, target):
        current = RequestStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})
        return current

    def _transition(self, target, admin_notes=None):
        current = self._check_move(target)

        now = datetime.now(UTC)
        self.status = target.value
        if admin_notes is not None:
            self.admin_notes = admin_notes
        self.updated_at = now

        self.raise_(
            CustomRequestStatusChanged(
                request_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=current.value,
                new_status=target.value,
                quoted_price=self.quoted_price,
                admin_notes=self.admin_notes,
                order_id=str(self.order_id) if self.order_id else None,
                changed_at=now,
            )
        )

    def review(self, admin_notes=None):
        self._transition(RequestStatus.REVIEWING, admin_notes)

    def quote(self, price, admin_notes=None):
        if price is None or price < 0:
            raise ValidationError({"quoted_price": ["Quoted price must be zero or more"]})
        self._check_move(RequestStatus.QUOTED)
        self.quoted_price = round(price, 2)
        self._transition(RequestStatus.QUOTED, admin_notes)

    def approve(self):
        self._transition(RequestStatus.APPROVED)

    def decline(self, admin_notes=None):
        self._transition(RequestStatus.DECLINED, admin_notes)

    def complete(self, order_id=None):
        self._check_move(RequestStatus.COMPLETED)
        if order_id:
            self.order_id = order_id
        self._transition(RequestStatus.COMPLETED)
