"""Order aggregate: a checked-out cart moving through the bakery's workflow.

State Machine:
    pending → confirmed → preparing → ready → delivered
    pending, confirmed, preparing → cancelled

Payment status runs alongside:
    pending → processing | completed | failed
    processing → completed | failed
    failed → processing (retry)
    completed → refunded

Every status change is appended to the order's status history.
"""

import json
import secrets
import string
from datetime import UTC, date, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Date,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderDetailsUpdated,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_VALID_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PROCESSING, PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.PROCESSING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PROCESSING},
    PaymentStatus.COMPLETED: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),  # Terminal
}

# Details such as the delivery address can still change in these states
_EDITABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}

ORDER_NUMBER_PREFIX = "DLB"
_ORDER_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number(now=None):
    """``DLB-YYYYMMDD-XXXXXX`` with a random upper-case alphanumeric suffix."""
    now = now or datetime.now(UTC)
    suffix = "".join(secrets.choice(_ORDER_SUFFIX_ALPHABET) for _ in range(6))
    return f"{ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{suffix}"


def _as_date(value):
    if value is None or isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, datetime):
        return value.date()
    return date.fromisoformat(str(value))


def ensure_future_delivery_date(delivery_date, today=None):
    delivery_date = _as_date(delivery_date)
    if delivery_date is not None and delivery_date <= (today or datetime.now(UTC).date()):
        raise ValidationError({"delivery_date": ["Delivery date must be in the future"]})
    return delivery_date


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class DeliveryAddress:
    """Where and to whom the bakes are delivered, captured at checkout."""

    first_name = String(required=True, max_length=50)
    last_name = String(required=True, max_length=50)
    company = String(max_length=100)
    address_line_1 = String(required=True, max_length=100)
    address_line_2 = String(max_length=100)
    city = String(required=True, max_length=50)
    state = String(max_length=50)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=50)
    phone = String(max_length=20)
    delivery_instructions = String(max_length=500, sanitize=False)

    def to_dict(self):
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "company": self.company,
            "address_line_1": self.address_line_1,
            "address_line_2": self.address_line_2,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
            "phone": self.phone,
            "delivery_instructions": self.delivery_instructions,
        }


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    variant_id = Identifier()
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)
    customizations = Text(sanitize=False)
    created_at = DateTime()


@ordering.entity(part_of="Order")
class StatusChange:
    status = String(required=True, max_length=20)
    notes = String(max_length=1000, sanitize=False)
    created_by = String(max_length=255)
    created_at = DateTime()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    customer_id = Identifier()
    contact_email = String(max_length=254)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    subtotal = Float(default=0.0)
    tax_amount = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    total_amount = Float(default=0.0)
    special_instructions = String(max_length=1000, sanitize=False)
    delivery_date = Date()
    delivery_address = ValueObject(DeliveryAddress)
    payment_method_id = String(max_length=255)
    payment_intent_id = String(max_length=255)
    items = HasMany(OrderItem)
    status_history = HasMany(StatusChange)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        items_data,
        pricing,
        delivery_address,
        customer_id=None,
        contact_email=None,
        delivery_date=None,
        special_instructions=None,
        payment_method_id=None,
    ):
        """Create a pending order from checked-out cart lines.

        Args:
            items_data: dicts with product_id, variant_id, product_name,
                        quantity, unit_price and customizations.
            pricing: dict with subtotal, tax, delivery_fee and total.
            delivery_address: DeliveryAddress value object.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=generate_order_number(now),
            customer_id=customer_id,
            contact_email=contact_email,
            subtotal=pricing["subtotal"],
            tax_amount=pricing["tax"],
            delivery_fee=pricing["delivery_fee"],
            total_amount=pricing["total"],
            special_instructions=special_instructions,
            delivery_date=_as_date(delivery_date),
            delivery_address=delivery_address,
            payment_method_id=payment_method_id,
            created_at=now,
            updated_at=now,
        )

        for data in items_data:
            order.add_items(
                OrderItem(
                    product_id=data["product_id"],
                    variant_id=data.get("variant_id"),
                    product_name=data["product_name"],
                    quantity=data["quantity"],
                    unit_price=data["unit_price"],
                    total_price=round(data["quantity"] * data["unit_price"], 2),
                    customizations=data.get("customizations"),
                    created_at=now,
                )
            )
        order.add_status_history(
            StatusChange(status=OrderStatus.PENDING.value, notes="Order placed", created_at=now)
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id) if customer_id else None,
                contact_email=contact_email,
                customer_name=f"{delivery_address.first_name} {delivery_address.last_name}",
                items=json.dumps(
                    [
                        {
                            "product_name": i.product_name,
                            "quantity": i.quantity,
                            "unit_price": i.unit_price,
                            "total_price": i.total_price,
                        }
                        for i in order.items
                    ]
                ),
                item_count=len(order.items),
                subtotal=order.subtotal,
                tax_amount=order.tax_amount,
                delivery_fee=order.delivery_fee,
                total_amount=order.total_amount,
                delivery_date=order.delivery_date,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def can_transition_to(self, target_status):
        return OrderStatus(target_status) in _VALID_TRANSITIONS[OrderStatus(self.status)]

    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _record_status(self, status, notes=None, created_by=None, now=None):
        self.add_status_history(
            StatusChange(
                status=status.value,
                notes=notes,
                created_by=created_by,
                created_at=now or datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def update_status(self, new_status, notes=None, created_by=None):
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status '{new_status}'"]}) from None

        if target is OrderStatus.CANCELLED:
            return self.cancel(reason=notes, cancelled_by=created_by)

        self._assert_can_transition(target)
        previous = self.status
        now = datetime.now(UTC)

        self.status = target.value
        self.updated_at = now
        self._record_status(target, notes, created_by, now)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                notes=notes,
                changed_by=created_by,
                changed_at=now,
            )
        )

    def cancel(self, reason=None, cancelled_by=None):
        current = OrderStatus(self.status)
        if OrderStatus.CANCELLED not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot cancel order in {current.value} state"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.updated_at = now
        self._record_status(OrderStatus.CANCELLED, reason or "Order cancelled", cancelled_by, now)

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=current.value,
                reason=reason,
                cancelled_by=cancelled_by,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def update_payment_status(self, new_status, payment_intent_id=None):
        try:
            target = PaymentStatus(new_status)
        except ValueError:
            raise ValidationError({"payment_status": [f"Unknown payment status '{new_status}'"]}) from None

        current = PaymentStatus(self.payment_status)
        if target not in _VALID_PAYMENT_TRANSITIONS[current]:
            raise ValidationError(
                {"payment_status": [f"Cannot transition payment from {current.value} to {target.value}"]}
            )

        now = datetime.now(UTC)
        self.payment_status = target.value
        if payment_intent_id:
            self.payment_intent_id = payment_intent_id
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                payment_intent_id=self.payment_intent_id,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_details(self, special_instructions=None, delivery_date=None, delivery_address=None):
        current = OrderStatus(self.status)
        if current not in _EDITABLE_STATES:
            raise ValidationError({"status": [f"Order details cannot be changed once the order is {current.value}"]})

        if special_instructions is not None:
            self.special_instructions = special_instructions
        if delivery_date is not None:
            self.delivery_date = ensure_future_delivery_date(delivery_date)
        if delivery_address is not None:
            self.delivery_address = delivery_address

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            OrderDetailsUpdated(
                order_id=str(self.id),
                delivery_date=self.delivery_date,
                special_instructions=self.special_instructions,
                address_changed=delivery_address is not None,
                updated_at=now,
            )
        )
