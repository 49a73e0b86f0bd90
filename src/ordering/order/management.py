"""Order management: status, cancellation, payment, details and bulk updates."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Date, Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.checkout.checkout import parse_delivery_address
from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus, PaymentStatus

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    notes = String(max_length=1000, sanitize=False)
    created_by = String(max_length=255)


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(max_length=1000)
    cancelled_by = String(max_length=255)


@ordering.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, choices=PaymentStatus)
    payment_intent_id = String(max_length=255)


@ordering.command(part_of="Order")
class UpdateOrderDetails:
    order_id = Identifier(required=True)
    special_instructions = String(max_length=1000, sanitize=False)
    delivery_date = Date()
    delivery_address = Text(sanitize=False)  # JSON DeliveryAddress


@ordering.command(part_of="Order")
class BulkUpdateOrders:
    order_ids = Text(required=True, sanitize=False)  # JSON list of order ids
    status = String(choices=OrderStatus)
    payment_status = String(choices=PaymentStatus)
    notes = String(max_length=1000, sanitize=False)
    created_by = String(max_length=255)


@ordering.command_handler(part_of=Order)
class ManageOrderHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_status(command.status, notes=command.notes, created_by=command.created_by)
        repo.add(order)

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(reason=command.reason, cancelled_by=command.cancelled_by)
        repo.add(order)
        logger.info("Order cancelled", order_id=str(order.id), reason=command.reason)

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_payment_status(command.payment_status, payment_intent_id=command.payment_intent_id)
        repo.add(order)

    @handle(UpdateOrderDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        address = parse_delivery_address(command.delivery_address) if command.delivery_address else None
        order.update_details(
            special_instructions=command.special_instructions,
            delivery_date=command.delivery_date,
            delivery_address=address,
        )
        repo.add(order)

    @handle(BulkUpdateOrders)
    def bulk_update(self, command):
        try:
            order_ids = json.loads(command.order_ids)
        except (json.JSONDecodeError, TypeError):
            raise ValidationError({"order_ids": ["Order ids must be a JSON list"]}) from None
        if not isinstance(order_ids, list) or not order_ids:
            raise ValidationError({"order_ids": ["At least one order ID is required"]})
        order_ids = list(dict.fromkeys(str(order_id) for order_id in order_ids))
        if not command.status and not command.payment_status:
            raise ValidationError({"order": ["At least one field to update is required"]})

        repo = current_domain.repository_for(Order)
        orders = [repo.get(order_id) for order_id in order_ids]
        for order in orders:
            if command.status:
                order.update_status(command.status, notes=command.notes, created_by=command.created_by)
            if command.payment_status:
                order.update_payment_status(command.payment_status)
        for order in orders:
            repo.add(order)

        logger.info("Bulk order update", count=len(orders), status=command.status)
        return len(orders)
