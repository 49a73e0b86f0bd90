"""Custom request commands: submission, owner edits and the review workflow."""

import structlog
from protean import handle
from protean.fields import Date, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from messaging.domain import messaging
from messaging.request.custom_request import CustomRequest, RequestType

logger = structlog.get_logger(__name__)


@messaging.command(part_of="CustomRequest")
class SubmitCustomRequest:
    customer_id: Identifier(required=True)
    request_type: String(required=True, choices=RequestType)
    title: String(required=True, max_length=200, sanitize=False)
    description: Text(required=True, sanitize=False)
    specifications: Text(sanitize=False)  # JSON
    reference_images: Text(sanitize=False)  # JSON
    budget_range: String(max_length=50)
    event_date: Date()


@messaging.command(part_of="CustomRequest")
class UpdateCustomRequest:
    request_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    title: String(max_length=200, sanitize=False)
    description: Text(sanitize=False)
    specifications: Text(sanitize=False)
    reference_images: Text(sanitize=False)
    budget_range: String(max_length=50)
    event_date: Date()


@messaging.command(part_of="CustomRequest")
class ReviewCustomRequest:
    request_id: Identifier(required=True)
    admin_notes: String(max_length=1000, sanitize=False)


@messaging.command(part_of="CustomRequest")
class QuoteCustomRequest:
    request_id: Identifier(required=True)
    price: Float(required=True)
    admin_notes: String(max_length=1000, sanitize=False)


@messaging.command(part_of="CustomRequest")
class ApproveCustomRequest:
    request_id: Identifier(required=True)


@messaging.command(part_of="CustomRequest")
class DeclineCustomRequest:
    request_id: Identifier(required=True)
    admin_notes: String(max_length=1000, sanitize=False)


@messaging.command(part_of="CustomRequest")
class CompleteCustomRequest:
    request_id: Identifier(required=True)
    order_id: Identifier()


@messaging.command_handler(part_of=CustomRequest)
class CustomRequestHandler:
    @handle(SubmitCustomRequest)
    def submit(self, command):
        request = CustomRequest.submit(
            customer_id=command.customer_id,
            request_type=command.request_type,
            title=command.title,
            description=command.description,
            specifications=command.specifications,
            reference_images=command.reference_images,
            budget_range=command.budget_range,
            event_date=command.event_date,
        )
        current_domain.repository_for(CustomRequest).add(request)
        logger.info(
            "Custom request submitted",
            request_id=str(request.id),
            request_type=request.request_type,
        )
        return str(request.id)

    @handle(UpdateCustomRequest)
    def update(self, command):
        repo = current_domain.repository_for(CustomRequest)
        request = repo.get(command.request_id)
        request.update(
            command.customer_id,
            title=command.title,
            description=command.description,
            specifications=command.specifications,
            reference_images=command.reference_images,
            budget_range=command.budget_range,
            event_date=command.event_date,
        )
        repo.add(request)

    @handle(ReviewCustomRequest)
    def review(self, command):
        repo = current_domain.repository_for(CustomRequest)
        request = repo.get(command.request_id)
        request.review(admin_notes=command.admin_notes)
        repo.add(request)

    @handle(QuoteCustomRequest)
    def quote(self, command):
        repo = current_domain.repository_for(CustomRequest)
        request = repo.get(command.request_id)
        request.quote(command.price, admin_notes=command.admin_notes)
        repo.add(request)
        logger.info("Custom request quoted", request_id=str(request.id), price=request.quoted_price)

    @handle(ApproveCustomRequest)
    def approve(self, command):
        repo = current_domain.repository_for(CustomRequest)
        request = repo.get(command.request_id)
        request.approve()
        repo.add(request)

    @handle(DeclineCustomRequest)
    def decline(self, command):
        repo = current_domain.repository_for(CustomRequest)
        request = repo.get(command.request_id)
        request.decline(admin_notes=command.admin_notes)
        repo.add(request)

    @handle(CompleteCustomRequest)
    def complete(self, command):
        repo = current_domain.repository_for(CustomRequest)
        request = repo.get(command.request_id)
        request.complete(order_id=command.order_id)
        repo.add(request)
