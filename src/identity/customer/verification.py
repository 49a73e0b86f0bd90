"""Email ownership flows: verification, email change and password reset."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.customer.customer import Customer
from identity.domain import identity
from identity.projections.customer_lookup import find_customer_id
from identity.shared.email import normalize_email

logger = structlog.get_logger(__name__)


@identity.command(part_of="Customer")
class VerifyEmail:
    customer_id: Identifier(required=True)
    token: String(required=True, max_length=100)


@identity.command(part_of="Customer")
class RequestEmailChange:
    customer_id: Identifier(required=True)
    new_email: String(required=True, max_length=254)


@identity.command(part_of="Customer")
class ConfirmEmailChange:
    customer_id: Identifier(required=True)
    token: String(required=True, max_length=100)


@identity.command(part_of="Customer")
class RequestPasswordReset:
    email: String(required=True, max_length=254)


@identity.command_handler(part_of=Customer)
class EmailOwnershipHandler:
    @handle(VerifyEmail)
    def verify_email(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.verify_email(command.token)
        repo.add(customer)

    @handle(RequestEmailChange)
    def request_email_change(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)

        owner = find_customer_id(normalize_email(command.new_email))
        if owner and owner != str(customer.id):
            raise ValidationError({"new_email": ["This email is already in use"]})

        customer.request_email_change(command.new_email)
        repo.add(customer)

    @handle(ConfirmEmailChange)
    def confirm_email_change(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)

        owner = find_customer_id(customer.pending_email) if customer.pending_email else None
        if owner and owner != str(customer.id):
            raise ValidationError({"new_email": ["This email is already in use"]})

        customer.confirm_email_change(command.token)
        repo.add(customer)

    @handle(RequestPasswordReset)
    def request_password_reset(self, command):
        customer_id = find_customer_id(normalize_email(command.email))
        if customer_id is None:
            # Same outcome for unknown addresses, so accounts cannot be enumerated
            logger.info("Password reset requested for unknown email")
            return

        repo = current_domain.repository_for(Customer)
        customer = repo.get(customer_id)
        customer.request_password_reset()
        repo.add(customer)
