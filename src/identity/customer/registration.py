"""Customer registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from identity.customer.customer import Customer
from identity.domain import identity
from identity.projections.customer_lookup import find_customer_id
from identity.shared.email import normalize_email


@identity.command(part_of="Customer")
class RegisterCustomer:
    """Create a new customer account."""

    name: String(required=True, max_length=255)
    email: String(required=True, max_length=254)
    image: String(max_length=1000)


@identity.command_handler(part_of=Customer)
class RegisterCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        if find_customer_id(normalize_email(command.email)):
            raise ValidationError({"email": ["An account with this email already exists"]})

        customer = Customer.register(
            name=command.name,
            email=command.email,
            image=command.image,
        )
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)
