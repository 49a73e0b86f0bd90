"""Customer profile management: command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.customer.customer import _UNSET, Customer
from identity.domain import identity


@identity.command(part_of="Customer")
class UpdateProfile:
    customer_id: Identifier(required=True)
    name: String(max_length=255)
    image: String(max_length=1000)


@identity.command_handler(part_of=Customer)
class ManageProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.update_profile(
            name=command.name if command.name is not None else _UNSET,
            image=command.image if command.image is not None else _UNSET,
        )
        repo.add(customer)
