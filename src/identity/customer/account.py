"""Customer account administration and deletion: commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.customer.customer import AccountStatus, Customer, Role
from identity.domain import identity


@identity.command(part_of="Customer")
class ChangeRole:
    """Promote a customer to administrator or demote them back to a shopper."""

    customer_id: Identifier(required=True)
    role: String(required=True, choices=Role)


@identity.command(part_of="Customer")
class ChangeAccountStatus:
    """Activate, deactivate or ban an account."""

    customer_id: Identifier(required=True)
    status: String(required=True, choices=AccountStatus)
    reason: String(max_length=500)


@identity.command(part_of="Customer")
class RequestAccountDeletion:
    customer_id: Identifier(required=True)


@identity.command(part_of="Customer")
class DeleteAccount:
    """Confirm a deletion request with the token mailed to the customer."""

    customer_id: Identifier(required=True)
    token: String(required=True, max_length=100)


@identity.command_handler(part_of=Customer)
class ManageAccountHandler:
    @handle(ChangeRole)
    def change_role(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.change_role(command.role)
        repo.add(customer)

    @handle(ChangeAccountStatus)
    def change_account_status(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.change_status(command.status, reason=command.reason)
        repo.add(customer)

    @handle(RequestAccountDeletion)
    def request_account_deletion(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.request_deletion()
        repo.add(customer)

    @handle(DeleteAccount)
    def delete_account(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.delete(command.token)
        repo.add(customer)
