"""Customer lookup: find a customer by email."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.customer.customer import Customer
from identity.customer.events import AccountDeleted, CustomerRegistered, EmailChanged
from identity.domain import identity


@identity.projection
class CustomerLookup:
    email: Identifier(identifier=True, required=True)
    customer_id: String(required=True)


def find_customer_id(email: str) -> str | None:
    """Return the id of the live account registered under ``email``."""
    try:
        return current_domain.repository_for(CustomerLookup).get(email).customer_id
    except ObjectNotFoundError:
        return None


def _forget(email: str) -> None:
    repo = current_domain.repository_for(CustomerLookup)
    try:
        entry = repo.get(email)
    except ObjectNotFoundError:
        return
    repo._dao.delete(entry)


@identity.projector(projector_for=CustomerLookup, aggregates=[Customer])
class CustomerLookupProjector:
    @on(CustomerRegistered)
    def on_customer_registered(self, event):
        current_domain.repository_for(CustomerLookup).add(
            CustomerLookup(email=event.email, customer_id=event.customer_id)
        )

    @on(EmailChanged)
    def on_email_changed(self, event):
        _forget(event.previous_email)
        current_domain.repository_for(CustomerLookup).add(
            CustomerLookup(email=event.new_email, customer_id=event.customer_id)
        )

    @on(AccountDeleted)
    def on_account_deleted(self, event):
        _forget(event.email)
