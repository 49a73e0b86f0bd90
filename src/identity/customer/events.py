"""Domain events for the Customer aggregate."""

from protean.fields import DateTime, Identifier, String

from identity.domain import identity


@identity.event(part_of="Customer")
class CustomerRegistered:
    """A new customer account was created."""

    __version__ = 1

    customer_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@identity.event(part_of="Customer")
class EmailVerificationRequested:
    """A verification link must be sent to the customer's address."""

    __version__ = 1

    customer_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    token: String(required=True)
    requested_at: DateTime(required=True)


@identity.event(part_of="Customer")
class EmailVerified:
    __version__ = 1

    customer_id: Identifier(required=True)
    email: String(required=True)
    verified_at: DateTime(required=True)


@identity.event(part_of="Customer")
class EmailChangeRequested:
    """The customer asked to move their account to a new address."""

    __version__ = 1

    customer_id: Identifier(required=True)
    name: String(required=True)
    current_email: String(required=True)
    new_email: String(required=True)
    token: String(required=True)
    requested_at: DateTime(required=True)


@identity.event(part_of="Customer")
class EmailChanged:
    __version__ = 1

    customer_id: Identifier(required=True)
    previous_email: String(required=True)
    new_email: String(required=True)
    changed_at: DateTime(required=True)


@identity.event(part_of="Customer")
class PasswordResetRequested:
    __version__ = 1

    customer_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    token: String(required=True)
    requested_at: DateTime(required=True)


@identity.event(part_of="Customer")
class ProfileUpdated:
    __version__ = 1

    customer_id: Identifier(required=True)
    name: String(required=True)
    image: String()


@identity.event(part_of="Customer")
class RoleChanged:
    """A customer was promoted to or demoted from administrator."""

    __version__ = 1

    customer_id: Identifier(required=True)
    previous_role: String(required=True)
    new_role: String(required=True)
    changed_at: DateTime(required=True)


@identity.event(part_of="Customer")
class AccountStatusChanged:
    """A customer account was activated, deactivated or banned."""

    __version__ = 1

    customer_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    reason: String()
    changed_at: DateTime(required=True)


@identity.event(part_of="Customer")
class AccountDeletionRequested:
    __version__ = 1

    customer_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    token: String(required=True)
    requested_at: DateTime(required=True)


@identity.event(part_of="Customer")
class AccountDeleted:
    """A customer confirmed the deletion of their account."""

    __version__ = 1

    customer_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    deleted_at: DateTime(required=True)
