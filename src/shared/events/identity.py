"""Cross-domain event contracts for Identity domain events.

These classes define the event shape for consumption by other domains
(the Notifications domain sends the account emails). They are registered
as external events via domain.register_external_event() with matching
__type__ strings so Protean's stream deserialization works correctly.

The source-of-truth events are in src/identity/customer/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String


class EmailVerificationRequested(BaseEvent):
    """A verification link must be sent to a newly registered address."""

    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    token = String(required=True)
    requested_at = DateTime(required=True)


class EmailChangeRequested(BaseEvent):
    """A customer asked to move their account to a new address."""

    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True)
    current_email = String(required=True)
    new_email = String(required=True)
    token = String(required=True)
    requested_at = DateTime(required=True)


class PasswordResetRequested(BaseEvent):
    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    token = String(required=True)
    requested_at = DateTime(required=True)


class AccountDeletionRequested(BaseEvent):
    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    token = String(required=True)
    requested_at = DateTime(required=True)


class AccountDeleted(BaseEvent):
    """A customer confirmed deletion and the account was closed."""

    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    deleted_at = DateTime(required=True)
