"""Domain events for the CustomRequest aggregate."""

from protean.fields import Date, DateTime, Float, Identifier, String

from messaging.domain import messaging


@messaging.event(part_of="CustomRequest")
class CustomRequestSubmitted:
    """A customer asked the bakery for a bespoke bake."""

    __version__ = 1

    request_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    request_type: String(required=True)
    title: String(required=True, sanitize=False)
    event_date: Date()
    submitted_at: DateTime(required=True)


@messaging.event(part_of="CustomRequest")
class CustomRequestUpdated:
    __version__ = 1

    request_id: Identifier(required=True)
    updated_at: DateTime(required=True)


@messaging.event(part_of="CustomRequest")
class CustomRequestStatusChanged:
    """The bakery moved a custom request along its review workflow."""

    __version__ = 1

    request_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    quoted_price: Float()
    admin_notes: String(sanitize=False)
    order_id: Identifier()
    changed_at: DateTime(required=True)
