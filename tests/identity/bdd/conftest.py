"""Shared BDD fixtures and step definitions for the Identity domain."""

import pytest
from identity.customer.customer import Customer
from identity.customer.events import (
    AccountDeleted,
    AccountDeletionRequested,
    EmailChanged,
    EmailChangeRequested,
    EmailVerificationRequested,
    EmailVerified,
)
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

# Map event name strings to classes for dynamic lookup
_EVENT_CLASSES = {
    "EmailVerificationRequested": EmailVerificationRequested,
    "EmailVerified": EmailVerified,
    "EmailChangeRequested": EmailChangeRequested,
    "EmailChanged": EmailChanged,
    "AccountDeletionRequested": AccountDeletionRequested,
    "AccountDeleted": AccountDeleted,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@given(
    parsers.cfparse('a registered customer "{name}" with email "{email}"'),
    target_fixture="customer",
)
def registered_customer(name, email):
    return Customer.register(name=name, email=email)


@given("the account has been deleted")
def account_deleted(customer):
    customer.request_deletion()
    customer.delete(customer.deletion_token)
    customer._events.clear()


@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.cfparse('the customer email is "{email}"'))
def customer_email_is(customer, email):
    assert customer.email.address == email


@then("the customer email is verified")
def email_verified(customer):
    assert customer.email_verified is True


@then("the customer email is not verified")
def email_not_verified(customer):
    assert customer.email_verified is False


@then(parsers.cfparse('the customer status is "{status}"'))
def customer_status_is(customer, status):
    assert customer.status == status


@then(parsers.re(r"an? (?P<event_type>\w+) event is raised"))
def event_raised(customer, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in customer._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in customer._events]}"
