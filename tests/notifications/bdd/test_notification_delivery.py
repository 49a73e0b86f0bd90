"""BDD tests for newsletter emails and the notification delivery lifecycle."""

from notifications.notification.events import NotificationCancelled, NotificationRetried, NotificationSent
from notifications.notification.notification import Notification, NotificationType
from notifications.subscriber.newsletter import Subscribe
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from shared.utils.queries import fetch_all

scenarios("features/notification_delivery.feature")

_EVENT_CLASSES = {
    "NotificationCancelled": NotificationCancelled,
    "NotificationRetried": NotificationRetried,
    "NotificationSent": NotificationSent,
}


def _pending(recipient, max_retries=3):
    notification = Notification.create(
        recipient=recipient,
        notification_type=NotificationType.VERIFY_EMAIL.value,
        subject="Verify Your Email Address",
        body="Please verify",
        max_retries=max_retries,
    )
    notification._events.clear()
    return notification


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a pending email for "{recipient}"'), target_fixture="notification")
def a_pending_email(recipient):
    return _pending(recipient)


@given(
    parsers.cfparse('a pending email for "{recipient}" allowing {attempts:d} attempt'),
    target_fixture="notification",
)
def a_pending_email_with_attempts(recipient, attempts):
    return _pending(recipient, max_retries=attempts)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('"{email}" subscribes to the newsletter'))
@when(parsers.cfparse('"{email}" subscribes to the newsletter'))
def subscribe(email, error):
    try:
        current_domain.process(Subscribe(email=email), asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the mail server rejects it with "{reason}"'))
def mail_server_rejects(notification, reason):
    notification.mark_failed(reason)


@when("the email is sent")
def email_sent(notification):
    notification.mark_sent(message_id="email-bdd")


@when("the email is retried")
def email_retried(notification, error):
    try:
        notification.retry()
    except ValidationError as exc:
        error["exc"] = exc


@when("the email is cancelled")
def email_cancelled(notification, error):
    try:
        notification.cancel("No longer needed")
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('a "{notification_type}" email is sent to "{recipient}"'))
def email_is_sent(notification_type, recipient, outbox):
    [notification] = fetch_all(Notification, recipient=recipient, notification_type=notification_type)
    assert notification.status == "Sent"
    assert [e["to"] for e in outbox.sent_emails] == [recipient]


@then(parsers.cfparse('the email status is "{status}"'))
def email_status(notification, status):
    assert notification.status == status


@then(parsers.re(r"an? (?P<event_type>\w+) event is raised"))
def event_raised(notification, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in notification._events)
