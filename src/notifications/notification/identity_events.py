"""Inbound cross-domain event handler: Notifications reacts to Identity events.

Every account flow that needs the customer to click a link, or to be told
something happened to their account, arrives here as an Identity event and
leaves as an email.
"""

import structlog
from protean import handle

from notifications.brand import site_url
from notifications.domain import notifications
from notifications.notification.helpers import send_email
from notifications.notification.notification import Notification, NotificationType
from shared.events.identity import (
    AccountDeleted,
    AccountDeletionRequested,
    EmailChangeRequested,
    EmailVerificationRequested,
    PasswordResetRequested,
)

logger = structlog.get_logger(__name__)

notifications.register_external_event(EmailVerificationRequested, "Identity.EmailVerificationRequested.v1")
notifications.register_external_event(EmailChangeRequested, "Identity.EmailChangeRequested.v1")
notifications.register_external_event(PasswordResetRequested, "Identity.PasswordResetRequested.v1")
notifications.register_external_event(AccountDeletionRequested, "Identity.AccountDeletionRequested.v1")
notifications.register_external_event(AccountDeleted, "Identity.AccountDeleted.v1")

RESET_LINK_LIFETIME = "24 hours"


@notifications.event_handler(part_of=Notification, stream_category="identity::customer")
class IdentityEventsHandler:
    """Reacts to Identity domain events to send account emails."""

    @handle(EmailVerificationRequested)
    def on_email_verification_requested(self, event: EmailVerificationRequested) -> None:
        send_email(
            NotificationType.VERIFY_EMAIL.value,
            event.email,
            {
                "user_name": event.name,
                "user_email": event.email,
                "verification_url": site_url("verify-email", token=event.token),
            },
            source_event_type="Identity.EmailVerificationRequested.v1",
            source_event_id=str(event.customer_id),
        )

    @handle(PasswordResetRequested)
    def on_password_reset_requested(self, event: PasswordResetRequested) -> None:
        send_email(
            NotificationType.RESET_PASSWORD.value,
            event.email,
            {
                "user_name": event.name,
                "user_email": event.email,
                "reset_url": site_url("reset-password", token=event.token),
                "expiration_time": RESET_LINK_LIFETIME,
            },
            source_event_type="Identity.PasswordResetRequested.v1",
            source_event_id=str(event.customer_id),
        )

    @handle(EmailChangeRequested)
    def on_email_change_requested(self, event: EmailChangeRequested) -> None:
        # The approval link goes to the new address so the customer proves they own it.
        send_email(
            NotificationType.CHANGE_EMAIL.value,
            event.new_email,
            {
                "user_name": event.name,
                "old_email": event.current_email,
                "new_email": event.new_email,
                "approval_url": site_url("change-email/approve", token=event.token),
            },
            source_event_type="Identity.EmailChangeRequested.v1",
            source_event_id=str(event.customer_id),
        )

    @handle(AccountDeletionRequested)
    def on_account_deletion_requested(self, event: AccountDeletionRequested) -> None:
        send_email(
            NotificationType.DELETE_ACCOUNT.value,
            event.email,
            {
                "user_name": event.name,
                "user_email": event.email,
                "confirmation_url": site_url("delete-account/confirm", token=event.token),
            },
            source_event_type="Identity.AccountDeletionRequested.v1",
            source_event_id=str(event.customer_id),
        )

    @handle(AccountDeleted)
    def on_account_deleted(self, event: AccountDeleted) -> None:
        send_email(
            NotificationType.ACCOUNT_DELETED.value,
            event.email,
            {
                "user_name": event.name,
                "user_email": event.email,
                "deletion_date": event.deleted_at.strftime("%d %B %Y"),
            },
            source_event_type="Identity.AccountDeleted.v1",
            source_event_id=str(event.customer_id),
        )
        logger.info("Account deletion confirmation queued", customer_id=str(event.customer_id))
