"""Template registry: maps NotificationType to template classes.

Each template renders ``{subject, body, html_body}`` from a context dict.
``render_template`` adds the bakery's ``company_name`` and
``support_email`` to every context first.
"""

from notifications.brand import BAKERY_BRAND
from notifications.notification.notification import NotificationType
from notifications.templates.account import (
    AccountDeletedTemplate,
    ChangeEmailTemplate,
    DeleteAccountTemplate,
    ResetPasswordTemplate,
    VerifyEmailTemplate,
)
from notifications.templates.newsletter import CakeWelcomeTemplate, UnsubscribeConfirmationTemplate
from notifications.templates.order_confirmation import OrderConfirmationTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.RESET_PASSWORD.value: ResetPasswordTemplate,
    NotificationType.VERIFY_EMAIL.value: VerifyEmailTemplate,
    NotificationType.CHANGE_EMAIL.value: ChangeEmailTemplate,
    NotificationType.DELETE_ACCOUNT.value: DeleteAccountTemplate,
    NotificationType.ACCOUNT_DELETED.value: AccountDeletedTemplate,
    NotificationType.CAKE_WELCOME.value: CakeWelcomeTemplate,
    NotificationType.UNSUBSCRIBE_CONFIRMATION.value: UnsubscribeConfirmationTemplate,
    NotificationType.ORDER_CONFIRMATION.value: OrderConfirmationTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls


def with_branding(context: dict) -> dict:
    return {"company_name": BAKERY_BRAND["name"], "support_email": BAKERY_BRAND["email"], **context}


def render_template(notification_type: str, context: dict) -> dict:
    return get_template(notification_type).render(with_branding(context))
