"""Account emails: verification, email change, password reset and deletion."""

from notifications.notification.notification import NotificationChannel, NotificationType
from notifications.templates.layout import greeting, html_email, text_email


class VerifyEmailTemplate:
    notification_type = NotificationType.VERIFY_EMAIL.value
    default_channels = [NotificationChannel.EMAIL.value]
    subject = "Verify Your Email Address - Dee-licious Bakes"

    @classmethod
    def render(cls, context: dict) -> dict:
        url = context["verification_url"]
        paragraphs = [
            greeting(context.get("user_name")),
            f"Welcome to {context['company_name']}! To complete your account setup, please verify "
            f"your email address ({context['user_email']}).",
            f"To verify your email, please visit: {url}",
            "If you didn't create an account with us, you can safely ignore this email.",
            f"If you need help, contact us at {context['support_email']}",
        ]
        return {
            "subject": cls.subject,
            "body": text_email("Welcome! Please verify your email", paragraphs),
            "html_body": html_email(
                "Welcome! Please verify your email",
                paragraphs[:2] + paragraphs[3:],
                button=("Verify Email Address", url),
                subtitle="Just one more step to get started",
            ),
        }


class ResetPasswordTemplate:
    notification_type = NotificationType.RESET_PASSWORD.value
    default_channels = [NotificationChannel.EMAIL.value]
    subject = "Reset Your Password - Dee-licious Bakes"

    @classmethod
    def render(cls, context: dict) -> dict:
        url = context["reset_url"]
        expiration = context.get("expiration_time", "24 hours")
        paragraphs = [
            greeting(context.get("user_name")),
            f"We received a request to reset the password for your account ({context['user_email']}).",
            f"To reset your password, please visit: {url}",
            f"This reset link will expire in {expiration}.",
            "If you didn't request this reset, you can safely ignore this email.",
            f"If you need help, contact us at {context['support_email']}",
        ]
        return {
            "subject": cls.subject,
            "body": text_email("Reset Your Password", paragraphs),
            "html_body": html_email(
                "Reset Your Password",
                paragraphs[:2] + paragraphs[3:],
                button=("Reset Password", url),
            ),
        }


class ChangeEmailTemplate:
    notification_type = NotificationType.CHANGE_EMAIL.value
    default_channels = [NotificationChannel.EMAIL.value]
    subject = "Approve Email Address Change - Dee-licious Bakes"

    @classmethod
    def render(cls, context: dict) -> dict:
        url = context["approval_url"]
        paragraphs = [
            greeting(context.get("user_name")),
            "We received a request to change your email address:\n"
            f"- Current email: {context['old_email']}\n"
            f"- New email: {context['new_email']}",
            f"To approve this change, please visit: {url}",
            f"If you didn't request this change, please contact us immediately at {context['support_email']}",
        ]
        return {
            "subject": cls.subject,
            "body": text_email("Approve Email Change", paragraphs),
            "html_body": html_email(
                "Approve Email Change",
                paragraphs[:2] + paragraphs[3:],
                button=("Approve Email Change", url),
            ),
        }


class DeleteAccountTemplate:
    notification_type = NotificationType.DELETE_ACCOUNT.value
    default_channels = [NotificationChannel.EMAIL.value]
    subject = "Confirm Account Deletion - Dee-licious Bakes"

    @classmethod
    def render(cls, context: dict) -> dict:
        url = context["confirmation_url"]
        paragraphs = [
            greeting(context.get("user_name")),
            f"We received a request to permanently delete your account ({context['user_email']}).",
            "WARNING: This action cannot be undone and will permanently remove all your data.",
            f"To confirm deletion, please visit: {url}",
            f"If you didn't request this deletion, please contact us immediately at {context['support_email']}",
        ]
        return {
            "subject": cls.subject,
            "body": text_email("Confirm Account Deletion", paragraphs),
            "html_body": html_email(
                "Confirm Account Deletion",
                paragraphs[:3] + paragraphs[4:],
                button=("Delete My Account", url),
            ),
        }


class AccountDeletedTemplate:
    notification_type = NotificationType.ACCOUNT_DELETED.value
    default_channels = [NotificationChannel.EMAIL.value]
    subject = "Account Deletion Confirmed - Dee-licious Bakes"

    @classmethod
    def render(cls, context: dict) -> dict:
        paragraphs = [
            greeting(context.get("user_name")),
            f"This confirms that your account ({context['user_email']}) was permanently deleted "
            f"on {context['deletion_date']}.",
            "Your data has been removed as requested. Order history will be retained for 3 years "
            "as required by law.",
            f"If you have questions, contact us at {context['support_email']}",
        ]
        return {
            "subject": cls.subject,
            "body": text_email("Account Deletion Confirmed", paragraphs),
            "html_body": html_email("Account Deletion Confirmed", paragraphs),
        }
