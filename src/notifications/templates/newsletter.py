"""Newsletter emails: welcome and unsubscribe confirmation."""

from notifications.brand import BAKERY_BRAND
from notifications.notification.notification import NotificationChannel, NotificationType
from notifications.templates.layout import greeting, html_email, text_email


class CakeWelcomeTemplate:
    notification_type = NotificationType.CAKE_WELCOME.value
    default_channels = [NotificationChannel.EMAIL.value]
    subject = "Welcome to Dee-licious Bakes! 🍰"

    @classmethod
    def render(cls, context: dict) -> dict:
        unsubscribe_url = context.get("unsubscribe_url")
        paragraphs = [
            greeting(context.get("first_name"), "Hello there,"),
            f"Welcome to {context['company_name']}! I'm absolutely thrilled to have you join our sweet "
            "community of cake lovers.",
            f"My name is {BAKERY_BRAND['owner']}, and I've been creating beautiful, delicious cakes for over "
            "15 years. From elegant wedding cakes to fun birthday celebrations, I pour my heart into every "
            "creation.",
            "What to expect from our newsletter:\n"
            "🍰 Behind-the-scenes looks at cake creation\n"
            "🎂 Seasonal cake designs and flavor inspirations\n"
            "💝 Exclusive offers and early booking opportunities\n"
            "📸 Fresh photos of my latest cake masterpieces",
            "Keep an eye on your inbox for sweet updates, and don't hesitate to reach out if you have any "
            "questions about custom cake orders!",
            f"Sweet regards,\n{BAKERY_BRAND['owner']} 🍰",
        ]
        return {
            "subject": cls.subject,
            "body": text_email(f"Welcome to {context['company_name']}!", paragraphs, unsubscribe_url),
            "html_body": html_email(
                "Welcome to Dee's Sweet World!",
                paragraphs,
                subtitle="Thank you for joining our cake-loving community",
                unsubscribe_url=unsubscribe_url,
            ),
        }


class UnsubscribeConfirmationTemplate:
    notification_type = NotificationType.UNSUBSCRIBE_CONFIRMATION.value
    default_channels = [NotificationChannel.EMAIL.value]
    subject = "Unsubscribe Confirmed - Dee-licious Bakes"

    @classmethod
    def render(cls, context: dict) -> dict:
        resubscribe_url = context.get("resubscribe_url")
        resubscribe = "If you unsubscribed by mistake or change your mind, you can resubscribe at any time"
        resubscribe += f" by visiting: {resubscribe_url}" if resubscribe_url else " by visiting our website."
        paragraphs = [
            "Hello,",
            f"This email confirms that you have been successfully unsubscribed from the "
            f"{context['company_name']} newsletter.",
            f"Unsubscribe Details:\nEmail: {context['email']}\nUnsubscribed on: {context['unsubscribe_date']}",
            "You will no longer receive marketing emails from us. However, you may still receive important "
            "transactional emails if you have an active account or pending orders.",
            resubscribe,
            f"Best wishes,\n{BAKERY_BRAND['owner']} & The Team 🍰",
        ]
        return {
            "subject": cls.subject,
            "body": text_email("Unsubscribe Confirmed", paragraphs),
            "html_body": html_email(
                "Unsubscribe Confirmed",
                paragraphs,
                button=("Resubscribe to Newsletter", resubscribe_url) if resubscribe_url else None,
                subtitle="We're sorry to see you go!",
            ),
        }
