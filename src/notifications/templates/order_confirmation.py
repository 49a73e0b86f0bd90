"""Order confirmation template: sent when a cart is checked out."""

from notifications.notification.notification import NotificationChannel, NotificationType
from notifications.templates.layout import greeting, html_email, text_email


def _money(value) -> str:
    return f"${float(value or 0):.2f}"


class OrderConfirmationTemplate:
    notification_type = NotificationType.ORDER_CONFIRMATION.value
    default_channels = [NotificationChannel.EMAIL.value]

    @classmethod
    def render(cls, context: dict) -> dict:
        order_number = context.get("order_number", "N/A")
        lines = [
            f"{item['quantity']} x {item['product_name']}: {_money(item.get('total_price'))}"
            for item in context.get("items", [])
        ]
        totals = (
            f"Subtotal: {_money(context.get('subtotal'))}\n"
            f"Tax: {_money(context.get('tax_amount'))}\n"
            f"Delivery: {_money(context.get('delivery_fee'))}\n"
            f"Total: {_money(context.get('total_amount'))}"
        )
        paragraphs = [
            greeting(context.get("customer_name")),
            f"Thank you for your order! Order {order_number} has been received and is being prepared "
            "with love.",
            "\n".join(lines) if lines else "Your items are listed in your account.",
            totals,
        ]
        if context.get("delivery_date"):
            paragraphs.append(f"Delivery date: {context['delivery_date']}")
        paragraphs.append(f"Questions about your order? Contact us at {context['support_email']}")

        return {
            "subject": f"Order Confirmed - {order_number}",
            "body": text_email("Order Confirmed", paragraphs),
            "html_body": html_email("Order Confirmed", paragraphs, subtitle=f"Order {order_number}"),
        }
