"""SMTP email adapter for deployments with a mail relay.

Configured from the environment: ``SMTP_HOST``, ``SMTP_PORT`` (587),
``SMTP_USERNAME``, ``SMTP_PASSWORD``, ``SMTP_USE_TLS`` ("true") and
``EMAIL_FROM`` (defaults to the bakery address).
"""

import os
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

from notifications.brand import BAKERY_BRAND
from notifications.channel.email_port import EmailPort


class SmtpEmailAdapter(EmailPort):
    def __init__(self, host, port=587, username=None, password=None, use_tls=True, default_from=None):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.default_from = default_from or f"{BAKERY_BRAND['name']} <{BAKERY_BRAND['email']}>"

    @classmethod
    def from_env(cls):
        return cls(
            host=os.environ["SMTP_HOST"],
            port=int(os.environ.get("SMTP_PORT", "587")),
            username=os.environ.get("SMTP_USERNAME"),
            password=os.environ.get("SMTP_PASSWORD"),
            use_tls=os.environ.get("SMTP_USE_TLS", "true").lower() == "true",
            default_from=os.environ.get("EMAIL_FROM"),
        )

    def _message(self, to, subject, body, html_body, from_address):
        message = EmailMessage()
        message["From"] = from_address or self.default_from
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = make_msgid(domain=BAKERY_BRAND["email"].split("@")[1])
        message.set_content(body)
        if html_body:
            message.add_alternative(html_body, subtype="html")
        return message

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
        from_address: str | None = None,
    ) -> dict:
        message = self._message(to, subject, body, html_body, from_address)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            return self.rejected(f"Email sending failed: {exc}")

        return self.accepted(message["Message-ID"])
