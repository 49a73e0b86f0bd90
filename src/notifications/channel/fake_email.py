"""In-memory email adapter used in development and tests.

Messages land in ``outbox`` instead of leaving the machine. ``configure``
makes the next sends fail, which is how the retry flow is exercised.
"""

from uuid import uuid4

from notifications.brand import BAKERY_BRAND
from notifications.channel.email_port import EmailPort

DEFAULT_FAILURE = "Email delivery failed"


class FakeEmailAdapter(EmailPort):
    def __init__(self):
        self.outbox: list[dict] = []
        self.should_succeed = True
        self.failure_reason = DEFAULT_FAILURE

    @property
    def sent_emails(self) -> list[dict]:
        return self.outbox

    def configure(self, should_succeed: bool = True, failure_reason: str = DEFAULT_FAILURE):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, to, subject, body, html_body=None, from_address=None) -> dict:
        if not self.should_succeed:
            return self.rejected(self.failure_reason)

        message_id = f"email-{uuid4().hex[:12]}"
        self.outbox.append(
            {
                "message_id": message_id,
                "from": from_address or BAKERY_BRAND["email"],
                "to": to,
                "subject": subject,
                "body": body,
                "html_body": html_body,
            }
        )
        return self.accepted(message_id)

    def reset(self):
        self.outbox.clear()
        self.configure()
