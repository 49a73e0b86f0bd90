"""Integration tests for the notification and newsletter endpoints via TestClient."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from notifications.api.routes import newsletter_router, router
from notifications.notification.helpers import send_email
from notifications.notification.notification import NotificationType
from protean.integrations.fastapi import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(router)
    app.include_router(newsletter_router)
    register_exception_handlers(app)
    return TestClient(app)


def _verify(recipient="sam@example.com", **kwargs):
    return send_email(
        NotificationType.VERIFY_EMAIL.value,
        recipient,
        {"user_email": recipient, "verification_url": "https://deeliciousbakes.co.uk/verify-email?token=t"},
        **kwargs,
    )


class TestNotificationsAPI:
    def test_get_notification(self, client):
        notification_id = _verify()

        response = client.get(f"/notifications/{notification_id}")
        assert response.status_code == 200
        assert response.json()["status"] == "Sent"
        assert client.get("/notifications/missing").status_code == 404

    def test_recipient_history(self, client):
        _verify()
        _verify("dee@example.com")

        response = client.get("/notifications/recipient/sam@example.com", params={"limit": 5})
        assert response.json()["total"] == 1
        assert response.json()["notifications"][0]["recipient"] == "sam@example.com"

    def test_retry_failed(self, client, outbox):
        outbox.configure(should_succeed=False)
        notification_id = _verify()
        assert [n["notification_id"] for n in client.get("/notifications/failed").json()] == [notification_id]

        outbox.configure(should_succeed=True)
        response = client.post(f"/notifications/{notification_id}/retry")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert client.get(f"/notifications/{notification_id}").json()["status"] == "Sent"

    def test_retry_errors(self, client):
        assert client.post("/notifications/missing/retry").status_code == 404
        assert client.post(f"/notifications/{_verify()}/retry").status_code == 400

    def test_cancel(self, client):
        notification_id = _verify(scheduled_for=datetime.now(UTC) + timedelta(days=1))

        response = client.put(f"/notifications/{notification_id}/cancel", json={"reason": "Address changed"})
        assert response.status_code == 200
        assert client.get(f"/notifications/{notification_id}").json()["status"] == "Cancelled"
        assert client.put(f"/notifications/{notification_id}/cancel", json={"reason": ""}).status_code == 422

    def test_delivery_receipt_webhook(self, client, outbox):
        notification_id = _verify()
        message_id = outbox.sent_emails[0]["message_id"]

        response = client.post(
            "/notifications/receipts",
            json={"message_id": message_id, "outcome": "bounced", "reason": "550 Mailbox unavailable"},
        )
        assert response.json() == {"notification_id": notification_id}
        assert client.get(f"/notifications/{notification_id}").json()["status"] == "Bounced"

        assert client.post("/notifications/receipts", json={"message_id": "nope", "outcome": "delivered"}).status_code == 404
        assert client.post("/notifications/receipts", json={"message_id": message_id, "outcome": "opened"}).status_code == 422

    def test_send_due(self, client, outbox):
        _verify(scheduled_for=datetime.now(UTC) + timedelta(hours=2))

        assert client.post("/notifications/send-due").json() == {"due": 0, "sent": 0}
        as_of = (datetime.now(UTC) + timedelta(hours=3)).isoformat()
        assert client.post("/notifications/send-due", json={"as_of": as_of}).json() == {"due": 1, "sent": 1}
        assert len(outbox.sent_emails) == 1

    def test_stats(self, client):
        _verify()
        stats = client.get("/notifications/stats").json()
        assert stats == {"total": 1, "by_status": {"Sent": 1}, "by_type": {"VerifyEmail": 1}}


class TestNewsletterAPI:
    def test_subscribe(self, client, outbox):
        response = client.post("/subscribe", json={"email": "sam@example.com", "firstName": "Sam", "source": "footer"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["subscriber_id"]
        assert outbox.sent_emails[0]["to"] == "sam@example.com"
        assert client.get("/notifications/subscribers/stats").json()["by_source"] == {"footer": 1}

    def test_duplicate_subscription(self, client):
        client.post("/subscribe", json={"email": "sam@example.com"})
        response = client.post("/subscribe", json={"email": "sam@example.com"})

        assert response.status_code == 409
        assert response.json()["detail"] == "This email is already subscribed to our newsletter."

    def test_subscribe_validation(self, client):
        assert client.post("/subscribe", json={"email": "sam@example.com", "source": "billboard"}).status_code == 422
        assert client.post("/subscribe", json={"email": "not-an-email"}).status_code == 400

    def test_unsubscribe(self, client):
        client.post("/subscribe", json={"email": "sam@example.com"})

        response = client.post("/unsubscribe", json={"email": "sam@example.com"})
        assert response.status_code == 200
        assert response.json()["success"] is True

        assert client.post("/unsubscribe", json={"email": "sam@example.com"}).status_code == 400
        assert client.post("/unsubscribe", json={"email": "ghost@example.com"}).status_code == 404
        assert client.post("/unsubscribe", json={}).status_code == 400
