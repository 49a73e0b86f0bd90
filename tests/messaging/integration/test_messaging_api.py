"""Integration tests for the thread and custom request endpoints via TestClient."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from messaging.api import request_router, thread_router
from protean.integrations.fastapi import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(thread_router)
    app.include_router(request_router)
    register_exception_handlers(app)
    return TestClient(app)


def _start(client, subject="Cake question", customer_id="cust-001", **extra):
    payload = {"customer_id": customer_id, "subject": subject, "content": "Is it nut free?", **extra}
    response = client.post("/threads", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def _submit(client, title="Wedding cake", **extra):
    payload = {
        "customer_id": "cust-001",
        "request_type": "custom_cake",
        "title": title,
        "description": "Three tiers",
        **extra,
    }
    response = client.post("/custom-requests", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["id"]


class TestThreadAPI:
    def test_conversation(self, client):
        thread_id = _start(client, attachments={"images": [{"url": "https://cdn.example.com/a.png"}]})

        response = client.post(
            f"/threads/{thread_id}/messages",
            json={"sender_id": "staff-1", "content": "Yes it is", "is_from_customer": False},
        )
        assert response.status_code == 201

        thread = client.get(f"/threads/{thread_id}").json()
        assert thread["status"] == "pending"
        assert thread["messages"][0]["attachments"]["images"][0]["url"] == "https://cdn.example.com/a.png"
        assert client.get("/threads/customer/cust-001/unread").json() == {"count": 1}

        assert client.put(f"/threads/{thread_id}/read", json={"reader": "customer"}).json() == {"count": 1}
        assert client.get("/threads/customer/cust-001/unread").json() == {"count": 0}

    def test_missing_thread(self, client):
        assert client.get("/threads/missing").status_code == 404
        response = client.post("/threads/missing/messages", json={"content": "Hello"})
        assert response.status_code == 404

    def test_validation(self, client):
        assert client.post("/threads", json={"customer_id": "c", "subject": "", "content": "x"}).status_code == 422
        bad_url = {"images": [{"url": "ftp://cdn.example.com/a.png"}]}
        assert client.post("/threads", json={"customer_id": "c", "subject": "s", "content": "x", "attachments": bad_url}).status_code == 400

    def test_closed_thread_rejects_messages(self, client):
        thread_id = _start(client)
        client.put(f"/threads/{thread_id}/status", json={"status": "closed"})
        assert client.post(f"/threads/{thread_id}/messages", json={"content": "Hello?"}).status_code == 400

    def test_listing_filters_and_triage(self, client):
        cake = _start(client)
        order = _start(client, "Late order", order_id="ord-1")
        client.put(f"/threads/{cake}/priority", json={"priority": "urgent"})

        assert [t["id"] for t in client.get("/threads", params={"priority": "urgent"}).json()] == [cake]
        assert [t["id"] for t in client.get("/threads", params={"has_order": True}).json()] == [order]
        assert len(client.get("/threads/customer/cust-001").json()) == 2

        response = client.put("/threads/bulk", json={"thread_ids": [cake, order], "status": "closed"})
        assert response.json() == {"count": 2}
        assert len(client.get("/threads", params={"status": "closed"}).json()) == 2

    def test_stats_and_activity(self, client):
        _start(client)
        _submit(client)

        stats = client.get("/threads/stats").json()
        assert stats["threads"]["total"] == 1
        assert stats["custom_requests"]["total"] == 1
        activity = client.get("/threads/activity", params={"limit": 5}).json()
        assert [e["activity_type"] for e in activity] == ["custom_request", "message"]


class TestCustomRequestAPI:
    def test_workflow(self, client):
        event_date = (datetime.now(UTC).date() + timedelta(days=30)).isoformat()
        request_id = _submit(client, specifications={"size": "Three tiers", "servings": 60}, event_date=event_date)

        assert client.put(f"/custom-requests/{request_id}", json={"customer_id": "cust-001", "budget_range": "200-300"}).status_code == 200
        assert client.put(f"/custom-requests/{request_id}/review", json={"admin_notes": "Looks doable"}).status_code == 200
        assert client.put(f"/custom-requests/{request_id}/quote", json={"price": 240}).status_code == 200
        assert client.put(f"/custom-requests/{request_id}/approve").status_code == 200
        assert client.put(f"/custom-requests/{request_id}/complete", json={"order_id": "ord-5"}).status_code == 200

        request = client.get(f"/custom-requests/{request_id}").json()
        assert request["status"] == "completed"
        assert request["specifications"] == {"size": "Three tiers", "servings": 60}
        assert request["budget_range"] == "200-300"
        assert request["quoted_price"] == 240.0

    def test_errors(self, client):
        request_id = _submit(client)

        assert client.get("/custom-requests/missing").status_code == 404
        assert client.put(f"/custom-requests/{request_id}/approve").status_code == 400
        assert client.put(f"/custom-requests/{request_id}/quote", json={"price": -5}).status_code == 422
        response = client.put(f"/custom-requests/{request_id}", json={"customer_id": "cust-002", "title": "Mine"})
        assert response.status_code == 400
        past = (datetime.now(UTC).date() - timedelta(days=1)).isoformat()
        response = client.post(
            "/custom-requests",
            json={"customer_id": "c", "request_type": "other", "title": "t", "description": "d", "event_date": past},
        )
        assert response.status_code == 400

    def test_listing(self, client):
        _submit(client)
        cookies = _submit(client, "Office cookies", request_type="bulk_order")
        client.put(f"/custom-requests/{cookies}/decline", json={"admin_notes": "Too many"})

        declined = client.get("/custom-requests", params={"status": "declined"}).json()
        assert [r["id"] for r in declined] == [cookies]
        assert len(client.get("/custom-requests/customer/cust-001").json()) == 2
        assert client.get("/custom-requests", params={"request_type": "bulk_order"}).json()[0]["admin_notes"] == "Too many"
