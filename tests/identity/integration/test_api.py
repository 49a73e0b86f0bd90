"""Integration tests for the Identity API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from identity.api.routes import admin_router, router
from identity.customer.customer import Customer
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(router)
    app.include_router(admin_router)
    register_exception_handlers(app)
    return TestClient(app)


def _register(client, name="Jane Doe", email="jane@example.com"):
    response = client.post("/customers", json={"name": name, "email": email})
    assert response.status_code == 201
    return response.json()["customer_id"]


def _customer(customer_id):
    return current_domain.repository_for(Customer).get(customer_id)


class TestRegistrationAPI:
    def test_register_and_fetch(self, client):
        customer_id = _register(client)

        response = client.get(f"/customers/{customer_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "jane@example.com"
        assert body["role"] == "user"
        assert body["email_verified"] is False

    def test_duplicate_email_returns_400(self, client):
        _register(client)
        response = client.post("/customers", json={"name": "Again", "email": "jane@example.com"})
        assert response.status_code == 400

    def test_unknown_customer_returns_404(self, client):
        assert client.get("/customers/missing").status_code == 404

    def test_missing_name_returns_422(self, client):
        assert client.post("/customers", json={"email": "jane@example.com"}).status_code == 422


class TestEmailFlowsAPI:
    def test_verify_email(self, client):
        customer_id = _register(client)
        token = _customer(customer_id).verification_token

        response = client.put(f"/customers/{customer_id}/verify-email", json={"token": token})
        assert response.status_code == 200
        assert client.get(f"/customers/{customer_id}").json()["email_verified"] is True

    def test_verify_with_bad_token_returns_400(self, client):
        customer_id = _register(client)
        response = client.put(f"/customers/{customer_id}/verify-email", json={"token": "nope"})
        assert response.status_code == 400

    def test_email_change(self, client):
        customer_id = _register(client)
        response = client.post(f"/customers/{customer_id}/email-change", json={"new_email": "new@example.com"})
        assert response.status_code == 202
        assert client.get(f"/customers/{customer_id}").json()["pending_email"] == "new@example.com"

        token = _customer(customer_id).email_change_token
        response = client.put(f"/customers/{customer_id}/email-change", json={"token": token})
        assert response.status_code == 200
        assert client.get(f"/customers/{customer_id}").json()["email"] == "new@example.com"

    def test_password_reset_always_accepted(self, client):
        _register(client)
        for email in ("jane@example.com", "ghost@example.com"):
            response = client.post("/customers/password-reset", json={"email": email})
            assert response.status_code == 202
            assert response.json()["status"] == "accepted"


class TestAccountAPI:
    def test_update_profile(self, client):
        customer_id = _register(client)
        response = client.put(f"/customers/{customer_id}/profile", json={"name": "Jane Smith"})
        assert response.status_code == 200
        assert client.get(f"/customers/{customer_id}").json()["name"] == "Jane Smith"

    def test_deletion_flow(self, client):
        customer_id = _register(client)
        assert client.post(f"/customers/{customer_id}/deletion").status_code == 202

        token = _customer(customer_id).deletion_token
        response = client.put(f"/customers/{customer_id}/deletion", json={"token": token})
        assert response.status_code == 200
        assert client.get(f"/customers/{customer_id}").json()["deleted_at"] is not None


class TestAdminAPI:
    def test_search_customers(self, client):
        _register(client, "Alice Baker", "alice@example.com")
        _register(client, "Bob Cook", "bob@example.com")

        response = client.get("/admin/customers", params={"search": "alice"})
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["customers"][0]["name"] == "Alice Baker"

    def test_change_role_and_status(self, client):
        customer_id = _register(client)

        assert client.put(f"/admin/customers/{customer_id}/role", json={"role": "admin"}).status_code == 200
        response = client.put(
            f"/admin/customers/{customer_id}/status",
            json={"status": "banned", "reason": "Chargeback fraud"},
        )
        assert response.status_code == 200

        body = client.get(f"/customers/{customer_id}").json()
        assert body["role"] == "admin"
        assert body["status"] == "banned"

    def test_same_role_returns_400(self, client):
        customer_id = _register(client)
        assert client.put(f"/admin/customers/{customer_id}/role", json={"role": "user"}).status_code == 400
