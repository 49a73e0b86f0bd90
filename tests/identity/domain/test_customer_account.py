import pytest
from identity.customer.customer import AccountStatus, Customer, Role
from identity.customer.events import (
    AccountDeleted,
    AccountDeletionRequested,
    AccountStatusChanged,
    ProfileUpdated,
    RoleChanged,
)
from protean.exceptions import ValidationError


@pytest.fixture
def customer():
    customer = Customer.register(name="Jane Doe", email="jane@example.com")
    customer._events.clear()
    return customer


class TestProfile:
    def test_update_name(self, customer):
        customer.update_profile(name="Jane Smith")
        assert customer.name == "Jane Smith"
        assert isinstance(customer._events[-1], ProfileUpdated)

    def test_update_image_only_keeps_name(self, customer):
        customer.update_profile(image="https://cdn.example.com/jane.png")
        assert customer.name == "Jane Doe"
        assert customer.image == "https://cdn.example.com/jane.png"

    def test_empty_name_rejected(self, customer):
        with pytest.raises(ValidationError) as exc:
            customer.update_profile(name="")
        assert exc.value.messages["name"] == ["Name cannot be empty"]

    def test_image_can_be_cleared(self, customer):
        customer.update_profile(image="https://cdn.example.com/jane.png")
        customer.update_profile(image=None)
        assert customer.image is None


class TestRoleAndStatus:
    def test_promote_to_admin(self, customer):
        customer.change_role(Role.ADMIN.value)
        assert customer.role == "admin"
        event = customer._events[-1]
        assert isinstance(event, RoleChanged)
        assert event.previous_role == "user"

    def test_same_role_rejected(self, customer):
        with pytest.raises(ValidationError):
            customer.change_role(Role.USER.value)

    def test_ban(self, customer):
        customer.change_status(AccountStatus.BANNED.value, reason="Chargeback fraud")
        assert customer.status == "banned"
        event = customer._events[-1]
        assert isinstance(event, AccountStatusChanged)
        assert event.reason == "Chargeback fraud"

    def test_same_status_rejected(self, customer):
        with pytest.raises(ValidationError) as exc:
            customer.change_status(AccountStatus.ACTIVE.value)
        assert exc.value.messages["status"] == ["Account is already active"]


class TestDeletion:
    def test_request_issues_token(self, customer):
        customer.request_deletion()
        assert customer.deletion_token
        assert isinstance(customer._events[-1], AccountDeletionRequested)

    def test_confirm_deletes(self, customer):
        customer.request_deletion()
        customer.delete(customer.deletion_token)

        assert customer.is_deleted
        assert customer.status == AccountStatus.INACTIVE.value
        assert customer.deletion_token is None
        event = customer._events[-1]
        assert isinstance(event, AccountDeleted)
        assert event.email == "jane@example.com"

    def test_delete_without_request_rejected(self, customer):
        with pytest.raises(ValidationError) as exc:
            customer.delete("anything")
        assert exc.value.messages["token"] == ["Invalid account deletion token"]

    def test_deleted_account_is_frozen(self, customer):
        customer.request_deletion()
        customer.delete(customer.deletion_token)

        with pytest.raises(ValidationError) as exc:
            customer.update_profile(name="Ghost")
        assert exc.value.messages["customer"] == ["Account has been deleted"]
        with pytest.raises(ValidationError):
            customer.request_password_reset()
