"""Application tests for profile, role, status and deletion commands."""

import pytest
from identity.customer.account import (
    ChangeAccountStatus,
    ChangeRole,
    DeleteAccount,
    RequestAccountDeletion,
)
from identity.customer.customer import Customer
from identity.customer.profile import UpdateProfile
from identity.customer.registration import RegisterCustomer
from identity.projections.customer_lookup import find_customer_id
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _customer(customer_id):
    return current_domain.repository_for(Customer).get(customer_id)


@pytest.fixture
def customer_id():
    return _process(RegisterCustomer(name="Jane Doe", email="jane@example.com"))


class TestProfileAndAdministration:
    def test_update_profile(self, customer_id):
        _process(UpdateProfile(customer_id=customer_id, name="Jane Smith"))
        customer = _customer(customer_id)
        assert customer.name == "Jane Smith"

    def test_update_profile_unknown_customer(self):
        with pytest.raises(ObjectNotFoundError):
            _process(UpdateProfile(customer_id="missing", name="Nobody"))

    def test_change_role(self, customer_id):
        _process(ChangeRole(customer_id=customer_id, role="admin"))
        assert _customer(customer_id).role == "admin"

    def test_change_status(self, customer_id):
        _process(ChangeAccountStatus(customer_id=customer_id, status="banned", reason="Fraud"))
        assert _customer(customer_id).status == "banned"

    def test_unknown_role_rejected(self, customer_id):
        with pytest.raises(ValidationError):
            ChangeRole(customer_id=customer_id, role="superuser")


class TestAccountDeletion:
    def test_deletion_frees_email(self, customer_id):
        _process(RequestAccountDeletion(customer_id=customer_id))
        token = _customer(customer_id).deletion_token
        _process(DeleteAccount(customer_id=customer_id, token=token))

        assert _customer(customer_id).is_deleted
        assert find_customer_id("jane@example.com") is None

        new_id = _process(RegisterCustomer(name="Jane Again", email="jane@example.com"))
        assert new_id != customer_id

    def test_wrong_token_keeps_account(self, customer_id):
        _process(RequestAccountDeletion(customer_id=customer_id))
        with pytest.raises(ValidationError):
            _process(DeleteAccount(customer_id=customer_id, token="wrong"))
        assert not _customer(customer_id).is_deleted
