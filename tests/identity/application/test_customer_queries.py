"""Application tests for the admin customer listing and dashboard counters."""

from datetime import UTC, datetime, timedelta

from identity.customer.account import DeleteAccount, RequestAccountDeletion
from identity.customer.customer import Customer
from identity.customer.queries import dashboard_stats, list_customers
from identity.customer.registration import RegisterCustomer
from identity.customer.verification import VerifyEmail
from protean import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _register(name, email):
    return _process(RegisterCustomer(name=name, email=email))


class TestListCustomers:
    def test_pages_newest_first(self):
        for i in range(12):
            _register(f"Customer {i}", f"customer{i}@example.com")

        first = list_customers(page=1, page_size=5)
        assert first["total"] == 12
        assert first["total_pages"] == 3
        assert first["has_next"] is True
        assert first["has_prev"] is False
        assert len(first["customers"]) == 5

        last = list_customers(page=3, page_size=5)
        assert len(last["customers"]) == 2
        assert last["has_next"] is False

    def test_search_matches_name_or_email(self):
        _register("Alice Baker", "alice@example.com")
        _register("Bob Cook", "bob@cakeshop.co.uk")

        assert [c["name"] for c in list_customers(search="baker")["customers"]] == ["Alice Baker"]
        assert [c["name"] for c in list_customers(search="CAKESHOP")["customers"]] == ["Bob Cook"]

    def test_deleted_accounts_hidden(self):
        customer_id = _register("Gone Soon", "gone@example.com")
        _process(RequestAccountDeletion(customer_id=customer_id))
        token = current_domain.repository_for(Customer).get(customer_id).deletion_token
        _process(DeleteAccount(customer_id=customer_id, token=token))

        assert list_customers()["total"] == 0

    def test_reads_past_a_single_page(self, monkeypatch):
        monkeypatch.setattr("shared.utils.queries.PAGE_SIZE", 2)
        for i in range(5):
            _register(f"Customer {i}", f"paged{i}@example.com")

        listing = list_customers(page=1, page_size=10)
        assert listing["total"] == 5
        assert len(listing["customers"]) == 5
        assert len({c["email"] for c in listing["customers"]}) == 5


class TestDashboardStats:
    def test_counts(self):
        verified_id = _register("Verified", "verified@example.com")
        _register("Unverified", "unverified@example.com")
        token = current_domain.repository_for(Customer).get(verified_id).verification_token
        _process(VerifyEmail(customer_id=verified_id, token=token))

        stats = dashboard_stats()
        assert stats["total_customers"] == 2
        assert stats["verified_customers"] == 1
        assert stats["new_customers"] == 2
        assert len(stats["latest_customers"]) == 2

    def test_new_customers_window(self):
        _register("Old Timer", "old@example.com")
        stats = dashboard_stats(now=datetime.now(UTC) + timedelta(days=30))
        assert stats["total_customers"] == 1
        assert stats["new_customers"] == 0
