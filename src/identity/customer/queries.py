"""Read-side queries over customer accounts for the account and admin pages."""

from datetime import UTC, datetime, timedelta

from identity.customer.customer import Customer
from shared.utils.queries import fetch_all, iso, paginate, sort_key_datetime

NEW_CUSTOMER_WINDOW = timedelta(days=7)


def customer_to_dict(customer: Customer) -> dict:
    return {
        "id": str(customer.id),
        "name": customer.name,
        "email": customer.email.address,
        "image": customer.image,
        "role": customer.role,
        "status": customer.status,
        "email_verified": customer.email_verified,
        "pending_email": customer.pending_email,
        "created_at": iso(customer.created_at),
        "updated_at": iso(customer.updated_at),
        "deleted_at": iso(customer.deleted_at),
    }


def _live_customers() -> list[Customer]:
    customers = [c for c in fetch_all(Customer) if c.deleted_at is None]
    customers.sort(key=lambda c: sort_key_datetime(c.created_at), reverse=True)
    return customers


def list_customers(search: str | None = None, page: int = 1, page_size: int = 10) -> dict:
    """Page through accounts, newest first, optionally matching name or email."""
    customers = _live_customers()
    if search:
        needle = search.strip().lower()
        customers = [c for c in customers if needle in (c.name or "").lower() or needle in c.email.address]

    result = paginate(customers, page, page_size)
    result["customers"] = [customer_to_dict(c) for c in result.pop("items")]
    return result


def dashboard_stats(now: datetime | None = None) -> dict:
    """Customer counters for the admin dashboard."""
    now = now or datetime.now(UTC)
    since = now - NEW_CUSTOMER_WINDOW
    customers = _live_customers()

    return {
        "total_customers": len(customers),
        "verified_customers": sum(1 for c in customers if c.email_verified),
        "new_customers": sum(1 for c in customers if sort_key_datetime(c.created_at) >= since),
        "latest_customers": [customer_to_dict(c) for c in customers[:5]],
    }
