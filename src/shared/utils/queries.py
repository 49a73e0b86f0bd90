"""Read-side helpers shared by the query modules of every context."""

from datetime import UTC, date, datetime

from protean.utils.globals import current_domain

# Rows read per round trip by fetch_all
PAGE_SIZE = 500


def fetch_all(cls, **filters) -> list:
    """Load every record of ``cls`` matching exact-value ``filters``, one page at a time."""
    query = current_domain.repository_for(cls)._dao.query.order_by("id")
    if filters:
        query = query.filter(**filters)

    records, offset = [], 0
    while True:
        page = query.limit(PAGE_SIZE).offset(offset).all()
        records.extend(page.items)
        if not page.has_next or not page.items:
            return records
        offset += PAGE_SIZE


def fetch_first(cls, **filters):
    query = current_domain.repository_for(cls)._dao.query.filter(**filters)
    items = query.limit(1).all().items
    return items[0] if items else None


def as_utc(value):
    """Normalise naive datetimes read back from storage to UTC-aware ones."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def sort_key_datetime(value) -> datetime:
    """Sort key that places missing timestamps first."""
    if value is None:
        return datetime.min.replace(tzinfo=UTC)
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    return value


def iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def money(value) -> float:
    return round(float(value or 0.0), 2)


def paginate(items: list, page: int, page_size: int) -> dict:
    """Slice ``items`` into a page and describe the neighbouring pages."""
    page = max(page, 1)
    total = len(items)
    total_pages = (total + page_size - 1) // page_size if total else 0
    start = (page - 1) * page_size
    return {
        "items": items[start : start + page_size],
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
