"""Read-side queries for custom requests."""

import json
from dataclasses import dataclass, field
from datetime import date

from protean.exceptions import ValidationError

from messaging.request.custom_request import CustomRequest
from shared.utils.queries import fetch_all, fetch_first, iso, sort_key_datetime


def request_to_dict(request: CustomRequest) -> dict:
    return {
        "id": str(request.id),
        "customer_id": str(request.customer_id),
        "request_type": request.request_type,
        "title": request.title,
        "description": request.description,
        "specifications": json.loads(request.specifications) if request.specifications else None,
        "reference_images": json.loads(request.reference_images) if request.reference_images else None,
        "budget_range": request.budget_range,
        "event_date": iso(request.event_date),
        "status": request.status,
        "admin_notes": request.admin_notes,
        "quoted_price": request.quoted_price,
        "order_id": str(request.order_id) if request.order_id else None,
        "created_at": iso(request.created_at),
        "updated_at": iso(request.updated_at),
    }


def request_by_id(request_id: str) -> dict | None:
    request = fetch_first(CustomRequest, id=request_id)
    return request_to_dict(request) if request is not None else None


@dataclass
class RequestFilter:
    status: list[str] = field(default_factory=list)
    request_type: list[str] = field(default_factory=list)
    has_quote: bool | None = None
    event_date_from: date | None = None
    event_date_to: date | None = None
    search: str | None = None
    limit: int = 20
    offset: int = 0

    def validate(self):
        if self.event_date_from and self.event_date_to and self.event_date_from > self.event_date_to:
            raise ValidationError({"event_date_from": ["From date must be before or equal to to date"]})

    def matches(self, request: CustomRequest) -> bool:
        if self.status and request.status not in self.status:
            return False
        if self.request_type and request.request_type not in self.request_type:
            return False
        if self.has_quote is not None and (request.quoted_price is not None) != self.has_quote:
            return False
        if self.event_date_from or self.event_date_to:
            if request.event_date is None:
                return False
            if self.event_date_from and request.event_date < self.event_date_from:
                return False
            if self.event_date_to and request.event_date > self.event_date_to:
                return False
        if self.search:
            term = self.search.lower()
            if term not in (request.title or "").lower() and term not in (request.description or "").lower():
                return False
        return True


def _list(requests, filters: RequestFilter | None) -> list[dict]:
    filters = filters or RequestFilter()
    filters.validate()
    matching = sorted(
        (r for r in requests if filters.matches(r)),
        key=lambda r: sort_key_datetime(r.created_at),
        reverse=True,
    )
    return [request_to_dict(r) for r in matching[filters.offset : filters.offset + filters.limit]]


def customer_requests(customer_id: str, filters: RequestFilter | None = None) -> list[dict]:
    return _list(fetch_all(CustomRequest, customer_id=customer_id), filters)


def all_requests(filters: RequestFilter | None = None) -> list[dict]:
    return _list(fetch_all(CustomRequest), filters)
