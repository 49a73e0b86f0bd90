"""Read-side queries for orders: lookups, filtering and analytics."""

import json
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime

from protean.exceptions import ValidationError

from ordering.order.order import Order, OrderStatus, PaymentStatus, _as_date
from shared.utils.queries import as_utc, fetch_all, fetch_first, iso, money, sort_key_datetime

_OPEN_STATES = {OrderStatus.PENDING.value, OrderStatus.CONFIRMED.value, OrderStatus.PREPARING.value}


def _newest_first(orders):
    return sorted(orders, key=lambda o: sort_key_datetime(o.created_at), reverse=True)


def order_to_dict(order: Order, with_details: bool = True) -> dict:
    data = {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id) if order.customer_id else None,
        "contact_email": order.contact_email,
        "status": order.status,
        "payment_status": order.payment_status,
        "subtotal": money(order.subtotal),
        "tax_amount": money(order.tax_amount),
        "delivery_fee": money(order.delivery_fee),
        "total_amount": money(order.total_amount),
        "special_instructions": order.special_instructions,
        "delivery_date": iso(order.delivery_date),
        "item_count": len(order.items),
        "created_at": iso(order.created_at),
        "updated_at": iso(order.updated_at),
    }
    if not with_details:
        return data

    items = sorted(order.items, key=lambda i: sort_key_datetime(i.created_at))
    history = sorted(order.status_history, key=lambda h: sort_key_datetime(h.created_at), reverse=True)
    data.update(
        {
            "delivery_address": order.delivery_address.to_dict() if order.delivery_address else None,
            "payment_method_id": order.payment_method_id,
            "payment_intent_id": order.payment_intent_id,
            "items": [
                {
                    "id": str(i.id),
                    "product_id": str(i.product_id),
                    "variant_id": str(i.variant_id) if i.variant_id else None,
                    "product_name": i.product_name,
                    "quantity": i.quantity,
                    "unit_price": money(i.unit_price),
                    "total_price": money(i.total_price),
                    "customizations": json.loads(i.customizations) if i.customizations else None,
                }
                for i in items
            ],
            "status_history": [
                {
                    "status": h.status,
                    "notes": h.notes,
                    "created_by": h.created_by,
                    "created_at": iso(h.created_at),
                }
                for h in history
            ],
        }
    )
    return data


def order_by_id(order_id: str) -> dict | None:
    order = fetch_first(Order, id=order_id)
    return order_to_dict(order) if order is not None else None


def order_by_number(order_number: str) -> dict | None:
    order = fetch_first(Order, order_number=order_number)
    return order_to_dict(order) if order is not None else None


def _in_range(value, date_from, date_to) -> bool:
    if value is None:
        return date_from is None and date_to is None
    day = as_utc(value).date() if isinstance(value, datetime) else value
    if date_from is not None and day < _as_date(date_from):
        return False
    if date_to is not None and day > _as_date(date_to):
        return False
    return True


def customer_orders(
    customer_id: str,
    limit: int = 20,
    offset: int = 0,
    status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[dict]:
    filters = {"customer_id": customer_id}
    if status:
        filters["status"] = status
    orders = [o for o in fetch_all(Order, **filters) if _in_range(o.created_at, date_from, date_to)]
    return [order_to_dict(o, with_details=False) for o in _newest_first(orders)[offset : offset + limit]]


def customer_order_stats(customer_id: str) -> dict:
    orders = fetch_all(Order, customer_id=customer_id)
    return {
        "total_orders": len(orders),
        "total_spent": money(sum(o.total_amount or 0 for o in orders if o.status != OrderStatus.CANCELLED.value)),
        "completed": sum(1 for o in orders if o.status == OrderStatus.DELIVERED.value),
        "pending": sum(1 for o in orders if o.status in _OPEN_STATES),
    }


def recent_orders(limit: int = 10) -> list[dict]:
    return [order_to_dict(o, with_details=False) for o in _newest_first(fetch_all(Order))[:limit]]


def orders_by_status(status: str) -> list[dict]:
    """Earliest delivery first, undated orders last, ties newest first."""
    orders = _newest_first(fetch_all(Order, status=status))
    orders.sort(key=lambda o: (o.delivery_date is None, _as_date(o.delivery_date) or date.max))
    return [order_to_dict(o, with_details=False) for o in orders]


def orders_by_delivery_date(day: date) -> list[dict]:
    day = _as_date(day)
    orders = [o for o in fetch_all(Order) if _as_date(o.delivery_date) == day]
    return [order_to_dict(o) for o in _newest_first(orders)]


@dataclass
class OrderFilter:
    status: list[str] = field(default_factory=list)
    payment_status: list[str] = field(default_factory=list)
    customer_id: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    min_amount: float | None = None
    max_amount: float | None = None
    search: str | None = None
    limit: int = 50
    offset: int = 0

    def validate(self):
        errors = {}
        if self.date_from and self.date_to and _as_date(self.date_from) > _as_date(self.date_to):
            errors["date_from"] = ["Start date must be before or equal to end date"]
        if self.min_amount is not None and self.max_amount is not None and self.min_amount > self.max_amount:
            errors["min_amount"] = ["Minimum amount must be less than or equal to maximum amount"]
        unknown = [s for s in self.status if s not in {e.value for e in OrderStatus}]
        if unknown:
            errors["status"] = [f"Unknown order status: {', '.join(unknown)}"]
        unknown = [s for s in self.payment_status if s not in {e.value for e in PaymentStatus}]
        if unknown:
            errors["payment_status"] = [f"Unknown payment status: {', '.join(unknown)}"]
        if errors:
            raise ValidationError(errors)

    def matches(self, order: Order) -> bool:
        if self.status and order.status not in self.status:
            return False
        if self.payment_status and order.payment_status not in self.payment_status:
            return False
        if self.customer_id and str(order.customer_id) != str(self.customer_id):
            return False
        if (self.date_from or self.date_to) and not _in_range(order.created_at, self.date_from, self.date_to):
            return False
        if self.min_amount is not None and (order.total_amount or 0) < self.min_amount:
            return False
        if self.max_amount is not None and (order.total_amount or 0) > self.max_amount:
            return False
        if self.search and self.search.lower() not in order.order_number.lower():
            return False
        return True


def filter_orders(filters: OrderFilter) -> dict:
    filters.validate()
    orders = _newest_first(o for o in fetch_all(Order) if filters.matches(o))
    page = orders[filters.offset : filters.offset + filters.limit]
    return {
        "orders": [order_to_dict(o, with_details=False) for o in page],
        "total": len(orders),
        "limit": filters.limit,
        "offset": filters.offset,
        "has_more": filters.offset + len(page) < len(orders),
    }


def order_analytics(date_from: date | None = None, date_to: date | None = None) -> dict:
    orders = [o for o in fetch_all(Order) if _in_range(o.created_at, date_from, date_to)]
    paid = [o for o in orders if o.payment_status == PaymentStatus.COMPLETED.value]
    revenue = sum(o.total_amount or 0 for o in paid)
    return {
        "total_orders": len(orders),
        "total_revenue": money(revenue),
        "average_order_value": money(revenue / len(paid)) if paid else 0.0,
        "by_status": dict(Counter(o.status for o in orders)),
        "by_payment_status": dict(Counter(o.payment_status for o in orders)),
    }


def popular_products(limit: int = 10) -> list[dict]:
    """Best sellers by quantity across orders that were not cancelled."""
    totals = defaultdict(lambda: {"quantity": 0, "orders": set(), "revenue": 0.0, "product_name": None})
    for order in fetch_all(Order):
        if order.status == OrderStatus.CANCELLED.value:
            continue
        for item in order.items:
            entry = totals[str(item.product_id)]
            entry["quantity"] += item.quantity
            entry["orders"].add(str(order.id))
            entry["revenue"] += item.total_price or 0
            entry["product_name"] = entry["product_name"] or item.product_name

    ranked = sorted(totals.items(), key=lambda kv: (-kv[1]["quantity"], kv[1]["product_name"] or ""))
    return [
        {
            "product_id": product_id,
            "product_name": entry["product_name"],
            "total_quantity": entry["quantity"],
            "order_count": len(entry["orders"]),
            "total_revenue": money(entry["revenue"]),
        }
        for product_id, entry in ranked[:limit]
    ]


def order_stats_since(since: datetime) -> dict:
    orders = fetch_all(Order)
    since = as_utc(since)
    return {
        "total_orders": len(orders),
        "recent_orders": sum(1 for o in orders if o.created_at and as_utc(o.created_at) >= since),
    }
