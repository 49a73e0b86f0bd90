"""Pydantic request/response schemas for the Messaging API."""

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, Field

ThreadStatusLiteral = Literal["open", "closed", "pending"]
PriorityLiteral = Literal["low", "normal", "high", "urgent"]
RequestStatusLiteral = Literal["pending", "reviewing", "quoted", "approved", "declined", "completed"]
RequestTypeLiteral = Literal[
    "custom_cake", "custom_cookies", "special_flavor", "custom_decoration", "bulk_order", "other"
]


# --- Thread Schemas ---


class StartThreadRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "subject": "Question about my birthday cake",
                    "content": "Can the lettering be in gold?",
                    "priority": "normal",
                }
            ]
        }
    }

    customer_id: str
    subject: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=5000)
    priority: PriorityLiteral = "normal"
    order_id: str | None = None
    attachments: dict[str, Any] | None = None


class PostMessageRequest(BaseModel):
    sender_id: str | None = None
    content: str = Field(..., min_length=1, max_length=5000)
    is_from_customer: bool = True
    attachments: dict[str, Any] | None = None


class MarkReadRequest(BaseModel):
    reader: Literal["customer", "staff"] = "customer"


class ThreadStatusRequest(BaseModel):
    status: ThreadStatusLiteral


class ThreadPriorityRequest(BaseModel):
    priority: PriorityLiteral


class BulkThreadUpdateRequest(BaseModel):
    thread_ids: list[str] = Field(..., min_length=1)
    status: ThreadStatusLiteral | None = None
    priority: PriorityLiteral | None = None


# --- Custom Request Schemas ---


class SubmitCustomRequestRequest(BaseModel):
    customer_id: str
    request_type: RequestTypeLiteral
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    specifications: dict[str, Any] | None = None
    reference_images: dict[str, Any] | None = None
    budget_range: str | None = Field(None, max_length=50)
    event_date: date | None = None


class UpdateCustomRequestRequest(BaseModel):
    customer_id: str
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=2000)
    specifications: dict[str, Any] | None = None
    reference_images: dict[str, Any] | None = None
    budget_range: str | None = Field(None, max_length=50)
    event_date: date | None = None


class AdminNotesRequest(BaseModel):
    admin_notes: str | None = Field(None, max_length=1000)


class QuoteRequest(BaseModel):
    price: float = Field(..., ge=0)
    admin_notes: str | None = Field(None, max_length=1000)


class CompleteRequest(BaseModel):
    order_id: str | None = None


# --- Response Schemas ---


class IdResponse(BaseModel):
    id: str


class CountResponse(BaseModel):
    count: int


class StatusResponse(BaseModel):
    status: str = "ok"
