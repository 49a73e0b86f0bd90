"""Request and response bodies for the notification and newsletter endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class CancelNotificationRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500, examples=["Customer asked us not to send it"])


class SubscribeRequest(BaseModel):
    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {"examples": [{"email": "cakefan@example.com", "firstName": "Sam", "source": "footer"}]},
    }

    email: str = Field(..., min_length=1, max_length=255)
    first_name: str | None = Field(None, max_length=100, alias="firstName")
    source: Literal["hero", "inline", "footer", "popup"] = "hero"


class UnsubscribeRequest(BaseModel):
    email: str | None = Field(None, min_length=1, max_length=255)
    token: str | None = Field(None, min_length=1)


class DeliveryReceiptRequest(BaseModel):
    message_id: str = Field(..., min_length=1, max_length=200)
    outcome: Literal["delivered", "bounced"]
    reason: str | None = Field(None, max_length=500, examples=["550 Mailbox unavailable"])


class SendDueRequest(BaseModel):
    as_of: datetime | None = None


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class SubscribeResponse(BaseModel):
    success: bool
    message: str
    subscriber_id: str | None = None


class UnsubscribeResponse(BaseModel):
    success: bool
    message: str


class DeliveryReceiptResponse(BaseModel):
    notification_id: str


class SendDueResponse(BaseModel):
    due: int
    sent: int
