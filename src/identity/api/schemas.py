"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Request Schemas ---


class RegisterCustomerRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Jane Doe",
                    "email": "jane.doe@example.com",
                    "image": "https://cdn.example.com/avatars/jane.png",
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=254)
    image: str | None = Field(None, max_length=1000)


class TokenRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"token": "3q2-7w8e9r0t"}]}}

    token: str = Field(..., min_length=1, max_length=100)


class RequestEmailChangeRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"new_email": "jane.new@example.com"}]}}

    new_email: str = Field(..., max_length=254)


class PasswordResetRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "jane.doe@example.com"}]}}

    email: str = Field(..., max_length=254)


class UpdateProfileRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"name": "Jane Smith"}]}}

    name: str | None = Field(None, min_length=1, max_length=255)
    image: str | None = Field(None, max_length=1000)


class ChangeRoleRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"role": "admin"}]}}

    role: str = Field(..., max_length=10)


class ChangeStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "banned", "reason": "Chargeback fraud"}]}}

    status: str = Field(..., max_length=10)
    reason: str | None = Field(None, max_length=500)


# --- Response Schemas ---


class CustomerIdResponse(BaseModel):
    customer_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CustomerResponse(BaseModel):
    id: str
    name: str
    email: str
    image: str | None = None
    role: str
    status: str
    email_verified: bool
    pending_email: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    deleted_at: str | None = None


class CustomerPageResponse(BaseModel):
    customers: list[CustomerResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool
