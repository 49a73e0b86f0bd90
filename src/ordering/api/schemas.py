"""Pydantic request/response schemas for the Ordering API.

These are external contracts, kept separate from the internal Protean
commands.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

OrderStatusLiteral = Literal["pending", "confirmed", "preparing", "ready", "delivered", "cancelled"]
PaymentStatusLiteral = Literal["pending", "processing", "completed", "failed", "refunded"]


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class DecorationsSchema(BaseModel):
    color: str | None = Field(None, max_length=50)
    design: str | None = Field(None, max_length=100)
    message: str | None = Field(None, max_length=200)


class CustomizationsSchema(BaseModel):
    custom_text: str | None = Field(None, max_length=500)
    decorations: DecorationsSchema | None = None
    special_instructions: str | None = Field(None, max_length=1000)
    gift_wrap: bool = False
    delivery_instructions: str | None = Field(None, max_length=500)


class DeliveryAddressSchema(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    company: str | None = Field(None, max_length=100)
    address_line_1: str = Field(..., min_length=1, max_length=100)
    address_line_2: str | None = Field(None, max_length=100)
    city: str = Field(..., min_length=1, max_length=50)
    state: str | None = Field(None, max_length=50)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=50)
    phone: str | None = Field(None, max_length=20)
    delivery_instructions: str | None = Field(None, max_length=500)


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    customer_id: str | None = None
    session_id: str | None = None
    product_id: str
    variant_id: str | None = None
    product_name: str = Field(..., min_length=1, max_length=255)
    unit_price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=1, le=100)
    customizations: CustomizationsSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "customer_id": "cust-001",
                    "product_id": "prod-001",
                    "product_name": "Classic Cheesecake",
                    "unit_price": 24.99,
                    "quantity": 1,
                    "customizations": {"custom_text": "Happy Birthday Sam!"},
                }
            ]
        }
    }


class UpdateCartItemRequest(BaseModel):
    quantity: int | None = Field(None, ge=1, le=100)
    customizations: CustomizationsSchema | None = None


class CartItemQuantity(BaseModel):
    item_id: str
    quantity: int = Field(..., ge=1, le=100)


class BulkUpdateCartItemsRequest(BaseModel):
    updates: list[CartItemQuantity] = Field(..., min_length=1)


class BulkRemoveCartItemsRequest(BaseModel):
    item_ids: list[str] = Field(..., min_length=1)


class MergeGuestCartRequest(BaseModel):
    session_id: str
    customer_id: str


# ---------------------------------------------------------------------------
# Wishlist Request Schemas
# ---------------------------------------------------------------------------
class CreateWishlistRequest(BaseModel):
    customer_id: str
    name: str = Field("My Wishlist", min_length=1, max_length=100)
    is_default: bool = False


class RenameWishlistRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class AddToWishlistRequest(BaseModel):
    product_id: str
    variant_id: str | None = None
    notes: str | None = Field(None, max_length=500)


class WishlistItemNotesRequest(BaseModel):
    notes: str | None = Field(None, max_length=500)


class MoveToCartRequest(BaseModel):
    product_name: str = Field(..., min_length=1, max_length=255)
    unit_price: float = Field(..., ge=0)
    quantity: int = Field(1, ge=1, le=100)
    customizations: CustomizationsSchema | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    cart_id: str
    delivery_address: DeliveryAddressSchema
    delivery_date: date | None = None
    special_instructions: str | None = Field(None, max_length=1000)
    payment_method_id: str = Field(..., min_length=1)
    delivery_fee: float = Field(0.0, ge=0)
    contact_email: str | None = Field(None, max_length=254)


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatusLiteral
    notes: str | None = Field(None, max_length=1000)
    created_by: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(None, max_length=1000)
    cancelled_by: str | None = None


class UpdatePaymentStatusRequest(BaseModel):
    payment_status: PaymentStatusLiteral
    payment_intent_id: str | None = None


class UpdateOrderDetailsRequest(BaseModel):
    special_instructions: str | None = Field(None, max_length=1000)
    delivery_date: date | None = None
    delivery_address: DeliveryAddressSchema | None = None


class BulkUpdateOrdersRequest(BaseModel):
    order_ids: list[str] = Field(..., min_length=1)
    status: OrderStatusLiteral | None = None
    payment_status: PaymentStatusLiteral | None = None
    notes: str | None = Field(None, max_length=1000)
    created_by: str | None = None


class OrderFilterRequest(BaseModel):
    status: list[OrderStatusLiteral] = Field(default_factory=list)
    payment_status: list[PaymentStatusLiteral] = Field(default_factory=list)
    customer_id: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    min_amount: float | None = Field(None, ge=0)
    max_amount: float | None = Field(None, ge=0)
    search: str | None = None
    limit: int = Field(50, ge=1, le=200)
    offset: int = Field(0, ge=0)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartItemResponse(BaseModel):
    cart_id: str
    item_id: str


class CheckoutResponse(BaseModel):
    order_id: str
    order_number: str


class IdResponse(BaseModel):
    id: str


class CountResponse(BaseModel):
    count: int


class StatusResponse(BaseModel):
    status: str = "ok"
