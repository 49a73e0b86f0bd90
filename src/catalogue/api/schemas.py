"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

# --- Category Schemas ---


class CreateCategoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Birthday Cakes",
                    "description": "Special cakes for birthday celebrations",
                    "parent_id": "cat-001",
                    "sort_order": 1,
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=2000)
    parent_id: str | None = None
    sort_order: int = Field(0, ge=0)
    is_active: bool = True


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=2000)
    parent_id: str | None = None
    clear_parent: bool = False
    is_active: bool | None = None


class CategoryOrder(BaseModel):
    id: str
    sort_order: int = Field(..., ge=0)


class ReorderCategoriesRequest(BaseModel):
    orders: list[CategoryOrder] = Field(..., min_length=1)


# --- Product Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Classic Cheesecake",
                    "base_price": 24.99,
                    "category_id": "cat-001",
                    "stock_quantity": 50,
                    "min_slices": 8,
                    "max_slices": 12,
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=10000)
    short_description: str | None = Field(None, max_length=1000)
    category_id: str | None = None
    base_price: float = Field(..., ge=0)
    is_active: bool = True
    stock_quantity: int = Field(0, ge=0)
    min_slices: int | None = Field(None, ge=1)
    max_slices: int | None = Field(None, ge=1)
    serving_size: str | None = Field(None, max_length=255)
    preparation_time: str | None = Field(None, max_length=255)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=10000)
    short_description: str | None = Field(None, max_length=1000)
    category_id: str | None = None
    base_price: float | None = Field(None, ge=0)
    is_active: bool | None = None
    stock_quantity: int | None = Field(None, ge=0)
    min_slices: int | None = Field(None, ge=1)
    max_slices: int | None = Field(None, ge=1)
    serving_size: str | None = Field(None, max_length=255)
    preparation_time: str | None = Field(None, max_length=255)


class BulkUpdateRequest(BaseModel):
    product_ids: list[str] = Field(..., min_length=1)
    operation: Literal["activate", "deactivate", "delete", "update-category", "update-price"]
    data: dict[str, Any] = Field(default_factory=dict)


class AdjustStockRequest(BaseModel):
    quantity_change: int


class VariantRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)
    sku: str | None = Field(None, max_length=100)
    stock_quantity: int = Field(0, ge=0)
    is_default: bool = False
    flavor: str | None = Field(None, max_length=100)
    size: str | None = Field(None, max_length=100)
    type: str | None = Field(None, max_length=100)
    description: str | None = None
    is_available: bool = True
    attributes: dict[str, Any] | None = None


class UpdateVariantRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    price: float | None = Field(None, ge=0)
    sku: str | None = Field(None, max_length=100)
    stock_quantity: int | None = Field(None, ge=0)
    is_default: bool | None = None
    flavor: str | None = Field(None, max_length=100)
    size: str | None = Field(None, max_length=100)
    type: str | None = Field(None, max_length=100)
    description: str | None = None
    is_available: bool | None = None
    attributes: dict[str, Any] | None = None


class ImageRequest(BaseModel):
    url: str = Field(..., min_length=1, max_length=500)
    alt_text: str | None = Field(None, max_length=255)
    sort_order: int = 0
    is_main: bool = False


class TagLinkRequest(BaseModel):
    tag_id: str


class AllergenDeclarationRequest(BaseModel):
    contains_allergen: bool = True
    may_contain: bool = False


# --- Tag / Allergen Schemas ---


class TagRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: Literal["dietary", "occasion", "flavor", "special", "texture", "style", "other"]
    color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


class UpdateTagRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    type: Literal["dietary", "occasion", "flavor", "special", "texture", "style", "other"] | None = None
    color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")


class AllergenRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    severity: Literal["mild", "moderate", "severe"] | None = None


class UpdateAllergenRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    severity: Literal["mild", "moderate", "severe"] | None = None


# --- Response Schemas ---


class IdResponse(BaseModel):
    id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class CountResponse(BaseModel):
    count: int
