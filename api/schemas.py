# ============================================================================
# API SCHEMAS
# ============================================================================
# STATUS: Core - Request/Response schemas
# PURPOSE: Pydantic models for API validation
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Schemas

Request and response models for the API. JSON bodies are camelCase; Python
attributes are snake_case.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from core.contracts import OrderStatus
from handlers.dtos import AddressDto

T = TypeVar("T")


class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class AccountCreate(_Schema):
    """Request to create an account."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=256)
    phone: Optional[str] = Field(None, max_length=32)
    address: AddressDto

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "firstName": "Ada",
                    "lastName": "Lovelace",
                    "email": "ada@example.com",
                    "address": {
                        "street1": "12 St James's Square",
                        "city": "London",
                        "postalCode": "SW1Y 4JH",
                        "country": "GB",
                    },
                }
            ]
        },
    )


class AccountUpdate(_Schema):
    """Request to replace an account's details."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(None, max_length=256)
    phone: Optional[str] = Field(None, max_length=32)
    address: AddressDto
    is_active: Optional[bool] = None


class ProductCreate(_Schema):
    """Request to add a product to the catalog."""
    sku: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    base_price: float = Field(..., gt=0)
    category: str = Field(..., min_length=1, max_length=100)
    is_active: bool = True


class ProductUpdate(_Schema):
    """Request to replace a product's details."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    base_price: float = Field(..., gt=0)
    category: str = Field(..., min_length=1, max_length=100)
    is_active: bool = True


class OrderLineCreate(_Schema):
    product_id: str
    quantity: int = Field(..., ge=1)


class OrderCreate(_Schema):
    """Request to place an order. Ships to the account address by default."""
    account_id: str
    lines: List[OrderLineCreate] = Field(..., min_length=1)
    shipping_address: Optional[AddressDto] = None


class OrderStatusUpdate(_Schema):
    """Request to move an order to a new status."""
    status: OrderStatus
    tracking_number: Optional[str] = Field(None, max_length=64)


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class CreatedResponse(_Schema):
    """Identity and location of a created resource."""
    id: uuid.UUID
    location: str
    created_at: datetime
    total: Optional[Decimal] = None


class PagedResponse(_Schema, Generic[T]):
    """One page of results; pass continuationToken back for the next one."""
    items: List[T] = Field(default_factory=list)
    continuation_token: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str


__all__ = [
    "AccountCreate",
    "AccountUpdate",
    "ProductCreate",
    "ProductUpdate",
    "OrderLineCreate",
    "OrderCreate",
    "OrderStatusUpdate",
    "CreatedResponse",
    "PagedResponse",
    "ErrorResponse",
]
