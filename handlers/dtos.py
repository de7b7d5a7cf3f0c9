# ============================================================================
# HANDLER DTOS
# ============================================================================
# STATUS: Core - Read models returned by handlers
# PURPOSE: Camel-cased response shapes mapped from table entities
# CREATED: 19 OCT 2026
# ============================================================================
"""
Handler DTOs

Handlers never return table entities. These models are what leaves the
handler layer; the HTTP layer serializes them as-is (camelCase by alias).
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from core.models import Address


class _Dto(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddressDto(_Dto):
    street1: str
    street2: Optional[str] = None
    city: str
    state: Optional[str] = None
    postal_code: str
    country: str

    @classmethod
    def from_address(cls, address: Address) -> "AddressDto":
        return cls(**address.model_dump())

    def to_address(self) -> Address:
        return Address(**self.model_dump())


class CreatedDto(_Dto):
    """Identity of a newly created resource."""
    id: uuid.UUID
    created_at: datetime
    total: Optional[Decimal] = None


class AccountDto(_Dto):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    address: AddressDto

    @classmethod
    def from_entity(cls, entity) -> "AccountDto":
        return cls(
            id=entity.id,
            first_name=entity.first_name,
            last_name=entity.last_name,
            email=entity.email,
            phone=entity.phone_number,
            is_active=entity.is_active,
            created_at=entity.created_utc,
            modified_at=entity.modified_utc,
            address=AddressDto.from_address(entity.address),
        )


class ProductDto(_Dto):
    id: uuid.UUID
    sku: str
    name: str
    description: Optional[str] = None
    base_price: float
    category: str
    is_active: bool
    created_at: datetime
    modified_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, entity) -> "ProductDto":
        return cls(
            id=entity.id,
            sku=entity.sku,
            name=entity.name,
            description=entity.description,
            base_price=entity.base_price,
            category=entity.category,
            is_active=entity.is_active,
            created_at=entity.created_utc,
            modified_at=entity.modified_utc,
        )


class OrderLineDto(_Dto):
    product_id: uuid.UUID
    product_sku: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderDto(_Dto):
    id: uuid.UUID
    account_id: uuid.UUID
    status: str
    lines: List[OrderLineDto]
    shipping_address: AddressDto
    sub_total: Decimal
    tax: Decimal
    total: Decimal
    ordered_at: datetime
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    tracking_number: Optional[str] = None

    @classmethod
    def from_entity(cls, entity) -> "OrderDto":
        return cls(
            id=entity.id,
            account_id=uuid.UUID(entity.account_id),
            status=entity.status,
            lines=[
                OrderLineDto(
                    product_id=line.product_id,
                    product_sku=line.product_sku,
                    product_name=line.product_name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    line_total=line.line_total,
                )
                for line in entity.lines
            ],
            shipping_address=AddressDto.from_address(entity.shipping_address),
            sub_total=entity.sub_total,
            tax=entity.tax,
            total=entity.total,
            ordered_at=entity.ordered_utc,
            shipped_at=entity.shipped_utc,
            delivered_at=entity.delivered_utc,
            tracking_number=entity.tracking_number,
        )


__all__ = [
    "AddressDto",
    "CreatedDto",
    "AccountDto",
    "ProductDto",
    "OrderLineDto",
    "OrderDto",
]
