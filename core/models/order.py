# ============================================================================
# ORDER MODEL
# ============================================================================
# STATUS: Core model - Customer order and order lines
# PURPOSE: Domain representation of an order with totals and status rules
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Order, OrderLine, TAX_RATE
# DEPENDENCIES: pydantic
# ============================================================================
"""
Order Model

An Order belongs to one account and is stored in the partition
"{account_id}-{yyyyMM}" of its order date, which bounds partition growth by
calendar month per account.

Status transitions are validated here; the repository only persists them.
"""

import uuid
from datetime import datetime, timezone
from decimal import ROUND_HALF_EVEN, Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from core.contracts import OrderStatus
from core.models.account import Address

TAX_RATE = Decimal("0.08")


class OrderLine(BaseModel):
    """One product line of an order, priced at order time."""

    product_id: uuid.UUID
    product_sku: str
    product_name: str
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., gt=0)

    model_config = {"frozen": True}

    @field_validator("product_sku", "product_name")
    @classmethod
    def _required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class Order(BaseModel):
    """
    A customer order.

    Lifecycle:
        1. Created SUBMITTED (or DRAFT) with at least one line
        2. update_status() walks SUBMITTED -> PROCESSING -> SHIPPED -> DELIVERED
        3. Any non-delivered order can be CANCELLED
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    account_id: uuid.UUID
    lines: List[OrderLine] = Field(..., min_length=1)
    shipping_address: Address
    ordered_utc: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: OrderStatus = OrderStatus.SUBMITTED
    shipped_utc: Optional[datetime] = None
    delivered_utc: Optional[datetime] = None
    tracking_number: Optional[str] = None

    @computed_field
    @property
    def sub_total(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))

    @computed_field
    @property
    def tax(self) -> Decimal:
        return (self.sub_total * TAX_RATE).quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)

    @computed_field
    @property
    def total(self) -> Decimal:
        return self.sub_total + self.tax

    def update_status(self, new_status: OrderStatus) -> None:
        """
        Move the order to new_status.

        Raises:
            ValueError: If the transition is not allowed
        """
        if not self.status.can_transition_to(new_status):
            raise ValueError(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )

        self.status = new_status
        now = datetime.now(timezone.utc)
        if new_status == OrderStatus.SHIPPED and self.shipped_utc is None:
            self.shipped_utc = now
        if new_status == OrderStatus.DELIVERED and self.delivered_utc is None:
            self.delivered_utc = now

    def set_tracking(self, tracking_number: str) -> None:
        if not tracking_number or not tracking_number.strip():
            raise ValueError("Tracking number cannot be empty")
        self.tracking_number = tracking_number.strip()
