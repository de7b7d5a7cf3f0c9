# ============================================================================
# PRODUCT MODEL
# ============================================================================
# STATUS: Core model - Catalog product
# PURPOSE: Domain representation of a sellable product
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Product, normalize_category
# DEPENDENCIES: pydantic
# ============================================================================
"""
Product Model

Products are partitioned by their normalized category name, so the category
is also the unit of efficient catalog scans.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def normalize_category(category: str) -> str:
    """Trim and lower-case a category name for use as a partition key."""
    return category.strip().lower()


class Product(BaseModel):
    """A product in the catalog."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    sku: str = Field(..., max_length=50)
    name: str = Field(..., max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    base_price: float = Field(..., gt=0)
    category: str = Field(..., max_length=100)
    is_active: bool = True
    created_utc: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("sku", "name", "category")
    @classmethod
    def _required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("description")
    @classmethod
    def _trim(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else None

    @property
    def partition_key(self) -> str:
        return normalize_category(self.category)
