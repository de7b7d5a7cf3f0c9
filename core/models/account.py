# ============================================================================
# ACCOUNT MODEL
# ============================================================================
# STATUS: Core model - Customer account and postal address
# PURPOSE: Domain representation of an account, independent of storage shape
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: Address, Account
# DEPENDENCIES: pydantic
# ============================================================================
"""
Account Model

An Account is a customer with a postal address. Accounts are stored in
hash-partitioned table rows; the address is flattened into Address_* columns
by the repository mapping layer and never seen flattened here.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class Address(BaseModel):
    """Postal address value object."""

    street1: str
    street2: Optional[str] = None
    city: str
    state: Optional[str] = None
    postal_code: str
    country: str

    model_config = {"frozen": True}

    @field_validator("street1", "city", "postal_code", "country")
    @classmethod
    def _required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("street2", "state")
    @classmethod
    def _optional(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class Account(BaseModel):
    """
    A customer account.

    Lifecycle:
        1. Created via AccountRepository.add (never upserted on creation)
        2. Mutated via AccountRepository.update (full row replace)
        3. Removed via AccountRepository.delete
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Address
    is_active: Optional[bool] = True

    @field_validator("first_name", "last_name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("first_name and last_name are required")
        return value.strip()

    @field_validator("email", "phone")
    @classmethod
    def _trim_optional(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)
