# ============================================================================
# ADDRESS COLUMN MAPPING
# ============================================================================
# STATUS: Core - Flattened address mapping
# PURPOSE: Convert Address value objects to and from prefixed table columns
# CREATED: 19 OCT 2026
# ============================================================================
"""
Address Column Mapping

Table rows have no nested values, so an Address is stored as one column per
field under a prefix: Address_Street1, ShippingAddress_City, ...

Wire entities declare those columns as snake_case fields
(address_street1, shipping_address_city, ...); these helpers are the only
place the two shapes meet.
"""

from typing import Any, Dict

from core.models import Address

ADDRESS_FIELDS = ("street1", "street2", "city", "state", "postal_code", "country")


def address_columns(address: Address, prefix: str) -> Dict[str, Any]:
    """Entity field values for an address, e.g. {"address_city": "Oslo", ...}."""
    return {f"{prefix}_{name}": getattr(address, name) for name in ADDRESS_FIELDS}


def address_from_columns(entity: Any, prefix: str) -> Address:
    """Rebuild the Address stored under prefix on a wire entity."""
    return Address(**{name: getattr(entity, f"{prefix}_{name}") for name in ADDRESS_FIELDS})


__all__ = [
    "ADDRESS_FIELDS",
    "address_columns",
    "address_from_columns",
]
